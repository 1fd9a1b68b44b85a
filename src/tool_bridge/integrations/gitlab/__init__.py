"""GitLab merge-request adapter."""

from .client import GitLabClient, MERGE_REQUEST_STATES, MergeRequestState, encode_project

__all__ = ["GitLabClient", "MERGE_REQUEST_STATES", "MergeRequestState", "encode_project"]
