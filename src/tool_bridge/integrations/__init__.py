"""Backend adapters: Redmine, GitLab and the mock smart light."""

from .gitlab import GitLabClient
from .redmine import RedmineClient, RemoteIssue
from .smart_light import DeviceState, control_light

__all__ = ["GitLabClient", "RedmineClient", "RemoteIssue", "DeviceState", "control_light"]
