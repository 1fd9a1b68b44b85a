"""Redmine issue-tracker adapter."""

from .client import RedmineClient
from .models import RemoteIssue, PRIORITY_NAMES, TRACKER_NAMES, priority_name, tracker_name

__all__ = ["RedmineClient", "RemoteIssue", "PRIORITY_NAMES", "TRACKER_NAMES", "priority_name", "tracker_name"]
