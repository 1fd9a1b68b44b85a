"""Issue records returned by the Redmine adapter."""

from typing import Literal

from pydantic import BaseModel, ConfigDict

PriorityName = Literal["Low", "Normal", "High", "Urgent", "Immediate"]
TrackerName = Literal["Bug", "Feature", "Support"]

PRIORITY_NAMES: dict[int, PriorityName] = {
    3: "Low",
    4: "Normal",
    5: "High",
    6: "Urgent",
    7: "Immediate",
}

TRACKER_NAMES: dict[int, TrackerName] = {
    1: "Bug",
    2: "Feature",
    3: "Support",
}

DEFAULT_PRIORITY_ID = 4
DEFAULT_TRACKER_ID = 2


def priority_name(priority_id: int) -> PriorityName:
    """Resolve a priority id, falling back to ``Normal``."""
    return PRIORITY_NAMES.get(priority_id, "Normal")


def tracker_name(tracker_id: int) -> TrackerName:
    """Resolve a tracker id, falling back to ``Feature``."""
    return TRACKER_NAMES.get(tracker_id, "Feature")


class RemoteIssue(BaseModel):
    """An issue created in Redmine.

    Attributes:
        id: Numeric issue id assigned by Redmine.
        url: Browsable URL of the issue.
        subject: Issue title as submitted.
        priority: Display name of the priority.
        tracker: Display name of the tracker.
    """

    model_config = ConfigDict(frozen=True)

    id: int
    url: str
    subject: str
    priority: PriorityName
    tracker: TrackerName
