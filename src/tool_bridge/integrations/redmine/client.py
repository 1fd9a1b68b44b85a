"""Create issues through the Redmine REST API."""

import json
from typing import Any, Dict, Optional

from ...core.config import BridgeConfig
from ...core.exceptions import BackendError, ConfigurationError, ProtocolError
from ...core.logger import get_logger
from ...core.messages import render
from ...core.transport import HttpTransport
from .models import DEFAULT_PRIORITY_ID, DEFAULT_TRACKER_ID, RemoteIssue, priority_name, tracker_name

logger = get_logger(__name__)

REQUIRED_SETTINGS = ("redmine_url", "redmine_api_key", "redmine_project_id")


class RedmineClient:
    """Adapter for the Redmine issue tracker."""

    def __init__(self, config: BridgeConfig, transport: HttpTransport):
        self._config = config
        self._transport = transport

    def _require_config(self) -> None:
        missing = self._config.missing(*REQUIRED_SETTINGS)
        if missing:
            msg = render("config_missing", service="Redmine", settings=", ".join(missing))
            logger.error("Redmine is not configured, missing: %s", ", ".join(missing))
            raise ConfigurationError(msg, missing=missing)

    @staticmethod
    def build_payload(
        project_id: int,
        subject: str,
        description: Optional[str] = None,
        priority_id: int = DEFAULT_PRIORITY_ID,
        tracker_id: int = DEFAULT_TRACKER_ID,
        estimated_hours: Optional[float] = None,
    ) -> Dict[str, Any]:
        """Build the ``{"issue": {...}}`` body; unset optional fields are left out."""
        issue: Dict[str, Any] = {
            "project_id": project_id,
            "subject": subject,
            "tracker_id": tracker_id,
            "priority_id": priority_id,
        }
        if description:
            issue["description"] = description
        if estimated_hours is not None:
            issue["estimated_hours"] = estimated_hours
        return {"issue": issue}

    async def create_issue(
        self,
        subject: str,
        description: Optional[str] = None,
        priority_id: int = DEFAULT_PRIORITY_ID,
        tracker_id: int = DEFAULT_TRACKER_ID,
        estimated_hours: Optional[float] = None,
    ) -> RemoteIssue:
        """Create an issue in the configured default project.

        Args:
            subject: Issue title.
            description: Optional issue body.
            priority_id: 3=Low, 4=Normal, 5=High, 6=Urgent, 7=Immediate.
            tracker_id: 1=Bug, 2=Feature, 3=Support.
            estimated_hours: Optional estimate.

        Returns:
            The created issue.

        Raises:
            ConfigurationError: If URL, API key or project id is missing. No
                request is sent in that case.
            TransportError: On network failure.
            BackendError: If Redmine answers with a non-2xx status.
            ProtocolError: If the reply carries no issue id.
        """
        self._require_config()
        base_url = self._config.redmine_url
        logger.info("Creating Redmine issue: %s", subject)

        payload = self.build_payload(
            project_id=self._config.redmine_project_id,  # type: ignore[arg-type]
            subject=subject,
            description=description,
            priority_id=priority_id,
            tracker_id=tracker_id,
            estimated_hours=estimated_hours,
        )
        logger.debug("Redmine payload: %s", payload)

        response = await self._transport.request(
            "POST",
            f"{base_url}/issues.json",
            headers={
                "Content-Type": "application/json",
                "X-Redmine-API-Key": self._config.redmine_api_key,  # type: ignore[dict-item]
            },
            body=json.dumps(payload),
        )

        if not response.ok:
            logger.error("Redmine API error: %d %s", response.status, response.text[:200])
            raise BackendError(f"{response.status} - {response.text}", status=response.status, body=response.text)

        issue_id = self._parse_issue_id(response.text)
        logger.info("Redmine issue created: %s", issue_id)

        return RemoteIssue(
            id=issue_id,
            url=f"{base_url}/issues/{issue_id}",
            subject=subject,
            priority=priority_name(priority_id),
            tracker=tracker_name(tracker_id),
        )

    @staticmethod
    def _parse_issue_id(text: str) -> int:
        try:
            body = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ProtocolError(f"Redmine returned invalid JSON: {exc}") from exc

        issue = body.get("issue") if isinstance(body, dict) else None
        issue_id = issue.get("id") if isinstance(issue, dict) else None
        if not isinstance(issue_id, int) or isinstance(issue_id, bool):
            raise ProtocolError("Redmine response does not contain 'issue.id'")
        return issue_id
