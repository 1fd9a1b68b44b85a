"""Merge-request operations against the GitLab REST API (v4)."""

import json
from typing import Any, Dict, Literal, Optional, Union
from urllib.parse import quote

from ...core.config import BridgeConfig
from ...core.exceptions import BackendError, ConfigurationError, InvalidInputError, ProtocolError
from ...core.logger import get_logger
from ...core.messages import render
from ...core.transport import HttpTransport

logger = get_logger(__name__)

MergeRequestState = Literal["opened", "closed", "merged", "all"]
MERGE_REQUEST_STATES = ("opened", "closed", "merged", "all")

ProjectRef = Union[int, str]


def encode_project(project: ProjectRef) -> str:
    """Encode a project id or path for use as a single URL path segment.

    Paths such as ``group/repo`` become ``group%2Frepo``; numeric ids are
    returned unchanged. The value is encoded exactly once.
    """
    if isinstance(project, int) and not isinstance(project, bool):
        return str(project)
    return quote(str(project), safe="")


class GitLabClient:
    """Adapter for GitLab merge-request endpoints.

    Responses are returned as decoded JSON without reshaping.
    """

    def __init__(self, config: BridgeConfig, transport: HttpTransport):
        self._config = config
        self._transport = transport

    @property
    def api_url(self) -> str:
        return f"{self._config.gitlab_url}/api/v4"

    async def _request(self, endpoint: str, method: str = "GET", payload: Optional[Dict[str, Any]] = None) -> Any:
        """Perform one authenticated API call.

        Raises:
            ConfigurationError: If no token is configured (before any request).
            TransportError: On network failure.
            BackendError: On a non-2xx status; carries status and body.
            ProtocolError: If a 2xx body is not valid JSON.
        """
        token = self._config.gitlab_token
        if not token:
            logger.error("GITLAB_TOKEN not configured")
            raise ConfigurationError(render("config_missing", service="GitLab", settings="GITLAB_TOKEN"), ["GITLAB_TOKEN"])

        url = f"{self.api_url}{endpoint}"
        logger.info("GitLab %s %s", method, endpoint)
        response = await self._transport.request(
            method,
            url,
            headers={"PRIVATE-TOKEN": token, "Content-Type": "application/json"},
            body=json.dumps(payload) if payload is not None else None,
        )

        if not response.ok:
            logger.error("GitLab API error %d: %s", response.status, response.text[:200])
            raise BackendError(
                f"GitLab API error {response.status}: {response.text}", status=response.status, body=response.text
            )

        if not response.text.strip():
            return None
        try:
            return json.loads(response.text)
        except json.JSONDecodeError as exc:
            raise ProtocolError(f"GitLab returned invalid JSON for {endpoint}: {exc}") from exc

    async def list_merge_requests(self, project_path: ProjectRef, state: MergeRequestState = "opened") -> Any:
        """List merge requests of a project.

        Args:
            project_path: Project path (e.g. ``"group/repo"``) or numeric id.
            state: ``opened``, ``closed``, ``merged`` or ``all``.
        """
        if state not in MERGE_REQUEST_STATES:
            raise InvalidInputError(f"Unsupported merge request state '{state}'")
        return await self._request(f"/projects/{encode_project(project_path)}/merge_requests?state={state}")

    async def get_merge_request_changes(self, project_path: ProjectRef, mr_iid: int) -> Any:
        """Return the merge request together with its diffs."""
        return await self._request(f"/projects/{encode_project(project_path)}/merge_requests/{mr_iid}/changes")

    async def get_merge_request_notes(self, project_path: ProjectRef, mr_iid: int) -> Any:
        return await self._request(f"/projects/{encode_project(project_path)}/merge_requests/{mr_iid}/notes")

    async def get_merge_request_commits(self, project_path: ProjectRef, mr_iid: int) -> Any:
        return await self._request(f"/projects/{encode_project(project_path)}/merge_requests/{mr_iid}/commits")

    async def post_merge_request_note(self, project_id: ProjectRef, mr_iid: int, body: str) -> Any:
        """Add a general comment to a merge request.

        Raises:
            InvalidInputError: If ``body`` is empty.
        """
        if not body or not body.strip():
            raise InvalidInputError("Comment body must not be empty")
        return await self._request(
            f"/projects/{encode_project(project_id)}/merge_requests/{mr_iid}/notes", method="POST", payload={"body": body}
        )

    async def post_merge_request_inline_comment(
        self, project_id: ProjectRef, mr_iid: int, body: str, position: Dict[str, Any]
    ) -> Any:
        """Start a discussion anchored to a diff position.

        ``position`` is sent as given (``base_sha``, ``new_path``, ``new_line``
        and so on); GitLab decides whether it is valid.
        """
        if not body or not body.strip():
            raise InvalidInputError("Comment body must not be empty")
        return await self._request(
            f"/projects/{encode_project(project_id)}/merge_requests/{mr_iid}/discussions",
            method="POST",
            payload={"body": body, "position": position},
        )

    async def approve_merge_request(self, project_id: ProjectRef, mr_iid: int) -> Any:
        return await self._request(
            f"/projects/{encode_project(project_id)}/merge_requests/{mr_iid}/approve", method="POST"
        )
