"""Single entry point that routes tool calls to adapters.

Whatever an adapter returns or raises, :meth:`ToolDispatcher.dispatch` hands
back a :class:`ResponseEnvelope`. Nothing raised by an adapter crosses this
boundary.
"""

from typing import Any, List, Mapping, Optional

from typing_extensions import assert_never

from ..core.config import BridgeConfig
from ..core.envelope import ResponseEnvelope
from ..core.exceptions import (
    BackendError,
    BridgeError,
    ConfigurationError,
    InvalidInputError,
    ProtocolError,
    TransportError,
    UnknownToolError,
)
from ..core.logger import get_logger
from ..core.messages import render
from ..core.transport import HttpTransport, HttpxTransport
from ..integrations.gitlab import GitLabClient
from ..integrations.redmine import RedmineClient
from ..integrations.smart_light import control_light
from ..mcp_stream import MCPStreamClient
from .models import (
    TOOL_CALL_TYPES,
    ApproveMergeRequestCall,
    ControlLightCall,
    CreateRedmineIssueCall,
    GetMergeRequestChangesCall,
    GetMergeRequestCommitsCall,
    GetMergeRequestNotesCall,
    ListMergeRequestsCall,
    MCPCallToolCall,
    MCPListToolsCall,
    PostInlineCommentCall,
    PostMergeRequestNoteCall,
    ToolCall,
    ToolDefinition,
    arguments_model,
    parse_tool_call,
    tool_description,
)
from .schema import SchemaValidator

logger = get_logger(__name__)


class ToolDispatcher:
    """
    Routes :data:`ToolCall` variants to the Redmine, GitLab, MCP and
    smart-light adapters and normalizes every outcome.
    """

    def __init__(
        self,
        config: BridgeConfig,
        transport: Optional[HttpTransport] = None,
        *,
        redmine: Optional[RedmineClient] = None,
        gitlab: Optional[GitLabClient] = None,
        mcp: Optional[MCPStreamClient] = None,
    ):
        """
        Args:
            config: Read-only settings shared by the adapters.
            transport: HTTP transport; an ``HttpxTransport`` with the configured
                timeout is created when omitted.
            redmine: Optional pre-built Redmine adapter.
            gitlab: Optional pre-built GitLab adapter.
            mcp: Optional pre-built MCP stream client.
        """
        self.config = config
        self.transport = transport or HttpxTransport(timeout=config.http_timeout)
        self.redmine = redmine or RedmineClient(config, self.transport)
        self.gitlab = gitlab or GitLabClient(config, self.transport)
        self.mcp = mcp or MCPStreamClient(config.mcp_server_url, self.transport)

    async def aclose(self) -> None:
        await self.transport.aclose()

    async def __aenter__(self) -> "ToolDispatcher":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    @property
    def tool_names(self) -> List[str]:
        return list(TOOL_CALL_TYPES)

    def tool_definitions(self) -> List[ToolDefinition]:
        """Describe every tool with its argument schema, for handing to an LLM."""
        return [
            ToolDefinition(
                name=name,
                description=tool_description(variant),
                parameters=SchemaValidator.parameters_for(arguments_model(variant)),
            )
            for name, variant in TOOL_CALL_TYPES.items()
        ]

    async def dispatch(self, call: Any) -> ResponseEnvelope:
        """Execute a tool call and return its envelope.

        Args:
            call: A :data:`ToolCall` variant or a mapping ``{"name", "arguments"}``
                whose ``arguments`` may also be a JSON string.

        Returns:
            The normalized result. This method does not raise.
        """
        raw_name = getattr(call, "name", None) or (call.get("name") if isinstance(call, Mapping) else None)
        tool_name = str(raw_name) if raw_name else "<unknown>"

        try:
            parsed = parse_tool_call(call)
        except UnknownToolError as exc:
            logger.warning("Rejected call to unknown tool '%s'.", tool_name)
            return ResponseEnvelope.fail(render("unknown_tool", name=tool_name), error=str(exc))
        except InvalidInputError as exc:
            logger.warning("Invalid arguments for '%s': %s", tool_name, exc)
            return ResponseEnvelope.fail(render("invalid_input", detail=exc), error=str(exc))

        logger.info("Dispatching tool '%s'...", parsed.name)
        try:
            envelope = await self._route(parsed)
        except BridgeError as exc:
            return self._from_error(parsed, exc)
        except Exception as exc:
            logger.error("Unexpected error in tool '%s'", parsed.name, exc_info=True)
            return ResponseEnvelope.fail(render("unexpected", name=parsed.name), error=type(exc).__name__)

        log = logger.info if envelope.success else logger.warning
        log("Tool '%s' finished (success=%s).", parsed.name, envelope.success)
        return envelope

    async def _route(self, call: ToolCall) -> ResponseEnvelope:
        if isinstance(call, CreateRedmineIssueCall):
            args = call.arguments
            issue = await self.redmine.create_issue(
                subject=args.subject,
                description=args.description,
                priority_id=args.priority_id,
                tracker_id=args.tracker_id,
                estimated_hours=args.estimated_hours,
            )
            return ResponseEnvelope.ok(render("redmine_created", issue_id=issue.id), data=issue.model_dump())

        if isinstance(call, ControlLightCall):
            try:
                state = control_light(call.arguments.action, call.arguments.brightness)
            except InvalidInputError as exc:
                logger.warning("Light control rejected: %s", exc)
                if call.arguments.action == "on":
                    message = render("light_brightness_invalid", brightness=call.arguments.brightness)
                else:
                    message = render("light_invalid", action=call.arguments.action)
                return ResponseEnvelope.fail(message, error=str(exc))
            if state.power == "on":
                message = render("light_on", brightness=state.brightness)
            else:
                message = render("light_off")
            return ResponseEnvelope.ok(message, data=state.model_dump())

        if isinstance(call, ListMergeRequestsCall):
            merge_requests = await self.gitlab.list_merge_requests(call.arguments.project_path, call.arguments.state)
            count = len(merge_requests) if isinstance(merge_requests, list) else 0
            return ResponseEnvelope.ok(
                render("gitlab_mr_listed", count=count, state=call.arguments.state), data=merge_requests
            )

        if isinstance(call, GetMergeRequestChangesCall):
            changes = await self.gitlab.get_merge_request_changes(call.arguments.project_path, call.arguments.mr_iid)
            return ResponseEnvelope.ok(render("gitlab_changes", mr_iid=call.arguments.mr_iid), data=changes)

        if isinstance(call, GetMergeRequestNotesCall):
            notes = await self.gitlab.get_merge_request_notes(call.arguments.project_path, call.arguments.mr_iid)
            count = len(notes) if isinstance(notes, list) else 0
            return ResponseEnvelope.ok(render("gitlab_notes", count=count, mr_iid=call.arguments.mr_iid), data=notes)

        if isinstance(call, GetMergeRequestCommitsCall):
            commits = await self.gitlab.get_merge_request_commits(call.arguments.project_path, call.arguments.mr_iid)
            count = len(commits) if isinstance(commits, list) else 0
            return ResponseEnvelope.ok(
                render("gitlab_commits", count=count, mr_iid=call.arguments.mr_iid), data=commits
            )

        if isinstance(call, PostMergeRequestNoteCall):
            args = call.arguments
            note = await self.gitlab.post_merge_request_note(args.project_id, args.mr_iid, args.body)
            return ResponseEnvelope.ok(render("gitlab_note_posted", mr_iid=args.mr_iid), data=note)

        if isinstance(call, PostInlineCommentCall):
            args = call.arguments
            discussion = await self.gitlab.post_merge_request_inline_comment(
                args.project_id, args.mr_iid, args.body, args.position
            )
            return ResponseEnvelope.ok(render("gitlab_inline_posted", mr_iid=args.mr_iid), data=discussion)

        if isinstance(call, ApproveMergeRequestCall):
            approval = await self.gitlab.approve_merge_request(call.arguments.project_id, call.arguments.mr_iid)
            return ResponseEnvelope.ok(render("gitlab_approved", mr_iid=call.arguments.mr_iid), data=approval)

        if isinstance(call, MCPCallToolCall):
            return await self.mcp.call_tool(call.arguments.tool, dict(call.arguments.arguments))

        if isinstance(call, MCPListToolsCall):
            tools = await self.mcp.list_tools()
            return ResponseEnvelope.ok(
                render("mcp_tools_listed", count=len(tools)), data=[tool.model_dump() for tool in tools]
            )

        assert_never(call)

    @staticmethod
    def _from_error(call: ToolCall, exc: BridgeError) -> ResponseEnvelope:
        """Map an adapter exception to a failed envelope."""
        tool_name = call.name
        if isinstance(exc, ConfigurationError):
            logger.error("Tool '%s' is not configured: %s", tool_name, ", ".join(exc.missing))
            missing = ", ".join(exc.missing)
            return ResponseEnvelope.fail(str(exc), error=f"Missing configuration: {missing}" if missing else str(exc))

        if isinstance(exc, InvalidInputError):
            logger.warning("Tool '%s' rejected its input: %s", tool_name, exc)
            return ResponseEnvelope.fail(render("invalid_input", detail=exc), error=str(exc))

        if isinstance(exc, TransportError):
            logger.error("Transport failure in tool '%s': %s", tool_name, exc)
            return ResponseEnvelope.fail(render("transport_failed", service=call.service, detail=exc), error=str(exc))

        if isinstance(exc, (BackendError, ProtocolError)):
            logger.error("Tool '%s' failed: %s", tool_name, exc)
        else:
            logger.error("Tool '%s' failed with %s: %s", tool_name, type(exc).__name__, exc)

        message = render(call.failure_key, detail=exc) if call.failure_key else str(exc)
        return ResponseEnvelope.fail(message, error=str(exc))
