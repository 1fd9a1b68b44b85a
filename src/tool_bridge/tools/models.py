"""Tool call variants and their argument models.

The tool set is closed: every tool is one pydantic model tagged by a literal
``name`` and carrying its own ``arguments`` model. :data:`ToolCall` is the
discriminated union of all variants.
"""

import inspect
import json
from typing import Annotated, Any, ClassVar, Dict, Literal, Mapping, Optional, Type, Union, get_args

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from ..core.exceptions import InvalidInputError, UnknownToolError
from ..integrations.redmine.models import DEFAULT_PRIORITY_ID, DEFAULT_TRACKER_ID

ProjectRef = Union[int, Annotated[str, Field(min_length=1)]]


class _Args(BaseModel):
    model_config = ConfigDict(frozen=True)


class CreateIssueArgs(_Args):
    subject: Annotated[str, Field(min_length=1, description="Issue title.")]
    description: Annotated[Optional[str], Field(description="Issue description.")] = None
    priority_id: Annotated[
        int, Field(description="Priority: 3=Low, 4=Normal, 5=High, 6=Urgent, 7=Immediate.")
    ] = DEFAULT_PRIORITY_ID
    tracker_id: Annotated[int, Field(description="Tracker: 1=Bug, 2=Feature, 3=Support.")] = DEFAULT_TRACKER_ID
    estimated_hours: Annotated[Optional[float], Field(ge=0, description="Estimated effort in hours.")] = None


class ControlLightArgs(_Args):
    action: Annotated[str, Field(description="'on' or 'off'.")]
    brightness: Annotated[
        Optional[int], Field(description="Brightness 0-100, only used with 'on'. Defaults to 100.")
    ] = None


class ListMergeRequestsArgs(_Args):
    project_path: Annotated[ProjectRef, Field(description="Project path, e.g. 'group/repo', or numeric project id.")]
    state: Annotated[
        Literal["opened", "closed", "merged", "all"], Field(description="Merge request state filter.")
    ] = "opened"


class MergeRequestArgs(_Args):
    project_path: Annotated[ProjectRef, Field(description="Project path, e.g. 'group/repo', or numeric project id.")]
    mr_iid: Annotated[int, Field(ge=1, description="Merge request IID within the project.")]


class PostNoteArgs(_Args):
    project_id: Annotated[ProjectRef, Field(description="Numeric project id or project path.")]
    mr_iid: Annotated[int, Field(ge=1, description="Merge request IID within the project.")]
    body: Annotated[str, Field(min_length=1, description="Comment text (Markdown).")]


class InlineCommentArgs(PostNoteArgs):
    position: Annotated[
        Dict[str, Any],
        Field(description="GitLab diff position (base_sha, start_sha, head_sha, position_type, new_path, new_line, ...)."),
    ]


class ApproveArgs(_Args):
    project_id: Annotated[ProjectRef, Field(description="Numeric project id or project path.")]
    mr_iid: Annotated[int, Field(ge=1, description="Merge request IID within the project.")]


class MCPCallArgs(_Args):
    tool: Annotated[str, Field(min_length=1, description="Name of the tool on the MCP server.")]
    arguments: Annotated[Dict[str, Any], Field(description="Arguments forwarded to the remote tool.")] = {}


class NoArgs(_Args):
    pass


class _Call(BaseModel):
    model_config = ConfigDict(frozen=True)

    # catalog key of the failure message and the backend named to the user
    failure_key: ClassVar[Optional[str]] = None
    service: ClassVar[str] = "tool"


class _RedmineCall(_Call):
    failure_key = "redmine_failed"
    service = "Redmine"


class _GitLabCall(_Call):
    failure_key = "gitlab_failed"
    service = "GitLab"


class _MCPCall(_Call):
    failure_key = "mcp_failed"
    service = "MCP server"


class CreateRedmineIssueCall(_RedmineCall):
    """Create an issue in the default Redmine project."""

    name: Literal["create_redmine_issue"]
    arguments: CreateIssueArgs


class ControlLightCall(_Call):
    """Turn the smart light on (optionally at a brightness) or off."""

    name: Literal["control_light"]
    arguments: ControlLightArgs


class ListMergeRequestsCall(_GitLabCall):
    """List the merge requests of a GitLab project."""

    name: Literal["gitlab_list_merge_requests"]
    arguments: ListMergeRequestsArgs


class GetMergeRequestChangesCall(_GitLabCall):
    """Get a merge request together with its diff."""

    name: Literal["gitlab_get_merge_request_changes"]
    arguments: MergeRequestArgs


class GetMergeRequestNotesCall(_GitLabCall):
    """Get the comments of a merge request."""

    name: Literal["gitlab_get_merge_request_notes"]
    arguments: MergeRequestArgs


class GetMergeRequestCommitsCall(_GitLabCall):
    """Get the commits of a merge request."""

    name: Literal["gitlab_get_merge_request_commits"]
    arguments: MergeRequestArgs


class PostMergeRequestNoteCall(_GitLabCall):
    """Post a general comment on a merge request."""

    name: Literal["gitlab_post_merge_request_note"]
    arguments: PostNoteArgs


class PostInlineCommentCall(_GitLabCall):
    """Post a comment anchored to a file and line of a merge request diff."""

    name: Literal["gitlab_post_inline_comment"]
    arguments: InlineCommentArgs


class ApproveMergeRequestCall(_GitLabCall):
    """Approve a merge request."""

    name: Literal["gitlab_approve_merge_request"]
    arguments: ApproveArgs


class MCPCallToolCall(_MCPCall):
    """Call a tool on the remote MCP server."""

    name: Literal["mcp_call_tool"]
    arguments: MCPCallArgs


class MCPListToolsCall(_MCPCall):
    """List the tools the remote MCP server provides."""

    name: Literal["mcp_list_tools"]
    arguments: NoArgs = NoArgs()


ToolCall = Annotated[
    Union[
        CreateRedmineIssueCall,
        ControlLightCall,
        ListMergeRequestsCall,
        GetMergeRequestChangesCall,
        GetMergeRequestNotesCall,
        GetMergeRequestCommitsCall,
        PostMergeRequestNoteCall,
        PostInlineCommentCall,
        ApproveMergeRequestCall,
        MCPCallToolCall,
        MCPListToolsCall,
    ],
    Field(discriminator="name"),
]

TOOL_CALL_TYPES: Dict[str, Type[_Call]] = {
    get_args(variant.model_fields["name"].annotation)[0]: variant for variant in get_args(get_args(ToolCall)[0])
}

_tool_call_adapter: TypeAdapter[Any] = TypeAdapter(ToolCall)


class ToolDefinition(BaseModel):
    """
    Describes one bridge tool for an LLM.

    Attributes:
        name: The unique name of the tool.
        description: What the tool does.
        parameters: JSON schema of the tool's arguments.
    """

    name: str
    description: str
    parameters: Dict[str, Any]


def arguments_model(variant: Type[_Call]) -> Type[BaseModel]:
    return variant.model_fields["arguments"].annotation  # type: ignore[return-value]


def tool_description(variant: Type[_Call]) -> str:
    return inspect.getdoc(variant) or ""


def normalize_arguments(tool_name: str, raw_args: Any) -> Dict[str, Any]:
    """Normalize tool arguments into a dictionary.

    Accepts a mapping, a JSON string or ``None``.

    Raises:
        InvalidInputError: If the arguments cannot be turned into an object.
    """
    if raw_args is None or raw_args == "":
        return {}

    if isinstance(raw_args, Mapping):
        return dict(raw_args)

    if isinstance(raw_args, str):
        try:
            parsed = json.loads(raw_args)
        except json.JSONDecodeError as exc:
            raise InvalidInputError(f"Failed to parse arguments for tool '{tool_name}': {exc}") from exc

        if parsed is None:
            return {}
        if not isinstance(parsed, dict):
            raise InvalidInputError(f"Arguments for tool '{tool_name}' must decode to a JSON object.")
        return parsed

    raise InvalidInputError(f"Arguments for tool '{tool_name}' must be an object, got {type(raw_args).__name__}.")


def _format_validation_error(tool_name: str, exc: ValidationError) -> str:
    problems = []
    for err in exc.errors():
        # drop the leading "<tool name>" / "arguments" segments pydantic adds
        loc = [str(part) for part in err["loc"] if part not in (tool_name, "arguments")]
        problems.append(f"{'.'.join(loc) or 'arguments'}: {err['msg']}")
    return f"Invalid arguments for tool '{tool_name}': " + "; ".join(problems)


def parse_tool_call(raw: Any) -> ToolCall:
    """Turn ``{"name": ..., "arguments": ...}`` into its :data:`ToolCall` variant.

    Variant instances are returned unchanged.

    Raises:
        UnknownToolError: If the name is not one of the bridge's tools.
        InvalidInputError: If the call or its arguments are malformed.
    """
    if isinstance(raw, tuple(TOOL_CALL_TYPES.values())):
        return raw

    if isinstance(raw, BaseModel):
        raw = raw.model_dump()
    if not isinstance(raw, Mapping):
        raise InvalidInputError(f"Tool call must be an object, got {type(raw).__name__}.")

    name = raw.get("name")
    if not isinstance(name, str) or name not in TOOL_CALL_TYPES:
        raise UnknownToolError(f"Unknown tool '{name}'")

    arguments = normalize_arguments(name, raw.get("arguments"))
    try:
        return _tool_call_adapter.validate_python({"name": name, "arguments": arguments})
    except ValidationError as exc:
        raise InvalidInputError(_format_validation_error(name, exc)) from exc
