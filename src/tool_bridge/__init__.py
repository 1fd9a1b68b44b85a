"""Tool Bridge - one response envelope over MCP, Redmine, GitLab and device tools."""

from .core import (
    BridgeConfig,
    ResponseEnvelope,
    BridgeError,
    ConfigurationError,
    TransportError,
    BackendError,
    ProtocolError,
    MalformedStreamError,
    InvalidInputError,
    UnknownToolError,
    HttpResponse,
    HttpTransport,
    HttpxTransport,
    get_logger,
    setup_logging,
)
from .integrations import GitLabClient, RedmineClient, RemoteIssue, DeviceState, control_light
from .mcp_stream import MCPStreamClient, RemoteTool
from .tools import ToolCall, ToolDefinition, ToolDispatcher, parse_tool_call

__all__ = [
    "BridgeConfig",
    "ResponseEnvelope",
    "BridgeError",
    "ConfigurationError",
    "TransportError",
    "BackendError",
    "ProtocolError",
    "MalformedStreamError",
    "InvalidInputError",
    "UnknownToolError",
    "HttpResponse",
    "HttpTransport",
    "HttpxTransport",
    "get_logger",
    "setup_logging",
    "GitLabClient",
    "RedmineClient",
    "RemoteIssue",
    "DeviceState",
    "control_light",
    "MCPStreamClient",
    "RemoteTool",
    "ToolCall",
    "ToolDefinition",
    "ToolDispatcher",
    "parse_tool_call",
]
