"""Client for MCP tool servers that answer JSON-RPC requests with an event stream."""

from .client import FAILURE_MARKER, MCPStreamClient
from .models import RemoteTool
from .sse import first_data_payload, iter_data_payloads

__all__ = ["MCPStreamClient", "FAILURE_MARKER", "RemoteTool", "first_data_payload", "iter_data_payloads"]
