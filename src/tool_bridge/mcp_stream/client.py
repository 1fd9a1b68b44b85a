"""Call tools on a remote MCP server over streamable HTTP.

Each call is one JSON-RPC request POSTed to the server. The reply arrives as a
short text event stream whose first ``data:`` frame holds the JSON-RPC
response. :meth:`MCPStreamClient.call_tool` folds every failure (network,
HTTP status, framing, JSON, missing result, tool-reported error) into a
:class:`ResponseEnvelope` and never raises.
"""

import json
import time
from typing import Any, Dict, Optional

from mcp.types import CallToolRequestParams, ErrorData, JSONRPCRequest
from pydantic import ValidationError

from ..core.envelope import ResponseEnvelope
from ..core.exceptions import BackendError, BridgeError, MalformedStreamError, ProtocolError
from ..core.logger import get_logger
from ..core.messages import render
from ..core.transport import HttpResponse, HttpTransport
from .models import RemoteTool
from .sse import first_data_payload

logger = get_logger(__name__)

__all__ = ["MCPStreamClient", "FAILURE_MARKER"]

# Tools on the server report their own failures inside a successful result.
FAILURE_MARKER = "❌ Error"

REQUEST_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json, text/event-stream",
}

_EXCERPT = 200


def _excerpt(value: Any) -> str:
    text = value if isinstance(value, str) else json.dumps(value, ensure_ascii=False, default=str)
    return text[:_EXCERPT] + "..." if len(text) > _EXCERPT else text


class MCPStreamClient:
    """Client for the JSON-RPC-over-event-stream tool server."""

    def __init__(self, server_url: str, transport: HttpTransport):
        """
        Args:
            server_url: MCP endpoint that accepts the JSON-RPC POSTs.
            transport: HTTP transport used for the single request per call.
        """
        self.server_url = server_url
        self._transport = transport

    async def call_tool(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> ResponseEnvelope:
        """Invoke ``name`` on the server and normalize the outcome.

        Args:
            name: Remote tool name.
            arguments: Tool arguments, forwarded unchanged.

        Returns:
            ``success=True`` with the tool's text as ``message`` and ``data``,
            or the raw ``result`` as ``data`` when the tool returned no text.
            Every failure yields ``success=False`` with ``error`` set.
        """
        logger.info("Calling MCP tool '%s'...", name)
        logger.debug("Tool arguments: %s", _excerpt(arguments or {}))
        params = CallToolRequestParams(name=name, arguments=arguments or {})

        try:
            message = await self._exchange("tools/call", params.model_dump(by_alias=True, exclude_none=True))
        except BridgeError as exc:
            logger.error("MCP tool '%s' failed: %s", name, exc)
            return ResponseEnvelope.fail(render("mcp_failed", detail=exc), error=str(exc))
        except Exception as exc:
            logger.error("Unexpected error calling MCP tool '%s'", name, exc_info=True)
            detail = f"{type(exc).__name__}: {exc}"
            return ResponseEnvelope.fail(render("mcp_failed", detail=detail), error=detail)

        result = message["result"]
        text = self._extract_text(result)
        if text is None:
            logger.info("MCP tool '%s' returned a non-text result.", name)
            return ResponseEnvelope.ok(render("mcp_ok"), data=result)

        protocol_outcome = ResponseEnvelope.ok(text, data=text)

        # Transport and protocol succeeded; the tool may still report failure in its text.
        if not self._reports_failure(text):
            logger.info("MCP tool '%s' succeeded.", name)
            return protocol_outcome

        logger.warning("MCP tool '%s' reported an error: %s", name, _excerpt(text))
        return ResponseEnvelope.fail(text, error=f"Tool '{name}' reported an error")

    async def list_tools(self) -> list[RemoteTool]:
        """Return the tools the server declares.

        Raises:
            TransportError: On network failure.
            BackendError: On a non-2xx status or a JSON-RPC error response.
            ProtocolError: If the reply cannot be understood.
        """
        logger.info("Listing MCP tools...")
        message = await self._exchange("tools/list", {})

        result = message["result"]
        tools = result.get("tools", []) if isinstance(result, dict) else None
        if not isinstance(tools, list):
            raise ProtocolError("tools/list result does not contain a 'tools' list")

        try:
            remote_tools = [RemoteTool.model_validate(tool) for tool in tools]
        except ValidationError as exc:
            raise ProtocolError(f"Invalid tool entry in tools/list result: {exc.error_count()} error(s)") from exc

        logger.info("Found %d MCP tools: %s", len(remote_tools), ", ".join(t.name for t in remote_tools))
        return remote_tools

    async def _exchange(self, method: str, params: Dict[str, Any]) -> Dict[str, Any]:
        """Send one JSON-RPC request and return the decoded response object.

        The returned object is guaranteed to carry a ``result`` member.
        """
        request = JSONRPCRequest(jsonrpc="2.0", id=self._next_id(), method=method, params=params)
        body = json.dumps(request.model_dump(by_alias=True, mode="json", exclude_none=True))

        response = await self._transport.request("POST", self.server_url, headers=REQUEST_HEADERS, body=body)
        logger.debug("Raw MCP response (%d): %s", response.status, _excerpt(response.text))

        if not response.ok:
            raise BackendError(self._describe_http_error(response), status=response.status, body=response.text)

        message = self._decode(first_data_payload(response.text))

        if message.get("result") is None:
            if "error" in message:
                detail = self._describe_rpc_error(message["error"])
                raise BackendError(f"MCP JSON-RPC error: {detail}", body=detail)
            raise ProtocolError("MCP response has no 'result' member")

        logger.debug("Parsed MCP result: %s", _excerpt(message["result"]))
        return message

    @staticmethod
    def _next_id() -> int:
        return time.time_ns() // 1_000_000

    @staticmethod
    def _decode(payload: str) -> Dict[str, Any]:
        try:
            decoded = json.loads(payload)
        except json.JSONDecodeError as exc:
            raise ProtocolError(f"Invalid JSON in 'data:' frame: {exc}") from exc
        if not isinstance(decoded, dict):
            raise ProtocolError("JSON-RPC response must be an object")
        return decoded

    @staticmethod
    def _extract_text(result: Any) -> Optional[str]:
        """Return ``result.content[0].text`` when it is a non-empty string."""
        if not isinstance(result, dict):
            return None
        content = result.get("content")
        if not isinstance(content, list) or not content or not isinstance(content[0], dict):
            return None
        text = content[0].get("text")
        return text if isinstance(text, str) and text else None

    @staticmethod
    def _reports_failure(text: str) -> bool:
        return FAILURE_MARKER in text

    @staticmethod
    def _describe_rpc_error(error: Any) -> str:
        try:
            data = ErrorData.model_validate(error)
        except ValidationError:
            return _excerpt(error)
        return f"{data.code} {data.message}"

    @classmethod
    def _describe_http_error(cls, response: HttpResponse) -> str:
        """Build the diagnostic for a non-2xx reply from whatever the body offers."""
        detail = f"MCP HTTP error: {response.status}"
        try:
            payload = first_data_payload(response.text)
        except MalformedStreamError as exc:
            return f"{detail} ({exc})"
        try:
            decoded = json.loads(payload)
        except json.JSONDecodeError:
            return detail
        if isinstance(decoded, dict) and "error" in decoded:
            return f"{detail} - {cls._describe_rpc_error(decoded['error'])}"
        return detail
