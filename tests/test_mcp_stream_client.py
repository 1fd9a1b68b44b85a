import json
from typing import Any, Callable, Dict, List

import httpx
import pytest

from tool_bridge import BackendError, MCPStreamClient, ProtocolError, RemoteTool
from tool_bridge.mcp_stream import FAILURE_MARKER

SERVER_URL = "https://mcp.example.com/api/mcp"


def _client(make_transport: Any, status: int, body: str) -> MCPStreamClient:
    return MCPStreamClient(SERVER_URL, make_transport(lambda request: httpx.Response(status, text=body)))


@pytest.mark.asyncio
async def test_text_result_is_success(make_transport: Any, sse: Callable, text_result: Callable) -> None:
    client = _client(make_transport, 200, sse(text_result("X")))

    result = await client.call_tool("create_issue", {"subject": "Fix bug"})

    assert result.success is True
    assert result.data == "X"
    assert result.message == "X"
    assert result.error is None


@pytest.mark.asyncio
async def test_request_shape(
    make_transport: Any, requests_seen: List[httpx.Request], sse: Callable, text_result: Callable
) -> None:
    client = _client(make_transport, 200, sse(text_result("ok")))

    await client.call_tool("list_projects", {"limit": 5})

    request = requests_seen[0]
    assert request.method == "POST"
    assert str(request.url) == SERVER_URL
    assert request.headers["content-type"] == "application/json"
    assert request.headers["accept"] == "application/json, text/event-stream"
    body = json.loads(request.content)
    assert body["jsonrpc"] == "2.0"
    assert isinstance(body["id"], int)
    assert body["method"] == "tools/call"
    assert body["params"] == {"name": "list_projects", "arguments": {"limit": 5}}


@pytest.mark.asyncio
async def test_missing_frame_is_malformed_stream(make_transport: Any) -> None:
    client = _client(make_transport, 200, "event: message\n\n")

    result = await client.call_tool("anything")

    assert result.success is False
    assert "Malformed stream" in (result.error or "")
    assert result.message


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [200, 202, 400, 500, 502])
async def test_missing_frame_fails_regardless_of_status(make_transport: Any, status: int) -> None:
    client = _client(make_transport, status, "<html>gateway says no</html>")

    result = await client.call_tool("anything")

    assert result.success is False
    assert "Malformed stream" in (result.error or "")


@pytest.mark.asyncio
async def test_failure_marker_reclassifies_success(make_transport: Any, sse: Callable, text_result: Callable) -> None:
    text = f"{FAILURE_MARKER}: project not found"
    client = _client(make_transport, 200, sse(text_result(text)))

    result = await client.call_tool("create_issue", {"subject": "x"})

    assert result.success is False
    assert result.message == text
    assert result.error is not None


@pytest.mark.asyncio
async def test_non_text_result_falls_back_to_raw_result(make_transport: Any, sse: Callable) -> None:
    structured = {"content": [{"type": "image", "data": "...", "mimeType": "image/png"}], "isError": False}
    client = _client(make_transport, 200, sse({"jsonrpc": "2.0", "id": 1, "result": structured}))

    result = await client.call_tool("render_chart")

    assert result.success is True
    assert result.data == structured
    assert result.message


@pytest.mark.asyncio
async def test_empty_text_falls_back_to_raw_result(make_transport: Any, sse: Callable, text_result: Callable) -> None:
    client = _client(make_transport, 200, sse(text_result("")))

    result = await client.call_tool("noop")

    assert result.success is True
    assert result.data == {"content": [{"type": "text", "text": ""}]}


@pytest.mark.asyncio
async def test_missing_result_is_protocol_violation(make_transport: Any, sse: Callable) -> None:
    client = _client(make_transport, 200, sse({"jsonrpc": "2.0", "id": 1}))

    result = await client.call_tool("anything")

    assert result.success is False
    assert "no 'result'" in (result.error or "")


@pytest.mark.asyncio
async def test_invalid_json_in_frame(make_transport: Any) -> None:
    client = _client(make_transport, 200, "data: {not json}\n\n")

    result = await client.call_tool("anything")

    assert result.success is False
    assert "Invalid JSON" in (result.error or "")


@pytest.mark.asyncio
async def test_http_error_status(make_transport: Any) -> None:
    client = _client(make_transport, 503, "data: {}\n\n")

    result = await client.call_tool("anything")

    assert result.success is False
    assert "MCP HTTP error: 503" in (result.error or "")
    assert "503" in result.message


@pytest.mark.asyncio
async def test_http_error_carries_rpc_error_message(make_transport: Any, sse: Callable) -> None:
    body = sse({"jsonrpc": "2.0", "id": 1, "error": {"code": -32602, "message": "Unknown tool"}})
    client = _client(make_transport, 400, body)

    result = await client.call_tool("missing_tool")

    assert result.success is False
    assert "-32602 Unknown tool" in (result.error or "")


@pytest.mark.asyncio
async def test_rpc_error_with_ok_status(make_transport: Any, sse: Callable) -> None:
    body = sse({"jsonrpc": "2.0", "id": 1, "error": {"code": -32601, "message": "Method not found"}})
    client = _client(make_transport, 200, body)

    result = await client.call_tool("x")

    assert result.success is False
    assert "JSON-RPC error" in (result.error or "")


@pytest.mark.asyncio
async def test_network_fault_is_converted(make_transport: Any) -> None:
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = MCPStreamClient(SERVER_URL, make_transport(refuse))

    result = await client.call_tool("anything")

    assert result.success is False
    assert "ConnectError" in (result.error or "")
    assert result.message.startswith("Lỗi khi gọi MCP tool")


@pytest.mark.asyncio
async def test_list_tools(make_transport: Any, requests_seen: List[httpx.Request], sse: Callable) -> None:
    tools: Dict[str, Any] = {
        "tools": [
            {"name": "create_issue", "description": "Create a Redmine issue", "inputSchema": {"type": "object"}},
            {"name": "list_projects"},
        ]
    }
    client = _client(make_transport, 200, sse({"jsonrpc": "2.0", "id": 1, "result": tools}))

    result = await client.list_tools()

    assert result == [
        RemoteTool(name="create_issue", description="Create a Redmine issue"),
        RemoteTool(name="list_projects", description=None),
    ]
    body = json.loads(requests_seen[0].content)
    assert body["method"] == "tools/list"
    assert body["params"] == {}


@pytest.mark.asyncio
async def test_list_tools_without_tools_key_is_empty(make_transport: Any, sse: Callable) -> None:
    client = _client(make_transport, 200, sse({"jsonrpc": "2.0", "id": 1, "result": {}}))
    assert await client.list_tools() == []


@pytest.mark.asyncio
async def test_list_tools_raises_typed_errors(make_transport: Any, sse: Callable) -> None:
    with pytest.raises(BackendError) as excinfo:
        await _client(make_transport, 500, "oops").list_tools()
    assert excinfo.value.status == 500

    with pytest.raises(ProtocolError):
        await _client(make_transport, 200, sse({"jsonrpc": "2.0", "id": 1, "result": {"tools": "nope"}})).list_tools()


@pytest.mark.asyncio
@pytest.mark.parametrize("separator", ["\u2028", "\u2029", "\x85"])
async def test_raw_unicode_separator_in_tool_text(
    make_transport: Any, text_result: Callable, separator: str
) -> None:
    text = f"line one{separator}line two"
    body = "event: message\ndata: " + json.dumps(text_result(text), ensure_ascii=False) + "\n\n"
    client = _client(make_transport, 200, body)

    result = await client.call_tool("get_issue")

    assert result.success is True
    assert result.data == text
