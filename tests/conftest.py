import json
from typing import Any, Callable, Dict, List
from unittest.mock import AsyncMock

import httpx
import pytest

from tool_bridge import BridgeConfig, HttpTransport, HttpxTransport

Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture
def config() -> BridgeConfig:
    """A fully populated configuration pointing at fake hosts."""
    return BridgeConfig(
        redmine_url="https://redmine.example.com",
        redmine_api_key="redmine-secret",
        redmine_project_id=7,
        gitlab_url="https://gitlab.example.com",
        gitlab_token="glpat-test",
        mcp_server_url="https://mcp.example.com/api/mcp",
    )


@pytest.fixture
def requests_seen() -> List[httpx.Request]:
    return []


@pytest.fixture
def make_transport(requests_seen: List[httpx.Request]) -> Callable[[Handler], HttpxTransport]:
    """Build an HttpxTransport whose requests are answered by ``handler`` and recorded."""

    def factory(handler: Handler) -> HttpxTransport:
        def recording_handler(request: httpx.Request) -> httpx.Response:
            requests_seen.append(request)
            return handler(request)

        client = httpx.AsyncClient(transport=httpx.MockTransport(recording_handler))
        return HttpxTransport(client=client)

    return factory


@pytest.fixture
def silent_transport() -> Any:
    """A transport mock for asserting that no request is made."""
    return AsyncMock(spec=HttpTransport)


@pytest.fixture
def sse() -> Callable[[Dict[str, Any]], str]:
    """Wrap a JSON-RPC message in the event-stream framing the MCP server uses."""

    def frame(message: Dict[str, Any]) -> str:
        return f"event: message\ndata: {json.dumps(message)}\n\n"

    return frame


@pytest.fixture
def text_result() -> Callable[[str], Dict[str, Any]]:
    def build(text: str) -> Dict[str, Any]:
        return {"jsonrpc": "2.0", "id": 1, "result": {"content": [{"type": "text", "text": text}]}}

    return build
