import pytest

from tool_bridge import MalformedStreamError
from tool_bridge.mcp_stream.sse import first_data_payload, iter_data_payloads


def test_first_data_payload_skips_event_lines() -> None:
    body = 'event: message\ndata: {"result": {"ok": true}}\n\n'
    assert first_data_payload(body) == '{"result": {"ok": true}}'


def test_first_frame_wins() -> None:
    body = 'event: message\ndata: {"n": 1}\n\nevent: message\ndata: {"n": 2}\n\n'
    assert first_data_payload(body) == '{"n": 1}'
    assert list(iter_data_payloads(body)) == ['{"n": 1}', '{"n": 2}']


def test_crlf_line_endings() -> None:
    body = 'event: message\r\ndata: {"n": 1}\r\n\r\n'
    assert first_data_payload(body) == '{"n": 1}'


@pytest.mark.parametrize("separator", ["\u2028", "\u2029", "\x85", "\x0b", "\x0c"])
def test_unicode_separators_inside_payload_do_not_split(separator: str) -> None:
    payload = '{"text": "line one' + separator + 'line two"}'
    body = "event: message\ndata: " + payload + "\n\n"

    assert first_data_payload(body) == payload


def test_data_without_space_after_colon() -> None:
    assert first_data_payload('data:{"n": 1}') == '{"n": 1}'


def test_non_object_data_lines_are_ignored() -> None:
    body = 'data: ping\ndata: [1, 2]\ndata: {"n": 3}\n'
    assert first_data_payload(body) == '{"n": 3}'


def test_only_line_start_counts() -> None:
    with pytest.raises(MalformedStreamError):
        first_data_payload('event: message data: {"n": 1}')


@pytest.mark.parametrize("body", ["", "event: message\n\n", "<html>Bad Gateway</html>", "id: 3\nretry: 100\n"])
def test_missing_frame_is_malformed(body: str) -> None:
    with pytest.raises(MalformedStreamError, match="Malformed stream"):
        first_data_payload(body)


def test_multiline_continuation_is_not_joined() -> None:
    # the first line alone is not a complete object, the continuation is ignored
    body = 'data: {"n":\ndata: 1}\n'
    with pytest.raises(MalformedStreamError):
        first_data_payload(body)
