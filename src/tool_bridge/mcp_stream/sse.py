"""Minimal server-sent-event frame extraction.

The MCP server answers a POST with a short event stream such as::

    event: message
    data: {"jsonrpc": "2.0", "id": 1, "result": {...}}

Only the payload of a ``data:`` line matters. The rules are deliberately
narrow and differ from a full SSE parser:

* Lines are examined one by one; ``\\n``, ``\\r\\n`` and ``\\r`` all end a line.
* A frame is a line that starts with ``data:``. One optional space after the
  colon is dropped, the rest is the payload.
* Only payloads that look like a JSON object (start with ``{`` and end with
  ``}``) count. Other ``data:`` lines are skipped.
* The first matching frame wins; later frames are ignored.
* Multi-line ``data:`` continuations, ``id:``, ``retry:`` and reconnection are
  not supported. ``event:`` and comment lines are discarded.
"""

import re
from typing import Iterator

from ..core.exceptions import MalformedStreamError

DATA_FIELD = "data:"

# only these end a line; U+2028, U+2029 and U+0085 may sit raw inside JSON strings
_LINE_BREAK = re.compile(r"\r\n|\r|\n")


def iter_data_payloads(text: str) -> Iterator[str]:
    """Yield every JSON-object payload of a ``data:`` line, in stream order."""
    for line in _LINE_BREAK.split(text):
        if not line.startswith(DATA_FIELD):
            continue
        payload = line[len(DATA_FIELD):]
        if payload.startswith(" "):
            payload = payload[1:]
        payload = payload.strip()
        if payload.startswith("{") and payload.endswith("}"):
            yield payload


def first_data_payload(text: str) -> str:
    """Return the payload of the first ``data:`` frame in ``text``.

    Raises:
        MalformedStreamError: If the body holds no such frame.
    """
    for payload in iter_data_payloads(text):
        return payload
    raise MalformedStreamError("Malformed stream: invalid SSE response format, no 'data:' frame with a JSON object")
