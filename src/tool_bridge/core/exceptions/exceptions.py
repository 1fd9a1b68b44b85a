"""
Exception hierarchy for the tool bridge.

Adapters raise these to describe why a backend call could not produce a
result. The dispatcher (and the MCP stream client for its own calls) turns
them into failed response envelopes, so none of them crosses the public
boundary.
"""

from typing import Iterable, Optional


class BridgeError(Exception):
    """Base exception for all bridge errors."""

    pass


class ConfigurationError(BridgeError):
    """Raised when settings required by a tool are missing or unusable."""

    def __init__(self, message: str, missing: Iterable[str] = ()):
        super().__init__(message)
        self.missing = list(missing)


class TransportError(BridgeError):
    """Raised when the network layer fails (DNS, refused connection, timeout)."""

    pass


class BackendError(BridgeError):
    """Raised when a backend rejects a request.

    Attributes:
        status: HTTP status code, or ``None`` for a JSON-RPC level error.
        body: Response body or backend error text, kept verbatim for operators.
    """

    def __init__(self, message: str, status: Optional[int] = None, body: str = ""):
        super().__init__(message)
        self.status = status
        self.body = body


class ProtocolError(BridgeError):
    """Raised when a backend answers with a structure we do not understand."""

    pass


class MalformedStreamError(ProtocolError):
    """Raised when an event-stream body carries no ``data:`` frame."""

    pass


class InvalidInputError(BridgeError):
    """Raised when the caller supplies invalid tool arguments."""

    pass


class UnknownToolError(InvalidInputError):
    """Raised when a tool call names a tool the bridge does not expose."""

    pass
