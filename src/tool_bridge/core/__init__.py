"""Public exports for the core bridge abstractions and utilities."""

from .config import BridgeConfig
from .envelope import ResponseEnvelope
from .exceptions import (
    BridgeError,
    ConfigurationError,
    TransportError,
    BackendError,
    ProtocolError,
    MalformedStreamError,
    InvalidInputError,
    UnknownToolError,
)
from .logger import get_logger, setup_logging
from .transport import HttpResponse, HttpTransport, HttpxTransport

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
    "get_logger",
    "setup_logging",
    "HttpResponse",
    "HttpTransport",
    "HttpxTransport",
]
