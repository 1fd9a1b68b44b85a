"""Export the bridge exception hierarchy used by adapters and the dispatcher."""

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

__all__ = [
    "BridgeError",
    "ConfigurationError",
    "TransportError",
    "BackendError",
    "ProtocolError",
    "MalformedStreamError",
    "InvalidInputError",
    "UnknownToolError",
]
