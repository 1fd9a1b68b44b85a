from .models import (
    ToolCall,
    ToolDefinition,
    TOOL_CALL_TYPES,
    parse_tool_call,
    normalize_arguments,
)
from .schema import SchemaValidator
from .dispatcher import ToolDispatcher

__all__ = [
    "ToolCall",
    "ToolDefinition",
    "TOOL_CALL_TYPES",
    "parse_tool_call",
    "normalize_arguments",
    "SchemaValidator",
    "ToolDispatcher",
]
