"""The single result shape every tool call returns."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, model_validator


class ResponseEnvelope(BaseModel):
    """Normalized outcome of a tool call.

    Attributes:
        success: Whether the tool produced its result.
        message: Human-readable, localized summary. Never empty on failure.
        data: Result payload (issue record, device state, merge requests, ...).
        error: Machine-oriented diagnostic, set on failure.
    """

    model_config = ConfigDict(frozen=True)

    success: bool
    message: str
    data: Optional[Any] = None
    error: Optional[str] = None

    @model_validator(mode="after")
    def _failure_needs_message(self) -> "ResponseEnvelope":
        if not self.success and not self.message.strip():
            raise ValueError("A failed envelope must carry a non-empty message.")
        return self

    @classmethod
    def ok(cls, message: str, data: Any = None) -> "ResponseEnvelope":
        return cls(success=True, message=message, data=data)

    @classmethod
    def fail(cls, message: str, error: Optional[str] = None) -> "ResponseEnvelope":
        return cls(success=False, message=message, error=error)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for callers, omitting ``data``/``error`` when unset."""
        return self.model_dump(exclude_none=True)
