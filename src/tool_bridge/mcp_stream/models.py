"""Data models for the MCP stream client."""

from typing import Optional

from pydantic import BaseModel, ConfigDict


class RemoteTool(BaseModel):
    """Tool metadata as announced by the MCP server's ``tools/list`` call.

    Attributes:
        name: Tool name to pass to ``tools/call``.
        description: Free-text description, if the server provides one.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    name: str
    description: Optional[str] = None
