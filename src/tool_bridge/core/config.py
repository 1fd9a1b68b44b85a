"""Process configuration for the bridge.

The configuration is built once at startup, usually with
:meth:`BridgeConfig.from_env`, and handed to every adapter. Adapters never
read the environment themselves, which keeps them testable with fabricated
configurations.
"""

import os
from pathlib import Path
from typing import Mapping, Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .exceptions import ConfigurationError
from .logger import get_logger

logger = get_logger(__name__)

DEFAULT_GITLAB_URL = "https://gitlab.com"
DEFAULT_MCP_SERVER_URL = "https://redmine-mcp-server.vercel.app/api/mcp"

# field name -> environment variable
ENV_VARS: dict[str, str] = {
    "redmine_url": "REDMINE_URL",
    "redmine_api_key": "REDMINE_API_KEY",
    "redmine_project_id": "REDMINE_DEFAULT_PROJECT_ID",
    "gitlab_url": "GITLAB_URL",
    "gitlab_token": "GITLAB_TOKEN",
    "mcp_server_url": "MCP_SERVER_URL",
    "http_timeout": "BRIDGE_HTTP_TIMEOUT",
}


class BridgeConfig(BaseModel):
    """Read-only settings shared by all adapters.

    Attributes:
        redmine_url: Base URL of the Redmine instance.
        redmine_api_key: API key sent as ``X-Redmine-API-Key``.
        redmine_project_id: Numeric id of the project new issues land in.
        gitlab_url: Base URL of the GitLab instance (without ``/api/v4``).
        gitlab_token: Personal access token sent as ``PRIVATE-TOKEN``.
        mcp_server_url: Endpoint of the streamable-HTTP MCP server.
        http_timeout: Timeout in seconds applied by the HTTP transport.
    """

    model_config = ConfigDict(frozen=True)

    redmine_url: Optional[str] = None
    redmine_api_key: Optional[str] = None
    redmine_project_id: Optional[int] = None
    gitlab_url: str = DEFAULT_GITLAB_URL
    gitlab_token: Optional[str] = None
    mcp_server_url: str = DEFAULT_MCP_SERVER_URL
    http_timeout: float = Field(default=30.0, gt=0)

    @field_validator("redmine_url", "gitlab_url", "mcp_server_url")
    @classmethod
    def _strip_trailing_slash(cls, value: Optional[str]) -> Optional[str]:
        return value.rstrip("/") if value else value

    @classmethod
    def from_env(
        cls, env: Optional[Mapping[str, str]] = None, env_file: Optional[str | Path] = None
    ) -> "BridgeConfig":
        """Build the configuration from environment variables.

        A ``.env`` file is loaded first (without overriding variables that are
        already set). Blank values are treated as missing so the defaults
        apply.

        Args:
            env: Mapping to read instead of ``os.environ``. No ``.env`` file is
                loaded when given.
            env_file: Explicit path of the ``.env`` file to load.

        Returns:
            The populated configuration.

        Raises:
            ConfigurationError: If a value is present but malformed, e.g. a
                non-numeric project id.
        """
        if env is None:
            load_dotenv(dotenv_path=env_file or find_dotenv(usecwd=True))
            env = os.environ

        values = {}
        for field_name, var in ENV_VARS.items():
            raw = env.get(var)
            if raw is not None and raw.strip():
                values[field_name] = raw.strip()

        try:
            config = cls(**values)
        except ValidationError as exc:
            bad = [ENV_VARS[str(err["loc"][0])] for err in exc.errors() if err["loc"]]
            msg = f"Invalid configuration value for {', '.join(bad) or 'environment'}: {exc.error_count()} error(s)"
            logger.error(msg)
            raise ConfigurationError(msg, missing=bad) from exc

        logger.debug(
            "Configuration loaded (redmine=%s, gitlab=%s, mcp=%s).",
            bool(config.redmine_url),
            config.gitlab_url,
            config.mcp_server_url,
        )
        return config

    def missing(self, *field_names: str) -> list[str]:
        """Return the environment variable names of unset ``field_names``."""
        return [ENV_VARS[name] for name in field_names if getattr(self, name) in (None, "")]
