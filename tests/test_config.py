import os
from pathlib import Path

import pytest
from pydantic import ValidationError

from tool_bridge import BridgeConfig, ConfigurationError
from tool_bridge.core.config import DEFAULT_GITLAB_URL, DEFAULT_MCP_SERVER_URL


def test_from_env_mapping() -> None:
    config = BridgeConfig.from_env(
        env={
            "REDMINE_URL": "https://redmine.example.com/",
            "REDMINE_API_KEY": "k",
            "REDMINE_DEFAULT_PROJECT_ID": "12",
            "GITLAB_TOKEN": "t",
            "BRIDGE_HTTP_TIMEOUT": "5",
        }
    )

    assert config.redmine_url == "https://redmine.example.com"
    assert config.redmine_project_id == 12
    assert config.gitlab_url == DEFAULT_GITLAB_URL
    assert config.mcp_server_url == DEFAULT_MCP_SERVER_URL
    assert config.http_timeout == 5.0
    assert config.missing("redmine_url", "redmine_api_key", "redmine_project_id", "gitlab_token") == []


def test_blank_values_count_as_missing() -> None:
    config = BridgeConfig.from_env(env={"REDMINE_URL": "  ", "GITLAB_URL": ""})

    assert config.redmine_url is None
    assert config.gitlab_url == DEFAULT_GITLAB_URL
    assert config.missing("redmine_url", "redmine_api_key") == ["REDMINE_URL", "REDMINE_API_KEY"]


def test_non_numeric_project_id() -> None:
    with pytest.raises(ConfigurationError) as excinfo:
        BridgeConfig.from_env(env={"REDMINE_DEFAULT_PROJECT_ID": "core-team"})

    assert excinfo.value.missing == ["REDMINE_DEFAULT_PROJECT_ID"]


def test_env_file_is_loaded(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(os, "environ", {"GITLAB_TOKEN": "from-process"})
    env_file = tmp_path / ".env"
    env_file.write_text("GITLAB_TOKEN=from-file\nGITLAB_URL=https://git.internal\nREDMINE_DEFAULT_PROJECT_ID=3\n")

    config = BridgeConfig.from_env(env_file=env_file)

    assert config.gitlab_token == "from-process"
    assert config.gitlab_url == "https://git.internal"
    assert config.redmine_project_id == 3


def test_config_is_frozen(config: BridgeConfig) -> None:
    with pytest.raises(ValidationError):
        config.gitlab_token = "other"  # type: ignore[misc]
