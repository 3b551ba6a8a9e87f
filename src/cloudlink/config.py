"""Configuration management for cloudlink."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigurationError

DEFAULT_RUNNER = "nx/tasks-runners/default"
CLOUD_RUNNERS = frozenset({"nx-cloud", "@nrwl/nx-cloud"})


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_prefix="CLOUDLINK_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Host CLI
    host_command: str = Field(default="npx nx", description="Command line prefix of the host build tool")
    config_file: str = Field(default="nx.json", description="Workspace configuration file name")

    # Telemetry
    stats_url: str = Field(default="https://cloud.nx.app", description="Base URL of the stats endpoint")
    stats_timeout_seconds: float = Field(default=0.4, description="Timeout for one stats request")
    telemetry: bool = Field(default=True, description="Record prompt outcomes for usage analytics")

    # Prompting
    prompt_variant: Optional[int] = Field(None, description="Pin the message variant instead of picking one at random")

    # Logging Configuration
    log_level: str = Field(default="WARNING", description="Log level")


class RunnerOptions(BaseModel):
    """One entry of `tasksRunnerOptions`."""

    model_config = ConfigDict(extra="allow", frozen=True)

    runner: Optional[str] = None
    options: dict[str, Any] = Field(default_factory=dict)


class WorkspaceConfig(BaseModel):
    """The subset of the workspace configuration file the connect flows read."""

    model_config = ConfigDict(extra="allow", frozen=True, populate_by_name=True)

    tasks_runner_options: dict[str, RunnerOptions] = Field(default_factory=dict, alias="tasksRunnerOptions")
    access_token: Optional[str] = Field(None, alias="nxCloudAccessToken")
    cloud_id: Optional[str] = Field(None, alias="nxCloudId")
    cloud_url: Optional[str] = Field(None, alias="nxCloudUrl")

    @property
    def default_runner_override(self) -> str | None:
        default = self.tasks_runner_options.get("default")
        if default is None:
            return None
        return default.runner or None

    @property
    def remote_access_token(self) -> str | None:
        return self.access_token or None

    def cloud_runner(self) -> RunnerOptions | None:
        for options in self.tasks_runner_options.values():
            if options.runner in CLOUD_RUNNERS:
                return options
        return None


def load_settings() -> Settings:
    """Get application settings from the environment and `.env`."""
    return Settings()


def load_workspace_config(workspace: Path, settings: Settings) -> WorkspaceConfig:
    """Read the workspace configuration file.

    Args:
        workspace: Workspace root directory
        settings: Application settings naming the config file

    Returns:
        Parsed workspace configuration

    Raises:
        ConfigurationError: if the file is missing, unreadable, or malformed
    """
    path = workspace / settings.config_file
    if not path.is_file():
        raise ConfigurationError(f"workspace configuration not found: {path}")
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigurationError(f"cannot read {path}: {exc}") from exc
    if not isinstance(raw, dict):
        raise ConfigurationError(f"{path} must contain a JSON object")
    try:
        return WorkspaceConfig.model_validate(raw)
    except ValidationError as exc:
        raise ConfigurationError(f"invalid workspace configuration in {path}: {exc}") from exc
