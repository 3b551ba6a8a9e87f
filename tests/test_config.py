from __future__ import annotations

from pathlib import Path

import pytest

from cloudlink.config import Settings, load_settings, load_workspace_config
from cloudlink.errors import ConfigurationError


def test_settings_read_prefixed_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CLOUDLINK_HOST_COMMAND", "pnpm nx")
    monkeypatch.setenv("CLOUDLINK_TELEMETRY", "false")
    monkeypatch.setenv("CLOUDLINK_PROMPT_VARIANT", "1")

    settings = load_settings()

    assert settings.host_command == "pnpm nx"
    assert settings.telemetry is False
    assert settings.prompt_variant == 1
    assert settings.config_file == "nx.json"


def test_load_workspace_config_parses_known_fields(tmp_path: Path) -> None:
    (tmp_path / "nx.json").write_text(
        '{"tasksRunnerOptions": {"default": {"runner": "custom", "options": {"parallel": 3}}},'
        ' "nxCloudAccessToken": "tok", "namedInputs": {"default": []}}',
        encoding="utf-8",
    )

    config = load_workspace_config(tmp_path, Settings())

    assert config.default_runner_override == "custom"
    assert config.remote_access_token == "tok"
    assert config.tasks_runner_options["default"].options == {"parallel": 3}


def test_missing_config_is_a_configuration_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError, match="not found"):
        load_workspace_config(tmp_path, Settings())


@pytest.mark.parametrize("content", ["{not json", "[]", '{"tasksRunnerOptions": 3}'])
def test_malformed_config_is_a_configuration_error(tmp_path: Path, content: str) -> None:
    (tmp_path / "nx.json").write_text(content, encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_workspace_config(tmp_path, Settings())
