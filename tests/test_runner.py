from __future__ import annotations

import sys
from pathlib import Path

import pytest

from cloudlink.runner import (
    COMMAND_NOT_EXECUTABLE_EXIT_CODE,
    COMMAND_NOT_FOUND_EXIT_CODE,
    IoMode,
    SubprocessCommandRunner,
    SubprocessOutcome,
)


def _python_runner() -> SubprocessCommandRunner:
    return SubprocessCommandRunner([sys.executable, "-c"])


def test_outcome_success_tracks_exit_code() -> None:
    assert SubprocessOutcome(0).success is True
    assert SubprocessOutcome(1).success is False
    assert SubprocessOutcome(-9).success is False


def test_host_command_string_is_split() -> None:
    runner = SubprocessCommandRunner("npx nx")
    assert runner.argv_for("g connect-to-cloud --quiet --no-interactive") == [
        "npx",
        "nx",
        "g",
        "connect-to-cloud",
        "--quiet",
        "--no-interactive",
    ]


@pytest.mark.parametrize("code", [0, 3])
def test_run_reports_child_exit_code(code: int) -> None:
    outcome = _python_runner().run(f"'raise SystemExit({code})'", IoMode.CAPTURE)
    assert outcome == SubprocessOutcome(exit_code=code)


def test_inherited_stdio_reaches_parent_streams(capfd: pytest.CaptureFixture[str]) -> None:
    outcome = _python_runner().run("'print(\"from child\")'", IoMode.INHERIT)

    assert outcome.success
    assert "from child" in capfd.readouterr().out


def test_missing_executable_maps_to_not_found_code() -> None:
    runner = SubprocessCommandRunner(["cloudlink-definitely-missing-binary"])
    assert runner.run("connect-to-cloud").exit_code == COMMAND_NOT_FOUND_EXIT_CODE


def test_non_executable_host_maps_to_not_executable_code(tmp_path: Path) -> None:
    host = tmp_path / "host-cli"
    host.write_text("#!/bin/sh\nexit 0\n", encoding="utf-8")
    host.chmod(0o644)

    outcome = SubprocessCommandRunner([str(host)]).run("connect-to-cloud")

    assert outcome.exit_code == COMMAND_NOT_EXECUTABLE_EXIT_CODE
