"""Blocking execution of host CLI commands."""

from __future__ import annotations

import shlex
import subprocess
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from loguru import logger

COMMAND_NOT_EXECUTABLE_EXIT_CODE = 126
COMMAND_NOT_FOUND_EXIT_CODE = 127


class IoMode(Enum):
    INHERIT = "inherit"
    CAPTURE = "capture"


@dataclass(frozen=True)
class SubprocessOutcome:
    """Exit status of one finished command."""

    exit_code: int

    @property
    def success(self) -> bool:
        return self.exit_code == 0


class CommandRunner(Protocol):
    def run(self, command_line: str, io_mode: IoMode = IoMode.INHERIT) -> SubprocessOutcome:
        """Run one host CLI command line and wait for it to finish."""
        ...


class SubprocessCommandRunner:
    """Run host CLI commands as child processes of this one.

    The child shares stdin/stdout/stderr with the caller in `IoMode.INHERIT`,
    so the setup generator talks to the operator directly. The call blocks
    until the child exits; `subprocess.run` kills and reaps it if the wait is
    interrupted.
    """

    def __init__(self, host_command: str | Sequence[str]) -> None:
        if isinstance(host_command, str):
            host_command = shlex.split(host_command)
        self._host_argv = list(host_command)

    def argv_for(self, command_line: str) -> list[str]:
        return [*self._host_argv, *shlex.split(command_line)]

    def run(self, command_line: str, io_mode: IoMode = IoMode.INHERIT) -> SubprocessOutcome:
        argv = self.argv_for(command_line)
        logger.info("runner.start argv={}", argv)
        capture = io_mode is IoMode.CAPTURE
        try:
            completed = subprocess.run(  # noqa: S603
                argv,
                capture_output=capture,
                text=capture,
                check=False,
            )
        except FileNotFoundError:
            logger.error("runner.not_found executable={}", argv[0])
            return SubprocessOutcome(exit_code=COMMAND_NOT_FOUND_EXIT_CODE)
        except OSError as exc:
            logger.error("runner.not_executable executable={} error={!s}", argv[0], exc)
            return SubprocessOutcome(exit_code=COMMAND_NOT_EXECUTABLE_EXIT_CODE)
        if capture and completed.returncode != 0:
            logger.debug("runner.stderr {}", (completed.stderr or "").strip())
        logger.info("runner.exit code={}", completed.returncode)
        return SubprocessOutcome(exit_code=completed.returncode)
