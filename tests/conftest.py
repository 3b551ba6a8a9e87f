from __future__ import annotations

from io import StringIO

import pytest
from rich.console import Console

from cloudlink.flows import CloudConnector
from cloudlink.messages import PromptMessages
from cloudlink.output import Notifier
from cloudlink.prompts import PromptDescriptor, PromptEngine
from cloudlink.runner import IoMode, SubprocessOutcome
from cloudlink.telemetry import NullStatRecorder


class FakeRunner:
    def __init__(self, exit_code: int = 0) -> None:
        self.exit_code = exit_code
        self.calls: list[tuple[str, IoMode]] = []

    def run(self, command_line: str, io_mode: IoMode = IoMode.INHERIT) -> SubprocessOutcome:
        self.calls.append((command_line, io_mode))
        return SubprocessOutcome(exit_code=self.exit_code)


class FakeTransport:
    def __init__(self, *answers: str) -> None:
        self.answers = list(answers)
        self.asked: list[PromptDescriptor] = []

    def ask(self, descriptor: PromptDescriptor) -> str:
        self.asked.append(descriptor)
        return self.answers.pop(0)


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def recorder() -> NullStatRecorder:
    return NullStatRecorder()


@pytest.fixture
def console_buffer() -> StringIO:
    return StringIO()


@pytest.fixture
def make_connector(runner: FakeRunner, recorder: NullStatRecorder, console_buffer: StringIO):
    def _make(*answers: str, env: dict[str, str] | None = None) -> tuple[CloudConnector, FakeTransport]:
        transport = FakeTransport(*answers)
        connector = CloudConnector(
            runner=runner,
            prompt_engine=PromptEngine(transport),
            messages=PromptMessages(pinned_variant=0),
            recorder=recorder,
            notifier=Notifier(Console(file=console_buffer, width=200, color_system=None)),
            env=env or {},
        )
        return connector, transport

    return _make
