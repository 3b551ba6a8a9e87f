"""Connect flows: explicit `--cloud`, idempotent connect, and interactive prompt."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum

from loguru import logger

from .config import WorkspaceConfig
from .errors import BootstrapCommandError
from .inspector import get_cloud_url, is_connected, is_remote_delegation_active
from .messages import YES, MessageCatalog, MessageKey
from .output import Notifier
from .prompts import PromptEngine
from .runner import CommandRunner, IoMode
from .telemetry import StatRecord, StatRecorder

CONNECT_COMMAND = "connect-to-cloud"
GENERATE_CONNECT_COMMAND = "g connect-to-cloud --quiet --no-interactive"


class FlowResult(Enum):
    COMPLETED = "completed"
    TERMINATE_HOST = "terminate_host"


@dataclass(frozen=True)
class InvocationArgs:
    """Parsed arguments of the host command that matter to the connect flows."""

    cloud: bool | None = None


@dataclass
class CloudConnector:
    """Composes inspection, prompting, bootstrapping, and stats into the connect flows.

    `env` is a snapshot taken once by the caller; flows never re-read the
    process environment. None of the flows exit the process: the explicit
    flow returns `FlowResult.TERMINATE_HOST` and leaves that to the CLI.
    """

    runner: CommandRunner
    prompt_engine: PromptEngine
    messages: MessageCatalog
    recorder: StatRecorder
    notifier: Notifier = field(default_factory=Notifier)
    env: Mapping[str, str] = field(default_factory=dict)

    def run_explicit_cloud_flow(self, args: InvocationArgs, config: WorkspaceConfig) -> FlowResult:
        """Bootstrap the connection when `--cloud` is given and delegation is off."""

        if args.cloud is not True:
            return FlowResult.COMPLETED
        if is_remote_delegation_active(config, self.env):
            logger.info("connect.explicit.skipped reason=already_delegated")
            return FlowResult.COMPLETED

        self.notifier.log("--cloud requires the workspace to be connected to the remote cache.")
        outcome = self.runner.run(CONNECT_COMMAND, IoMode.INHERIT)
        if not outcome.success:
            raise BootstrapCommandError(CONNECT_COMMAND, outcome.exit_code)
        self.notifier.success("Your workspace has been successfully connected to the remote cache.")
        return FlowResult.TERMINATE_HOST

    def run_connect_command(self, config: WorkspaceConfig) -> bool:
        """Connect the workspace unless it already is. Returns whether a new connection was made."""

        if is_connected(config, self.env):
            self.notifier.log(
                "✔ This workspace already has remote caching set up",
                [
                    "If you have not done so already, connect your workspace to your account:",
                    f"- Login at {get_cloud_url(config, self.env)} to connect your repository",
                ],
            )
            return False

        outcome = self.runner.run(GENERATE_CONNECT_COMMAND, IoMode.INHERIT)
        if not outcome.success:
            logger.warning("connect.bootstrap_failed exit_code={}", outcome.exit_code)
            return False
        return True

    def run_prompt_flow(self, command_name: str, tool_version: str, config: WorkspaceConfig) -> bool:
        """Ask whether to enable remote caching, connect on yes, and record the outcome."""

        outcome = self.prompt_engine.prompt(self.messages.get_prompt(MessageKey.SETUP_CLOUD))
        delegated = self.run_connect_command(config) if outcome.choice_key == YES else False
        self.recorder.record(
            StatRecord(
                command=command_name,
                tool_version=tool_version,
                delegated=delegated,
                message_code=self.messages.code_of_selected(MessageKey.SETUP_CLOUD),
            )
        )
        return delegated

    def ask_yes_no(self, key: MessageKey = MessageKey.SETUP_CLOUD) -> bool:
        outcome = self.prompt_engine.prompt(self.messages.get_prompt(key))
        return outcome.choice_key == YES
