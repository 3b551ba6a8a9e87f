"""cloudlink command line interface."""

from __future__ import annotations

import os
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from pathlib import Path

import typer
from loguru import logger

from cloudlink import __version__
from cloudlink.config import Settings, WorkspaceConfig, load_settings, load_workspace_config
from cloudlink.errors import BootstrapCommandError, ConfigurationError, PromptAbortedError
from cloudlink.flows import CloudConnector, FlowResult, InvocationArgs
from cloudlink.inspector import get_cloud_url, is_connected, is_remote_delegation_active
from cloudlink.logging_utils import configure_logging
from cloudlink.messages import MessageKey
from cloudlink.output import Notifier
from cloudlink.plugins import PluginHost
from cloudlink.prompts import PromptEngine
from cloudlink.runner import SubprocessCommandRunner
from cloudlink.telemetry import NullStatRecorder, StatRecord

PROMPT_ABORTED_EXIT_CODE = 130

app = typer.Typer(name="cloudlink", help="Connect a workspace to its remote cache.", add_completion=False)


def build_connector(settings: Settings, env: Mapping[str, str], *, telemetry: bool = True) -> CloudConnector:
    """Wire production collaborators, letting plugins replace the stats sink and catalog."""

    plugins = PluginHost()
    plugins.load_entrypoints()
    recorder = plugins.stat_recorder(settings, env) if telemetry else NullStatRecorder()
    return CloudConnector(
        runner=SubprocessCommandRunner(settings.host_command),
        prompt_engine=PromptEngine(),
        messages=plugins.message_catalog(settings),
        recorder=recorder,
        notifier=Notifier(),
        env=env,
    )


def _prepare(workspace: Path | None) -> tuple[Settings, dict[str, str], WorkspaceConfig]:
    settings = load_settings()
    configure_logging(settings.log_level)
    env = dict(os.environ)
    resolved = (workspace or Path.cwd()).resolve()
    logger.info("cli.workspace path={}", resolved)
    return settings, env, load_workspace_config(resolved, settings)


@contextmanager
def _exit_on_errors() -> Iterator[None]:
    try:
        yield
    except ConfigurationError as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(1) from exc
    except PromptAbortedError as exc:
        typer.echo(f"aborted: {exc}", err=True)
        raise typer.Exit(PROMPT_ABORTED_EXIT_CODE) from exc
    except BootstrapCommandError as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(exc.exit_code) from exc


@app.command("connect")
def connect(
    workspace: Path | None = typer.Option(None, "--workspace", "-w", help="Workspace root"),  # noqa: B008
    telemetry: bool = typer.Option(True, "--telemetry/--no-telemetry", help="Record the outcome"),
) -> None:
    """Connect the workspace to the remote cache unless it already is."""

    with _exit_on_errors():
        settings, env, config = _prepare(workspace)
        connector = build_connector(settings, env, telemetry=telemetry)
        connected = connector.run_connect_command(config)
        connector.recorder.record(StatRecord(command="connect", tool_version=__version__, delegated=connected))


@app.command("setup")
def setup(
    command: str = typer.Option("setup", "--command", help="Command name reported with the outcome"),
    tool_version: str = typer.Option(__version__, "--tool-version", help="Tool version reported with the outcome"),
    workspace: Path | None = typer.Option(None, "--workspace", "-w", help="Workspace root"),  # noqa: B008
    telemetry: bool = typer.Option(True, "--telemetry/--no-telemetry", help="Record the outcome"),
) -> None:
    """Ask whether to enable remote caching and connect on yes."""

    with _exit_on_errors():
        settings, env, config = _prepare(workspace)
        connector = build_connector(settings, env, telemetry=telemetry)
        connector.run_prompt_flow(command, tool_version, config)


@app.command("ensure")
def ensure(
    cloud: bool = typer.Option(False, "--cloud", help="Require remote delegation before continuing"),
    workspace: Path | None = typer.Option(None, "--workspace", "-w", help="Workspace root"),  # noqa: B008
) -> None:
    """Bootstrap the remote connection when --cloud is given and delegation is off."""

    with _exit_on_errors():
        settings, env, config = _prepare(workspace)
        connector = build_connector(settings, env, telemetry=False)
        result = connector.run_explicit_cloud_flow(InvocationArgs(cloud=cloud), config)
    if result is FlowResult.TERMINATE_HOST:
        raise typer.Exit(0)
    if cloud:
        typer.echo("Remote delegation check passed.")


@app.command("view-logs")
def view_logs(
    workspace: Path | None = typer.Option(None, "--workspace", "-w", help="Workspace root"),  # noqa: B008
) -> None:
    """Show where run logs live, offering to connect first when needed."""

    with _exit_on_errors():
        settings, env, config = _prepare(workspace)
        if not is_connected(config, env):
            connector = build_connector(settings, env, telemetry=False)
            if not connector.ask_yes_no(MessageKey.SETUP_VIEW_LOGS):
                typer.echo("Skipped connecting; run logs stay local.")
                return
            if not connector.run_connect_command(config):
                typer.echo("error: could not connect the workspace; run logs are unavailable", err=True)
                raise typer.Exit(1)
            # The generator writes the token into the config file.
            config = load_workspace_config((workspace or Path.cwd()).resolve(), settings)
        typer.echo(f"View run logs at {get_cloud_url(config, env)}")


@app.command("status")
def status(
    workspace: Path | None = typer.Option(None, "--workspace", "-w", help="Workspace root"),  # noqa: B008
) -> None:
    """Show the workspace's delegation and connection state."""

    with _exit_on_errors():
        _settings, env, config = _prepare(workspace)
    typer.echo(f"delegated: {'yes' if is_remote_delegation_active(config, env) else 'no'}")
    typer.echo(f"connected: {'yes' if is_connected(config, env) else 'no'}")
    typer.echo(f"cloud url: {get_cloud_url(config, env)}")


@app.command("hooks")
def list_hooks() -> None:
    """Show hook implementation mapping."""

    plugins = PluginHost()
    plugins.load_entrypoints()
    report = plugins.hook_report()
    if not report:
        typer.echo("(no hook implementations)")
        return
    for hook_name, plugin_names in report.items():
        typer.echo(f"{hook_name}: {', '.join(plugin_names)}")
