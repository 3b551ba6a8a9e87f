"""Plugin host: lets installed packages replace the stats sink and message catalog."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import pluggy
from loguru import logger

from cloudlink.config import Settings
from cloudlink.hookspecs import CLOUDLINK_HOOK_NAMESPACE, CloudlinkHookSpecs
from cloudlink.messages import MessageCatalog, PromptMessages
from cloudlink.telemetry import HttpStatRecorder, StatRecorder


class PluginHost:
    """Owns the pluggy manager and falls back to builtin collaborators."""

    def __init__(self) -> None:
        self._plugin_manager = pluggy.PluginManager(CLOUDLINK_HOOK_NAMESPACE)
        self._plugin_manager.add_hookspecs(CloudlinkHookSpecs)
        self._failed_plugins: dict[str, str] = {}

    @property
    def failed_plugins(self) -> dict[str, str]:
        return dict(self._failed_plugins)

    def register(self, plugin: Any, name: str | None = None) -> None:
        self._plugin_manager.register(plugin, name=name)

    def load_entrypoints(self) -> int:
        """Register plugins advertised under the `cloudlink` entry-point group."""

        try:
            return self._plugin_manager.load_setuptools_entrypoints(CLOUDLINK_HOOK_NAMESPACE)
        except Exception as exc:  # pragma: no cover - depends on installed distributions
            self._failed_plugins[CLOUDLINK_HOOK_NAMESPACE] = str(exc)
            logger.opt(exception=True).warning("plugins.load_failed group={}", CLOUDLINK_HOOK_NAMESPACE)
            return 0

    def stat_recorder(self, settings: Settings, env: Mapping[str, str]) -> StatRecorder:
        provided = self._plugin_manager.hook.provide_stat_recorder(settings=settings, env=env)
        if provided is not None:
            return provided
        return HttpStatRecorder(
            settings.stats_url,
            timeout_seconds=settings.stats_timeout_seconds,
            enabled=settings.telemetry,
            env=env,
        )

    def message_catalog(self, settings: Settings) -> MessageCatalog:
        provided = self._plugin_manager.hook.provide_message_catalog(settings=settings)
        if provided is not None:
            return provided
        return PromptMessages(pinned_variant=settings.prompt_variant)

    def hook_report(self) -> dict[str, list[str]]:
        """Return hook implementation summary for diagnostics."""

        report: dict[str, list[str]] = {}
        for hook_name in ("provide_stat_recorder", "provide_message_catalog"):
            caller = getattr(self._plugin_manager.hook, hook_name)
            names = [impl.plugin_name for impl in caller.get_hookimpls()]
            if names:
                report[hook_name] = names
        return report
