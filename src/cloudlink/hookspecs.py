"""Pluggy hook namespace and cloudlink hook specifications."""

from __future__ import annotations

from collections.abc import Mapping

import pluggy

from cloudlink.config import Settings
from cloudlink.messages import MessageCatalog
from cloudlink.telemetry import StatRecorder

CLOUDLINK_HOOK_NAMESPACE = "cloudlink"
hookspec = pluggy.HookspecMarker(CLOUDLINK_HOOK_NAMESPACE)
hookimpl = pluggy.HookimplMarker(CLOUDLINK_HOOK_NAMESPACE)


class CloudlinkHookSpecs:
    """Hook contract for cloudlink extensions."""

    @hookspec(firstresult=True)
    def provide_stat_recorder(self, settings: Settings, env: Mapping[str, str]) -> StatRecorder | None:
        """Provide the sink that receives prompt outcome stats."""

    @hookspec(firstresult=True)
    def provide_message_catalog(self, settings: Settings) -> MessageCatalog | None:
        """Provide the catalog that resolves message keys to prompts."""
