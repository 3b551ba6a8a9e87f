"""Usage analytics for connect prompts."""

from __future__ import annotations

import json
from collections.abc import Mapping
from http import client as http_client
from dataclasses import dataclass
from typing import Protocol
from urllib import error as urllib_error
from urllib import request as urllib_request

from loguru import logger

STATS_PATH = "/nx-cloud/stats"
USER_AGENT = "cloudlink-stats/1.0"


@dataclass(frozen=True)
class StatRecord:
    command: str
    tool_version: str
    delegated: bool
    message_code: str | None = None


class StatRecorder(Protocol):
    def record(self, stat: StatRecord) -> None:
        """Record one outcome. Must never raise."""
        ...


def is_ci(env: Mapping[str, str]) -> bool:
    return env.get("CI", "").strip().lower() in {"1", "true"}


class HttpStatRecorder:
    """POST one JSON stat to the remote stats endpoint, best effort."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout_seconds: float = 0.4,
        enabled: bool = True,
        env: Mapping[str, str] | None = None,
    ) -> None:
        self.endpoint = base_url.rstrip("/") + STATS_PATH
        self.timeout_seconds = timeout_seconds
        self.enabled = enabled
        self._env = dict(env or {})

    def payload_for(self, stat: StatRecord) -> dict[str, object]:
        payload: dict[str, object] = {
            "command": stat.command,
            "isCI": is_ci(self._env),
            "useCloud": stat.delegated,
            "nxVersion": stat.tool_version,
        }
        if stat.message_code:
            payload["meta"] = stat.message_code
        return payload

    def record(self, stat: StatRecord) -> None:
        if not self.enabled:
            logger.debug("stats.skipped reason=disabled command={}", stat.command)
            return

        body = json.dumps(self.payload_for(stat)).encode("utf-8")
        request = urllib_request.Request(  # noqa: S310 - endpoint comes from settings.
            self.endpoint,
            data=body,
            method="POST",
            headers={"Content-Type": "application/json", "User-Agent": USER_AGENT},
        )
        try:
            with urllib_request.urlopen(request, timeout=self.timeout_seconds) as response:  # noqa: S310
                logger.debug("stats.sent command={} status={}", stat.command, response.status)
        except (urllib_error.URLError, http_client.HTTPException, OSError, ValueError) as exc:
            # Analytics never decide control flow.
            logger.debug("stats.failed command={} error={!s}", stat.command, exc)


class NullStatRecorder:
    """Keep records in memory instead of sending them."""

    def __init__(self) -> None:
        self.records: list[StatRecord] = []

    def record(self, stat: StatRecord) -> None:
        self.records.append(stat)
