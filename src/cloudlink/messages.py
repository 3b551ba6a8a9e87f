"""Prompt message catalog with A/B variants."""

from __future__ import annotations

import random
from dataclasses import dataclass
from enum import StrEnum
from typing import Protocol

from .prompts import Choice, PromptDescriptor

YES = "yes"
NO = "no"
SKIP = "skip"


class MessageKey(StrEnum):
    SETUP_CLOUD = "setupNxCloud"
    SETUP_VIEW_LOGS = "setupViewLogs"


@dataclass(frozen=True)
class MessageVariant:
    """One wording of a prompt, identified in analytics by `code`."""

    code: str
    descriptor: PromptDescriptor


MESSAGE_VARIANTS: dict[MessageKey, tuple[MessageVariant, ...]] = {
    MessageKey.SETUP_CLOUD: (
        MessageVariant(
            code="enable-caching2",
            descriptor=PromptDescriptor(
                message="Would you like remote caching to make your build faster?",
                choices=(
                    Choice(YES, "Yes"),
                    Choice(NO, "No - I would not like remote caching"),
                ),
                default_key=YES,
                footer="\nRead more about remote caching at https://nx.dev/ci/features/remote-cache",
                hint="\n(can be disabled any time)",
            ),
        ),
        MessageVariant(
            code="remote-cache-visit",
            descriptor=PromptDescriptor(
                message="Enable remote caching so CI and teammates reuse each other's task results?",
                choices=(
                    Choice(YES, "Yes"),
                    Choice(NO, "No"),
                ),
                default_key=YES,
                footer="\nWatch a short video on remote caching at https://nx.dev/ci/features/remote-cache",
            ),
        ),
    ),
    MessageKey.SETUP_VIEW_LOGS: (
        MessageVariant(
            code="connect-to-view-logs",
            descriptor=PromptDescriptor(
                message="To view the logs, the workspace needs to be connected to the remote cache and upload the most recent run details",
                choices=(
                    Choice(YES, "Yes"),
                    Choice(SKIP, "No"),
                ),
                default_key=YES,
                footer="\nRead more about remote caching at https://nx.dev/ci/features/remote-cache",
                hint="\n(it's free and can be disabled any time)",
            ),
        ),
    ),
}


class MessageCatalog(Protocol):
    def get_prompt(self, key: MessageKey) -> PromptDescriptor:
        """Resolve a message key to the descriptor shown to the operator."""
        ...

    def code_of_selected(self, key: MessageKey) -> str | None:
        """Return the analytics code of the variant shown for `key`, if any."""
        ...


class PromptMessages:
    """Picks one variant per key on first use and remembers the choice."""

    def __init__(
        self,
        variants: dict[MessageKey, tuple[MessageVariant, ...]] | None = None,
        *,
        pinned_variant: int | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._variants = variants or MESSAGE_VARIANTS
        self._pinned_variant = pinned_variant
        self._rng = rng or random.Random()
        self._selected: dict[MessageKey, int] = {}

    def get_prompt(self, key: MessageKey) -> PromptDescriptor:
        return self._variants[key][self._select(key)].descriptor

    def code_of_selected(self, key: MessageKey) -> str | None:
        index = self._selected.get(key)
        if index is None:
            return None
        return self._variants[key][index].code

    def _select(self, key: MessageKey) -> int:
        if key not in self._selected:
            options = self._variants[key]
            if self._pinned_variant is not None:
                self._selected[key] = min(max(self._pinned_variant, 0), len(options) - 1)
            else:
                self._selected[key] = self._rng.randrange(len(options))
        return self._selected[key]
