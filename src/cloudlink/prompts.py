"""Single-question, single-select interactive prompts."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Protocol

from loguru import logger
from prompt_toolkit import PromptSession
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.formatted_text import FormattedText
from prompt_toolkit.styles import Style
from prompt_toolkit.validation import Validator

from .errors import PromptAbortedError

DIM_STYLE = "fg:ansibrightblack"
PROMPT_STYLE = Style.from_dict({"bottom-toolbar": "noreverse"})


@dataclass(frozen=True)
class Choice:
    key: str
    label: str


@dataclass(frozen=True)
class PromptDescriptor:
    """Everything needed to ask one multiple-choice question."""

    message: str
    choices: tuple[Choice, ...]
    default_key: str
    footer: str | None = None
    hint: str | None = None
    choice_keys: frozenset[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        keys = [choice.key for choice in self.choices]
        if not keys:
            raise ValueError("a prompt needs at least one choice")
        if len(set(keys)) != len(keys):
            raise ValueError(f"duplicate choice keys: {keys}")
        if self.default_key not in keys:
            raise ValueError(f"default choice {self.default_key!r} is not one of {keys}")
        object.__setattr__(self, "choice_keys", frozenset(keys))

    def choice(self, key: str) -> Choice:
        for choice in self.choices:
            if choice.key == key:
                return choice
        raise KeyError(key)


@dataclass(frozen=True)
class PromptOutcome:
    choice_key: str


class PromptTransport(Protocol):
    def ask(self, descriptor: PromptDescriptor) -> str:
        """Show the question and return the selected choice key."""
        ...


def resolve_choice(descriptor: PromptDescriptor, text: str) -> str | None:
    """Map typed text to a choice key: accepts a key, a label, or a 1-based index."""

    answer = text.strip().casefold()
    if not answer:
        return None
    if answer.isdigit():
        index = int(answer) - 1
        if 0 <= index < len(descriptor.choices):
            return descriptor.choices[index].key
        return None
    for choice in descriptor.choices:
        if answer in (choice.key.casefold(), choice.label.casefold()):
            return choice.key
    return None


def _dim(text: str | None) -> Callable[[], FormattedText]:
    return lambda: FormattedText([(DIM_STYLE, text.strip("\n") if text else "")])


class TerminalPromptTransport:
    """prompt_toolkit rendering: autocomplete over the choices, default pre-filled.

    Footer and hint are passed as callables so they are only formatted when
    the prompt is drawn.
    """

    def __init__(self, **session_kwargs: Any) -> None:
        self._session_kwargs = session_kwargs

    def ask(self, descriptor: PromptDescriptor) -> str:
        words = [choice.label for choice in descriptor.choices] + [choice.key for choice in descriptor.choices]
        session: PromptSession[str] = PromptSession(
            completer=WordCompleter(words, ignore_case=True, match_middle=True, sentence=True),
            complete_while_typing=True,
            validator=Validator.from_callable(
                lambda text: resolve_choice(descriptor, text) is not None,
                error_message="Pick one of the listed choices",
                move_cursor_to_end=True,
            ),
            validate_while_typing=False,
            bottom_toolbar=_dim(descriptor.footer) if descriptor.footer else None,
            rprompt=_dim(descriptor.hint) if descriptor.hint else None,
            style=PROMPT_STYLE,
            **self._session_kwargs,
        )
        default_label = descriptor.choice(descriptor.default_key).label
        try:
            answer = session.prompt(self._render_message(descriptor), default=default_label)
        except (KeyboardInterrupt, EOFError) as exc:
            raise PromptAbortedError("prompt was cancelled") from exc
        key = resolve_choice(descriptor, answer)
        if key is None:
            raise PromptAbortedError(f"unrecognised answer: {answer!r}")
        return key

    @staticmethod
    def _render_message(descriptor: PromptDescriptor) -> FormattedText:
        fragments: list[tuple[str, str]] = [("bold fg:ansicyan", "? "), ("bold", descriptor.message), ("", "\n")]
        for index, choice in enumerate(descriptor.choices, start=1):
            marker = "*" if choice.key == descriptor.default_key else " "
            fragments.append((DIM_STYLE, f" {marker} {index}) "))
            fragments.append(("", f"{choice.label}\n"))
        fragments.append(("bold", "> "))
        return FormattedText(fragments)


class PromptEngine:
    """Ask a question through a transport and check the answer against the choice set."""

    def __init__(self, transport: PromptTransport | None = None) -> None:
        self._transport = transport or TerminalPromptTransport()

    def prompt(self, descriptor: PromptDescriptor) -> PromptOutcome:
        key = self._transport.ask(descriptor)
        if key not in descriptor.choice_keys:
            raise PromptAbortedError(f"answer {key!r} is not one of {sorted(descriptor.choice_keys)}")
        logger.info("prompt.selected key={}", key)
        return PromptOutcome(choice_key=key)
