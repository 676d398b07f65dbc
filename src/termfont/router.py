# termfont - Kitty Font Family & Size Switcher
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Command parsing and dispatch.

A command line is ``<action> [argument...]``. The action picks either a
direct ConfigStore mutation or a navigator transition; everything after
the action is joined into a single argument, so ``set_font Fira Code``
and ``set_font FiraCode`` resolve to the same catalog key.
"""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum

from .config import tag
from .errors import InvalidArgumentError
from .fonts import FontResolver, normalize_font_key
from .navigator import Navigator
from .panels import PanelKind
from .store import ConfigStore, is_number


class Command(str, Enum):
    MAIN_MENU = ""
    CHECK = "check"
    FLOAT_CHECK = "float_check"
    SET_FONT = "set_font"
    SET_SIZE = "set_size"
    LIST = "list"
    FLOAT_LIST = "float_list"
    CLOSE = "close"
    SIZE_UP = "size_up"
    SIZE_DOWN = "size_down"


COMMAND_NAMES: list[str] = [c.value for c in Command if c.value]

# Actions whose argument is never completed
_NO_ARG_COMPLETION = {
    Command.CHECK,
    Command.FLOAT_CHECK,
    Command.SET_SIZE,
    Command.LIST,
    Command.FLOAT_LIST,
    Command.CLOSE,
    Command.SIZE_UP,
    Command.SIZE_DOWN,
}


def parse_command(line: str) -> tuple[Command | None, str | None]:
    """Split a command line into (command, argument).

    Returns (None, None) for an unknown action.
    """
    parts = (line or "").split()
    action = parts[0] if parts else ""
    arg = " ".join(parts[1:]) or None
    try:
        return Command(action), arg
    except ValueError:
        return None, None


def parse_size(text: str) -> float:
    if not is_number(text):
        raise InvalidArgumentError(text)
    size = float(text)
    if size <= 0:
        raise InvalidArgumentError(text, "Font size must be positive")
    return size


class CommandRouter:
    """Single entry point behind the host's command."""

    def __init__(
        self,
        store: ConfigStore,
        fonts: FontResolver,
        navigator: Navigator,
        notify: Callable[[str], None],
    ) -> None:
        self.store = store
        self.fonts = fonts
        self.navigator = navigator
        self.notify = notify

        self._handlers: dict[Command, Callable[[str | None], None]] = {
            Command.MAIN_MENU: lambda _arg: self.navigator.open_main_menu(),
            Command.CHECK: lambda _arg: self._check(),
            Command.FLOAT_CHECK: lambda _arg: self.navigator.open_font_info(),
            Command.SET_FONT: self._set_font,
            Command.SET_SIZE: self._set_size,
            Command.LIST: lambda _arg: self._list(),
            Command.FLOAT_LIST: lambda _arg: self.navigator.open_font_list(),
            Command.CLOSE: lambda _arg: self.navigator.close(),
            Command.SIZE_UP: lambda _arg: self._step(+1),
            Command.SIZE_DOWN: lambda _arg: self._step(-1),
        }

    def dispatch(self, line: str) -> Command | None:
        """Run one command line. Unknown actions change nothing."""
        command, arg = parse_command(line)
        if command is None:
            action = (line or "").split()[0]
            self.notify(tag("ERR", f"Unknown command: {action}"))
            return None

        self._handlers[command](arg)
        return command

    # -----------------------
    # Handlers
    # -----------------------

    def _check(self) -> None:
        settings = self.store.read()
        self.notify(
            f"Font family: {settings.family}\n"
            f"Font size: {settings.size_text}"
        )

    def _list(self) -> None:
        names = self.fonts.sorted_names()
        if not names:
            self.notify(tag("INFO", "No compatible fonts found"))
            return
        lines = ["Available fonts:"]
        lines.extend(f"  - {name}" for name in names)
        self.notify("\n".join(lines))

    def _set_font(self, arg: str | None) -> None:
        if arg is None:
            self.navigator.open_family_picker()
            return
        display = self.store.replace_family(normalize_font_key(arg))
        self.notify(tag("OK", f"Font family set to {display}"))

    def _set_size(self, arg: str | None) -> None:
        if arg is None:
            self.navigator.open_size_control()
            return
        written = self.store.replace_size(parse_size(arg))
        self.notify(tag("OK", f"Font size set to {written}"))

    def _step(self, direction: int) -> None:
        written = self.navigator.step_size(direction)
        if self.navigator.state is not PanelKind.SIZE_CONTROL:
            self.notify(tag("OK", f"Font size set to {written}"))

    # -----------------------
    # Completion
    # -----------------------

    def complete(self, text: str) -> list[str]:
        """Candidates for the last token of a partial command line.

        Command names while the action is being typed; compatible font
        keys (case-insensitive substring match) after ``set_font``.
        """
        text = text or ""
        parts = text.split()
        typing_action = not parts or (
            len(parts) == 1 and not text[-1:].isspace()
        )

        if typing_action:
            lead = parts[0] if parts else ""
            return [n for n in COMMAND_NAMES if n.startswith(lead)]

        command, _arg = parse_command(parts[0])
        if command is None or command in _NO_ARG_COMPLETION:
            return []

        # set_font: complete the token under the cursor
        lead = "" if text[-1:].isspace() else parts[-1]
        needle = lead.lower()
        return sorted(
            key for key in self.fonts.catalog()
            if needle in key.lower()
        )
