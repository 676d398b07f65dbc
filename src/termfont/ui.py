# termfont - Kitty Font Family & Size Switcher
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

from __future__ import annotations

import shutil
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING

from prompt_toolkit import PromptSession
from prompt_toolkit.application import Application
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.formatted_text import ANSI
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.layout import (
    Float,
    FloatContainer,
    FormattedTextControl,
    Layout,
    Window,
)
from prompt_toolkit.patch_stdout import patch_stdout
from prompt_toolkit.shortcuts import clear as pt_clear
from prompt_toolkit.shortcuts import print_formatted_text
from prompt_toolkit.styles import Style

from .errors import HostApiError
from .panels import PanelView, box_offset, render_box

if TYPE_CHECKING:
    from .kernel import Kernel  # pragma: no cover


# prompt_toolkit key name -> key name understood by the navigator
PANEL_KEYS: dict[str, str] = {
    "up": "up",
    "down": "down",
    "k": "k",
    "j": "j",
    "enter": "enter",
    "escape": "escape",
    "backspace": "backspace",
    "q": "q",
    "c-c": "q",
    "+": "+",
    "=": "=",
    "-": "-",
}


# ----------------------------
# Theme / Style
# ----------------------------


def _default_style_dict() -> dict[str, str]:
    # Conservative: works across prompt_toolkit versions.
    return {
        # completion menu
        "completion-menu": "bg:#111111 #d0d0d0",
        "completion-menu.completion": "bg:#111111 #d0d0d0",
        "completion-menu.completion.current": "bg:#303030 #ffffff bold",
        "completion-menu.meta.completion": "bg:#111111 #808080",
        "scrollbar.background": "bg:#202020",
        "scrollbar.button": "bg:#505050",
        # panels
        "termfont.panel": "bg:#111111 #d0d0d0",
        "termfont.border": "bg:#111111 #5f87ff",
        "termfont.cursor": "bg:#303030 #ffffff bold",
    }


def build_style(overrides: dict[str, str] | None = None) -> Style:
    base = _default_style_dict()
    # only keep string->string
    for k, v in (overrides or {}).items():
        if isinstance(k, str) and isinstance(v, str):
            base[k] = v
    return Style.from_dict(base)


def panel_fragments(view: PanelView) -> list[tuple[str, str]]:
    """Rendered box as prompt_toolkit (style, text) fragments."""
    rows = render_box(view)
    offset = box_offset(view.border)
    cursor_row = None
    if view.cursor is not None:
        visible = view.cursor - view.top
        if 0 <= visible < view.height:
            cursor_row = visible + offset
    last = len(rows) - 1

    out: list[tuple[str, str]] = []
    for i, row in enumerate(rows):
        if i == cursor_row:
            style = "class:termfont.cursor"
        elif offset and i in (0, last):
            style = "class:termfont.border"
        else:
            style = "class:termfont.panel"
        out.append((style, row))
        if i != last:
            out.append(("", "\n"))
    return out


# ----------------------------
# Surface
# ----------------------------


class PanelHandle:
    """Opaque handle returned to the core; owns one Application run."""

    def __init__(
        self, view: PanelView, on_key: Callable[[str], None]
    ) -> None:
        self.view = view
        self.on_key = on_key
        self.app: Application | None = None
        self.closed = False


class PromptToolkitSurface:
    """Surface protocol drawn with prompt_toolkit.

    ``open`` only queues the panel; the UI calls ``run_pending`` after each
    command so the REPL prompt is not active while a panel is up.
    """

    def __init__(self, style: Style | None = None) -> None:
        self.style = style or build_style()
        self._pending: list[PanelHandle] = []

    # ---------- Surface protocol ----------

    def open(
        self, view: PanelView, on_key: Callable[[str], None]
    ) -> PanelHandle:
        handle = PanelHandle(view, on_key)
        self._pending.append(handle)
        return handle

    def set_view(self, handle: PanelHandle, view: PanelView) -> None:
        if not isinstance(handle, PanelHandle) or handle.closed:
            raise HostApiError("Panel is not open")
        handle.view = view
        if handle.app is not None:
            handle.app.invalidate()

    def close(self, handle: PanelHandle) -> None:
        if not isinstance(handle, PanelHandle):
            raise HostApiError("Unknown panel handle")
        handle.closed = True
        if handle in self._pending:
            self._pending.remove(handle)
        app = handle.app
        if app is not None and app.is_running and not app.is_done:
            app.exit()

    def size(self) -> tuple[int, int]:
        cols, rows = shutil.get_terminal_size((120, 24))
        return (cols, rows)

    # ---------- running ----------

    @property
    def has_pending(self) -> bool:
        return bool(self._pending)

    def run_pending(self) -> None:
        """Show queued panels one after another until none remain."""
        while self._pending:
            handle = self._pending.pop(0)
            if handle.closed:
                continue
            self._run(handle)

    def _key_bindings(self, handle: PanelHandle) -> KeyBindings:
        kb = KeyBindings()

        for pt_key, name in PANEL_KEYS.items():

            @kb.add(pt_key, eager=True)
            def _(event, name=name):
                handle.on_key(name)

        return kb

    def _build_app(self, handle: PanelHandle) -> Application:
        body = Window(
            FormattedTextControl(lambda: panel_fragments(handle.view)),
            dont_extend_width=True,
            dont_extend_height=True,
        )
        layout = Layout(
            FloatContainer(content=Window(), floats=[Float(content=body)])
        )
        return Application(
            layout=layout,
            key_bindings=self._key_bindings(handle),
            style=self.style,
            full_screen=True,
        )

    def _run(self, handle: PanelHandle) -> None:
        handle.app = self._build_app(handle)
        try:
            handle.app.run()
        except (KeyboardInterrupt, EOFError):
            handle.on_key("q")
        finally:
            handle.app = None


# ----------------------------
# Completion
# ----------------------------


class TermfontCompleter(Completer):
    """Command names first, then compatible font keys for set_font."""

    def __init__(self, kernel: Kernel | None) -> None:
        self.kernel = kernel

    def get_completions(
        self, document, complete_event
    ) -> Iterable[Completion]:
        if self.kernel is None:
            return
        before = document.text_before_cursor or ""
        token = "" if before[-1:].isspace() else (before.split() or [""])[-1]

        for candidate in self.kernel.complete(before):
            yield Completion(candidate, start_position=-len(token))


# ----------------------------
# PromptSession UI
# ----------------------------


class PromptToolkitUI:
    """
    Terminal-friendly REPL host:
      - Keeps normal terminal scrollback + drag-select copy.
      - Tab completion of commands and font keys.
      - Panels run as short full-screen overlays between prompts.
      - Ctrl+L clears, Ctrl+T opens the main menu.
    """

    def __init__(
        self,
        kernel: Kernel | None = None,
        surface: PromptToolkitSurface | None = None,
    ) -> None:
        self.kernel = kernel
        self.surface = surface or PromptToolkitSurface()
        self.session: PromptSession[str] | None = None
        self._style = self.surface.style

        # Track whether we ended on a newline (to prevent prompt mangling)
        self._needs_newline_before_prompt = False

    # ---------- session ----------

    def _ensure_session(self) -> None:
        if self.session is not None:
            return

        key_bindings = (
            self.build_key_bindings(self.kernel)
            if self.kernel else None
        )

        self.session = PromptSession(
            key_bindings=key_bindings,
            completer=TermfontCompleter(self.kernel),
            complete_while_typing=True,
            style=self._style,
        )

    # ---------- public API ----------

    def read(self, prompt: str) -> str:
        self._ensure_session()
        assert self.session is not None

        # If last output didn't end with newline, insert one
        # before prompt redraw
        if self._needs_newline_before_prompt:
            print_formatted_text(
                ANSI("\n"), style=self._style, end=""
            )
            self._needs_newline_before_prompt = False

        with patch_stdout():
            return self.session.prompt(ANSI(prompt + " "))

    def write(self, text: str) -> None:
        """Write EXACTLY what we receive (no extra newline).

        Track prompt safety.
        """
        if not text:
            return
        print_formatted_text(ANSI(text), style=self._style, end="")
        self._needs_newline_before_prompt = not text.endswith("\n")

    def clear(self) -> None:
        pt_clear()

    def run_panels(self) -> None:
        self.surface.run_pending()

    # ---------- keybindings ----------

    def build_key_bindings(self, kernel: Kernel) -> KeyBindings:
        kb = KeyBindings()

        @kb.add("c-l")
        def _(event):
            event.app.renderer.clear()
            event.current_buffer.reset()
            event.app.invalidate()

        @kb.add("c-t")
        def _(event):
            # Empty line = main menu
            event.current_buffer.reset()
            event.app.exit(result="")

        return kb
