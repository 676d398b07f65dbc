# termfont - Kitty Font Family & Size Switcher
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Panel navigation state machine.

States are Closed (no panel) plus one state per PanelKind. At most one
panel is live; its surface handle is held from Surface.open until
Surface.close and is released on every exit path.

Transitions:
- Closed -> any kind via open_*()
- any kind -> Closed via close() ('q')
- any kind -> MainMenu via back() (escape/backspace), as one action
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from .config import BorderStyle, Config, tag
from .errors import (
    AlreadyClosedNotice,
    AlreadyOpenNotice,
    InvalidArgumentError,
    PanelStateNotice,
)
from .fonts import FontResolver, format_columns, normalize_font_key
from .interfaces import Surface
from .panels import (
    MENU_ITEMS,
    FamilyPickerPanel,
    FontInfoPanel,
    FontListPanel,
    MainMenuPanel,
    Panel,
    PanelKind,
    SizeControlPanel,
    box_offset,
)
from .store import ConfigStore, format_size

UP_KEYS = {"up", "k"}
DOWN_KEYS = {"down", "j"}
BACK_KEYS = {"escape", "backspace"}
SIZE_UP_KEYS = {"+", "=", "up", "k"}
SIZE_DOWN_KEYS = {"-", "down", "j"}


def font_info_text(family: str, size_text: str) -> str:
    return f"Family: {family}\nSize:   {size_text}"


class Navigator:
    """Owns the single live panel and applies edits chosen inside it."""

    def __init__(
        self,
        config_ref: Callable[[], Config],
        store: ConfigStore,
        fonts: FontResolver,
        surface: Surface,
        notify: Callable[[str], None],
        key_handler: Callable[[str], None] | None = None,
    ) -> None:
        self._config_ref = config_ref
        self.store = store
        self.fonts = fonts
        self.surface = surface
        self.notify = notify
        # Keys reach the navigator through the kernel so the lock is held
        self.key_handler = key_handler or self.handle_key
        self.panel: Panel | None = None

        self._menu_actions: dict[str, Callable[[], bool]] = {
            MENU_ITEMS[0]: self.open_font_info,
            MENU_ITEMS[1]: self.open_family_picker,
            MENU_ITEMS[2]: self.open_size_control,
            MENU_ITEMS[3]: self.open_font_list,
        }

    # -----------------------
    # State
    # -----------------------

    @property
    def state(self) -> PanelKind | None:
        """Current kind, or None when Closed."""
        return self.panel.kind if self.panel is not None else None

    @property
    def is_open(self) -> bool:
        return self.panel is not None

    def _border(self) -> BorderStyle:
        return self._config_ref().border

    # -----------------------
    # Surface plumbing
    # -----------------------

    def _show(self, panel: Panel) -> bool:
        """Acquire a surface handle for panel and make it current."""
        if self.panel is not None:
            raise AlreadyOpenNotice()

        view = panel.view(self._border())
        handle = self.surface.open(view, self.key_handler)
        panel.handle = handle
        self.panel = panel
        return True

    def _refresh(self) -> None:
        if self.panel is None:
            return
        view = self.panel.view(self._border())
        self.surface.set_view(self.panel.handle, view)

    def _release(self) -> None:
        panel = self.panel
        self.panel = None
        if panel is not None and panel.handle is not None:
            handle, panel.handle = panel.handle, None
            self.surface.close(handle)

    def _guarded(self, transition: Callable[[], bool]) -> bool:
        try:
            return transition()
        except PanelStateNotice as notice:
            self.notify(tag("INFO", str(notice)))
            return False

    # -----------------------
    # Transitions
    # -----------------------

    def open_main_menu(self) -> bool:
        return self._guarded(lambda: self._show(MainMenuPanel()))

    def open_family_picker(self) -> bool:
        def transition() -> bool:
            if self.panel is not None:
                raise AlreadyOpenNotice()

            names = self.fonts.sorted_names()
            if not names:
                self.notify(tag("INFO", "No compatible fonts found"))
                return False

            current = self.store.read().family
            # Exact match against display names; otherwise the top entry
            cursor = names.index(current) if current in names else 0
            return self._show(FamilyPickerPanel(items=names, cursor=cursor))

        return self._guarded(transition)

    def open_size_control(self) -> bool:
        def transition() -> bool:
            if self.panel is not None:
                raise AlreadyOpenNotice()

            settings = self.store.read()
            size = settings.size_value()
            if size is None:
                raise InvalidArgumentError(
                    settings.size_text, "Invalid current font size in config"
                )
            return self._show(SizeControlPanel(size=size))

        return self._guarded(transition)

    def open_font_info(self) -> bool:
        def transition() -> bool:
            if self.panel is not None:
                raise AlreadyOpenNotice()

            settings = self.store.read()
            text = font_info_text(settings.family, settings.size_text)
            return self._show(FontInfoPanel(text=text))

        return self._guarded(transition)

    def open_font_list(self) -> bool:
        def transition() -> bool:
            if self.panel is not None:
                raise AlreadyOpenNotice()

            names = self.fonts.sorted_names()
            if not names:
                self.notify(tag("INFO", "No compatible fonts found"))
                return False

            columns, rows = self.surface.size()
            frame = 2 * box_offset(self._border())
            width = max(20, columns - frame - 4)
            text = "\n".join(format_columns(names, width))
            # one row of margin above and below the frame
            max_rows = max(1, rows - frame - 2)
            return self._show(FontListPanel(text=text, max_rows=max_rows))

        return self._guarded(transition)

    def close(self) -> bool:
        def transition() -> bool:
            if self.panel is None:
                raise AlreadyClosedNotice()
            self._release()
            return True

        return self._guarded(transition)

    def back(self) -> bool:
        """Close the current panel and reopen the main menu."""
        if self.panel is not None:
            self._release()
        return self.open_main_menu()

    # -----------------------
    # Size edits
    # -----------------------

    def step_size(self, direction: int) -> str:
        """Apply one size step (+1 / -1) and refresh an open size control.

        Returns:
            The size text now on disk.
        """
        settings = self.store.read()
        current = settings.size_value()
        if current is None:
            raise InvalidArgumentError(
                settings.size_text,
                "Invalid font size found in the configuration file",
            )

        new_size = current + direction * self._config_ref().step
        if new_size <= 0:
            raise InvalidArgumentError(
                format_size(new_size), "Font size must be positive"
            )

        written = self.store.replace_size(new_size)
        if isinstance(self.panel, SizeControlPanel):
            self.panel.size = float(written)
            self._refresh()
        return written

    # -----------------------
    # Keys
    # -----------------------

    def handle_key(self, key: str) -> None:
        panel = self.panel
        if panel is None:
            return

        if key == "q":
            self.close()
            return

        if isinstance(panel, SizeControlPanel):
            if key in SIZE_UP_KEYS:
                self.step_size(+1)
            elif key in SIZE_DOWN_KEYS:
                self.step_size(-1)
            elif key in BACK_KEYS:
                self.back()
            return

        if isinstance(panel, MainMenuPanel):
            if key == "escape":
                self.close()
            elif key in UP_KEYS | DOWN_KEYS:
                self._move(panel, -1 if key in UP_KEYS else 1)
            elif key == "enter":
                self._dispatch_menu(panel)
            return

        if isinstance(panel, FamilyPickerPanel):
            if key in UP_KEYS | DOWN_KEYS:
                self._move(panel, -1 if key in UP_KEYS else 1)
            elif key == "enter":
                self._submit_family(panel)
            elif key in BACK_KEYS:
                self.back()
            return

        # FontInfo / FontList are read-only; a long list scrolls
        if key in BACK_KEYS:
            self.back()
        elif isinstance(panel, FontListPanel) and key in UP_KEYS | DOWN_KEYS:
            panel.scroll(-1 if key in UP_KEYS else 1)
            self._refresh()

    def _move(self, panel: Any, delta: int) -> None:
        panel.move(delta)
        self._refresh()

    def _dispatch_menu(self, panel: MainMenuPanel) -> None:
        action = self._menu_actions.get(panel.selected() or "")
        if action is None:
            return
        self._release()
        action()

    def _submit_family(self, panel: FamilyPickerPanel) -> None:
        line = panel.selected()
        if not line:
            return
        display = self.store.replace_family(normalize_font_key(line))
        self.notify(tag("OK", f"Font family set to {display}"))
