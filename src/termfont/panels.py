# termfont - Kitty Font Family & Size Switcher
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Panel variants shown by the navigator.

Each kind carries exactly the data it needs (items + cursor for pickers,
a number for the size control, preformatted text for info/list) plus the
surface handle it borrows while displayed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar

from .config import BorderStyle
from .store import format_size

MENU_ITEMS: tuple[str, ...] = (
    "Check current font",
    "Set font family",
    "Set font size",
    "Show installed fonts",
)

PICKER_HEIGHT = 10
SIZE_PANEL_WIDTH = 25


class PanelKind(str, Enum):
    MAIN_MENU = "main_menu"
    FAMILY_PICKER = "family_picker"
    SIZE_CONTROL = "size_control"
    FONT_INFO = "font_info"
    FONT_LIST = "font_list"


@dataclass(frozen=True)
class PanelView:
    """Everything a surface needs to draw one panel."""

    title: str
    lines: tuple[str, ...]
    width: int
    height: int
    border: BorderStyle = BorderStyle.SINGLE
    cursor: int | None = None
    # index of the first line shown; cursor is an index into lines
    top: int = 0


@dataclass
class _Panel:
    kind: ClassVar[PanelKind]
    title: ClassVar[str]

    handle: Any = field(default=None, compare=False)
    top: int = 0

    def lines(self) -> list[str]:
        raise NotImplementedError

    def cursor_line(self) -> int | None:
        return None

    def width(self) -> int:
        content = max((len(s) for s in self.lines()), default=20) + 4
        return max(content, len(self.title) + 2)

    def height(self) -> int:
        return max(1, len(self.lines()))

    def scroll(self, delta: int) -> None:
        """Shift the visible window, keeping it inside the lines."""
        limit = max(0, len(self.lines()) - self.height())
        self.top = min(max(self.top + delta, 0), limit)

    def view(self, border: BorderStyle) -> PanelView:
        return PanelView(
            title=self.title,
            lines=tuple(self.lines()),
            width=self.width(),
            height=self.height(),
            border=border,
            cursor=self.cursor_line(),
            top=self.top,
        )


@dataclass
class _Picker(_Panel):
    items: list[str] = field(default_factory=list)
    cursor: int = 0

    def __post_init__(self) -> None:
        self._follow_cursor()

    def lines(self) -> list[str]:
        return list(self.items)

    def cursor_line(self) -> int | None:
        return self.cursor if self.items else None

    def _follow_cursor(self) -> None:
        rows = self.height()
        if self.cursor < self.top:
            self.top = self.cursor
        elif self.cursor >= self.top + rows:
            self.top = self.cursor - rows + 1

    def move(self, delta: int) -> None:
        if not self.items:
            return
        self.cursor = min(max(self.cursor + delta, 0), len(self.items) - 1)
        self._follow_cursor()

    def selected(self) -> str | None:
        if not self.items:
            return None
        return self.items[self.cursor]


@dataclass
class MainMenuPanel(_Picker):
    kind: ClassVar[PanelKind] = PanelKind.MAIN_MENU
    title: ClassVar[str] = " termfont "

    items: list[str] = field(default_factory=lambda: list(MENU_ITEMS))


@dataclass
class FamilyPickerPanel(_Picker):
    kind: ClassVar[PanelKind] = PanelKind.FAMILY_PICKER
    title: ClassVar[str] = " Choose font family "

    def height(self) -> int:
        return min(PICKER_HEIGHT, max(1, len(self.items)))


@dataclass
class SizeControlPanel(_Panel):
    kind: ClassVar[PanelKind] = PanelKind.SIZE_CONTROL
    title: ClassVar[str] = " Change font size "

    size: float = 0.0

    def lines(self) -> list[str]:
        return ["", f"Current size: [ {format_size(self.size)} ]", ""]

    def width(self) -> int:
        return max(SIZE_PANEL_WIDTH, super().width())


@dataclass
class FontInfoPanel(_Panel):
    kind: ClassVar[PanelKind] = PanelKind.FONT_INFO
    title: ClassVar[str] = " Current Font Info "

    text: str = ""

    def lines(self) -> list[str]:
        return self.text.splitlines()


@dataclass
class FontListPanel(_Panel):
    kind: ClassVar[PanelKind] = PanelKind.FONT_LIST
    title: ClassVar[str] = " Available fonts "

    text: str = ""
    max_rows: int | None = None

    def lines(self) -> list[str]:
        return self.text.splitlines()

    def height(self) -> int:
        rows = super().height()
        if self.max_rows is None:
            return rows
        return min(rows, max(1, self.max_rows))


Panel = (
    MainMenuPanel
    | FamilyPickerPanel
    | SizeControlPanel
    | FontInfoPanel
    | FontListPanel
)


# ----------------------------
# Box rendering
# ----------------------------

# (top-left, top-right, bottom-left, bottom-right, horizontal, vertical)
BORDER_CHARS: dict[BorderStyle, tuple[str, str, str, str, str, str]] = {
    BorderStyle.SINGLE: ("┌", "┐", "└", "┘", "─", "│"),
    BorderStyle.DOUBLE: ("╔", "╗", "╚", "╝", "═", "║"),
    BorderStyle.ROUNDED: ("╭", "╮", "╰", "╯", "─", "│"),
    BorderStyle.SOLID: (" ", " ", " ", " ", " ", " "),
}

SHADOW_CHAR = "▒"


def box_offset(border: BorderStyle) -> int:
    """Rows/columns the frame adds before the first content line."""
    return 1 if border in BORDER_CHARS else 0


def _content_rows(view: PanelView) -> list[str]:
    rows: list[str] = []
    for line in view.lines[view.top: view.top + view.height]:
        rows.append((" " + line)[: view.width].ljust(view.width))
    while len(rows) < view.height:
        rows.append(" " * view.width)
    return rows


def render_box(view: PanelView) -> list[str]:
    """Render a panel as plain text rows.

    Framed styles put the title centered in the top edge; ``none`` draws
    content only and ``shadow`` adds a drop shadow instead of a frame.
    """
    rows = _content_rows(view)

    chars = BORDER_CHARS.get(view.border)
    if chars is None:
        if view.border is not BorderStyle.SHADOW:
            return rows
        shadowed = [rows[0] + " "]
        shadowed.extend(r + SHADOW_CHAR for r in rows[1:])
        shadowed.append(" " + SHADOW_CHAR * view.width)
        return shadowed

    tl, tr, bl, br, h, v = chars
    title = view.title[: view.width]
    pad = view.width - len(title)
    left = pad // 2
    top = tl + h * left + title + h * (pad - left) + tr
    bottom = bl + h * view.width + br
    return [top, *(v + r + v for r in rows), bottom]
