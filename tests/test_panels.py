"""
Tests for panel variants and plain-text box rendering.
"""

from __future__ import annotations

from termfont.config import BorderStyle
from termfont.panels import (
    MENU_ITEMS,
    PICKER_HEIGHT,
    SHADOW_CHAR,
    FamilyPickerPanel,
    FontInfoPanel,
    FontListPanel,
    MainMenuPanel,
    PanelKind,
    PanelView,
    SizeControlPanel,
    box_offset,
    render_box,
)


def test_main_menu_lists_fixed_items() -> None:
    panel = MainMenuPanel()

    assert panel.kind is PanelKind.MAIN_MENU
    assert panel.lines() == list(MENU_ITEMS)
    assert panel.selected() == "Check current font"


def test_picker_cursor_is_clamped() -> None:
    panel = MainMenuPanel()

    panel.move(-1)
    assert panel.cursor == 0

    panel.move(100)
    assert panel.cursor == len(MENU_ITEMS) - 1
    assert panel.selected() == "Show installed fonts"


def test_family_picker_height_is_capped() -> None:
    names = [f"Font {i}" for i in range(25)]

    view = FamilyPickerPanel(items=names, cursor=3).view(BorderStyle.SINGLE)

    assert view.height == PICKER_HEIGHT
    assert view.cursor == 3
    assert view.title == " Choose font family "


def test_empty_picker_has_no_cursor() -> None:
    panel = FamilyPickerPanel(items=[])

    assert panel.selected() is None
    assert panel.view(BorderStyle.NONE).cursor is None


def test_size_control_shows_current_size() -> None:
    panel = SizeControlPanel(size=12.5)

    view = panel.view(BorderStyle.SINGLE)

    assert "Current size: [ 12.5 ]" in view.lines
    assert view.width >= 25
    assert view.cursor is None


def test_info_panel_width_fits_longest_line() -> None:
    panel = FontInfoPanel(text="Family: Fira Code\nSize:   12")

    assert panel.width() == len("Family: Fira Code") + 4
    assert panel.height() == 2


def test_render_single_border_frames_content() -> None:
    view = PanelView(
        title=" T ", lines=("one", "two"), width=10, height=2
    )

    rows = render_box(view)

    assert len(rows) == 4
    assert rows[0].startswith("┌") and rows[0].endswith("┐")
    assert " T " in rows[0]
    assert rows[1] == "│ one      │"
    assert rows[-1] == "└" + "─" * 10 + "┘"
    assert all(len(r) == 12 for r in rows)


def test_render_double_border() -> None:
    view = PanelView(
        title="", lines=("x",), width=4, height=1,
        border=BorderStyle.DOUBLE,
    )

    assert render_box(view) == ["╔════╗", "║ x  ║", "╚════╝"]


def test_render_none_draws_content_only() -> None:
    view = PanelView(
        title=" T ", lines=("a",), width=5, height=3,
        border=BorderStyle.NONE,
    )

    rows = render_box(view)

    assert rows == [" a   ", "     ", "     "]
    assert box_offset(BorderStyle.NONE) == 0


def test_render_shadow_adds_drop_shadow() -> None:
    view = PanelView(
        title="", lines=("a", "b"), width=3, height=2,
        border=BorderStyle.SHADOW,
    )

    rows = render_box(view)

    assert rows == [" a  ", " b ▒", " ▒▒▒"]
    assert SHADOW_CHAR in rows[-1]


def test_render_truncates_long_lines() -> None:
    view = PanelView(
        title="", lines=("abcdefgh",), width=4, height=1,
        border=BorderStyle.NONE,
    )

    assert render_box(view) == [" abc"]


# ----------------------------------------------------------------
# Titles and scrolling
# ----------------------------------------------------------------


def test_titles_are_never_truncated() -> None:
    panels = [
        MainMenuPanel(),
        FamilyPickerPanel(items=["A"]),
        SizeControlPanel(size=9),
        FontInfoPanel(text="x"),
        FontListPanel(text="y"),
    ]

    for panel in panels:
        top = render_box(panel.view(BorderStyle.SINGLE))[0]
        assert panel.title in top, top


def test_picker_window_follows_initial_cursor() -> None:
    names = [f"Font{i:02d}" for i in range(30)]

    view = FamilyPickerPanel(items=names, cursor=25).view(BorderStyle.SINGLE)
    rows = render_box(view)

    assert view.top <= 25 < view.top + view.height
    assert any("Font25" in r for r in rows)
    assert not any("Font00" in r for r in rows)


def test_picker_window_scrolls_with_moves() -> None:
    panel = FamilyPickerPanel(items=[f"F{i}" for i in range(15)])

    panel.move(PICKER_HEIGHT)
    assert panel.cursor == PICKER_HEIGHT
    assert panel.top == 1

    panel.move(-PICKER_HEIGHT)
    assert panel.cursor == 0
    assert panel.top == 0


def test_font_list_height_is_bounded_and_scrolls() -> None:
    text = "\n".join(f"row {i}" for i in range(12))
    panel = FontListPanel(text=text, max_rows=5)

    assert panel.height() == 5

    panel.scroll(100)
    assert panel.top == 7
    rows = render_box(panel.view(BorderStyle.NONE))
    assert rows[-1].strip() == "row 11"

    panel.scroll(-100)
    assert panel.top == 0
