# termfont - Kitty Font Family & Size Switcher
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Protocol definitions for dependency injection.

These interfaces keep the core (store, fonts, navigator) independent of
process spawning and of whatever draws the panels.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from pathlib import Path

    from .panels import PanelView  # pragma: no cover


class Executor(Protocol):
    """Protocol for external command execution."""

    def run_argv(self, argv: list[str]) -> tuple[int, str, str]:
        """Run a command without a shell.

        Returns:
            (exit_code, stdout, stderr)
        """
        ...


class Surface(Protocol):
    """Protocol for the host's overlay primitives.

    Handles are opaque to the core: obtained from ``open`` and handed back
    to ``set_view`` / ``close`` until released.
    """

    def open(self, view: PanelView, on_key: Callable[[str], None]) -> Any:
        """Create and show a panel; key presses are forwarded to on_key."""
        ...

    def set_view(self, handle: Any, view: PanelView) -> None:
        """Replace the text/cursor of an open panel."""
        ...

    def close(self, handle: Any) -> None:
        """Destroy the panel and release the handle."""
        ...

    def size(self) -> tuple[int, int]:
        """Host area as (columns, rows)."""
        ...


class ConfigModel(Protocol):
    """Protocol for configuration access."""

    @property
    def conf_path(self) -> str:
        """Unexpanded path to kitty.conf."""
        ...

    @property
    def step(self) -> float:
        """Font size increment."""
        ...

    @property
    def process_name(self) -> str:
        """Terminal process signalled on reload."""
        ...

    def resolved_conf_path(self) -> Path:
        """conf_path with ``~`` expanded."""
        ...
