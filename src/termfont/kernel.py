# termfont - Kitty Font Family & Size Switcher
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
termfont kernel.

The one shared application instance:
- Config (replaced only by setup)
- ConfigStore + FontResolver (catalog cache)
- Navigator (the live panel, if any)
- CommandRouter (entry point for command lines)

Important boundary:
- Kernel does not load YAML; the CLI injects a Config.
- Kernel does not draw; it consumes the injected Surface.

Every entry point (handle_command, handle_key, complete, setup) holds a
single re-entrant lock for the duration of the call, so host callbacks
registered in several places cannot interleave.
"""

from __future__ import annotations

import threading
import traceback
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

from . import config as cfg_module
from .config import Config, tag
from .errors import TermfontError
from .executor import SubprocessExecutor
from .fonts import FontResolver
from .interfaces import Executor, Surface
from .navigator import Navigator
from .panels import PanelView, render_box
from .router import CommandRouter
from .store import ConfigStore


def write_crash_log(
    error: Exception,
    panel: str = "",
    raw_command: str = "",
    conf_path: Path | str | None = None,
) -> None:
    """Write an entry to the crash log.

    Logs unhandled exceptions reaching the kernel boundary.
    Only creates the log directory when actually needed.
    Appends to crash.log (never overwrites).
    """
    try:
        log_path = cfg_module.crash_log_path(cfg_module.get_data_root())

        # Create logs directory only when we need to write
        log_path.parent.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().isoformat()
        lines = [
            f"{timestamp}",
            f"panel={panel}",
        ]

        if raw_command:
            lines.append(f"raw={raw_command}")
        if conf_path:
            lines.append(f"conf={conf_path}")

        lines.append(f"error={type(error).__name__}: {error}")
        lines.append("traceback:")
        lines.append(
            "".join(
                traceback.format_exception(
                    type(error), error, error.__traceback__
                )
            )
        )
        lines.append("----")

        with log_path.open("a", encoding="utf-8") as f:
            f.write("\n".join(lines) + "\n")

    except OSError:
        # Already reporting an error; a second one has nowhere to go
        pass


class NullSurface:
    """Surface for headless use: panels exist only as state.

    With ``echo`` set, every shown or refreshed panel is printed as text.
    """

    def __init__(
        self,
        columns: int = 80,
        rows: int = 24,
        echo: Callable[[str], None] | None = None,
    ) -> None:
        self._size = (columns, rows)
        self._next = 0
        self.echo = echo
        self.views: dict[int, PanelView] = {}

    def _echo(self, view: PanelView) -> None:
        if self.echo is not None:
            self.echo("\n".join(render_box(view)))

    def open(self, view: PanelView, on_key: Callable[[str], None]) -> int:
        self._next += 1
        self.views[self._next] = view
        self._echo(view)
        return self._next

    def set_view(self, handle: int, view: PanelView) -> None:
        self.views[handle] = view
        self._echo(view)

    def close(self, handle: int) -> None:
        self.views.pop(handle, None)

    def size(self) -> tuple[int, int]:
        return self._size


@dataclass
class Kernel:
    """termfont session engine."""

    config: Config = field(default_factory=Config)
    executor: Executor | None = None
    surface: Surface | None = None

    # ---- Output hooks (wired by UI/CLI) ----
    output_fn: Callable[[str], None] | None = None
    error_fn: Callable[[str], None] | None = None

    # Wrap notice tags in ANSI color
    color: bool = False

    lock: threading.RLock = field(default_factory=threading.RLock)

    store: ConfigStore = field(init=False)
    fonts: FontResolver = field(init=False)
    navigator: Navigator = field(init=False)
    router: CommandRouter = field(init=False)

    _notices: list[str] = field(default_factory=list, init=False)

    def __post_init__(self) -> None:
        if self.executor is None:
            self.executor = SubprocessExecutor(timeout=self.config.timeout)
        if self.surface is None:
            self.surface = NullSurface()

        self.fonts = FontResolver(self.executor, lock=self.lock)
        self.store = ConfigStore(
            lambda: self.config, self.fonts, self.executor
        )
        self.navigator = Navigator(
            lambda: self.config,
            self.store,
            self.fonts,
            self.surface,
            notify=self._notify,
            key_handler=self.handle_key,
        )
        self.router = CommandRouter(
            self.store, self.fonts, self.navigator, notify=self._notify
        )

    # -----------------------
    # Notices
    # -----------------------

    def _colorize(self, text: str) -> str:
        if not self.color:
            return text
        for name in cfg_module.TAG_COLORS:
            prefix = f"[{name}] "
            if text.startswith(prefix):
                return cfg_module.tag(name, text[len(prefix):], color=True)
        return text

    def _notify(self, text: str) -> None:
        """Stream to the wired sink, or keep for the caller's return value."""
        is_error = text.startswith(("[ERR]", "[ERROR]"))
        sink = self.error_fn if is_error else self.output_fn
        if sink is not None:
            sink(self._colorize(text) + "\n")
        else:
            self._notices.append(text)

    def _drain(self) -> str:
        out = "\n".join(self._colorize(n) for n in self._notices)
        self._notices.clear()
        return out

    def _run(self, raw: str, action: Callable[[], Any]) -> str:
        """Run action under the lock and convert errors into notices."""
        with self.lock:
            try:
                action()
            except TermfontError as e:
                self._notify(tag("ERR", str(e)))
            except Exception as e:
                write_crash_log(
                    e,
                    panel=self.panel_name,
                    raw_command=raw,
                    conf_path=self.config.conf_path,
                )
                self._notify(
                    tag(
                        "ERROR",
                        f"Unhandled exception: {type(e).__name__}: {e}",
                    )
                )
            return self._drain()

    # -----------------------
    # Entry points
    # -----------------------

    @property
    def panel_name(self) -> str:
        state = self.navigator.state
        return state.value if state is not None else "closed"

    def setup(self, options: dict[str, Any] | None = None) -> Config:
        """Replace the session config from an options bag."""
        with self.lock:
            self.config = Config.from_options(options)
            if isinstance(self.executor, SubprocessExecutor):
                self.executor.timeout = self.config.timeout
            return self.config

    def handle_command(self, command: str) -> str:
        """Handle a single command line; returns the notices it produced."""
        return self._run(command, lambda: self.router.dispatch(command))

    def handle_key(self, key: str) -> str:
        """Forward a key pressed inside the live panel."""
        return self._run(
            f"<key:{key}>", lambda: self.navigator.handle_key(key)
        )

    def complete(self, text: str) -> list[str]:
        with self.lock:
            try:
                return self.router.complete(text)
            except TermfontError:
                return []
