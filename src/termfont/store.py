# termfont - Kitty Font Family & Size Switcher
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
kitty.conf-backed storage for termfont.

Reads the current font family/size and rewrites exactly one directive
line per mutation. Every mutation is read-modify-write of the whole file,
and is followed by a reload signal to the running terminal.
"""

from __future__ import annotations

import os
import re
import signal
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from .errors import ConfigIOError, ConfigNotFoundError, FontNotInstalledError
from .fonts import FontResolver
from .interfaces import ConfigModel, Executor

FAMILY_KEY = "font_family"
SIZE_KEY = "font_size"
DEFAULT_SIZE_TEXT = "default"

_NUMBER = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)$")


def _directive(key: str) -> re.Pattern[str]:
    # indent, key, separator, value; value stops before any line ending
    return re.compile(
        rf"^(?P<indent>[ \t]*){re.escape(key)}"
        r"(?P<sep>[ \t]+)(?P<value>[^\r\n]*)",
        re.MULTILINE,
    )


_FAMILY_RE = _directive(FAMILY_KEY)
_SIZE_RE = _directive(SIZE_KEY)
_PATTERNS = {FAMILY_KEY: _FAMILY_RE, SIZE_KEY: _SIZE_RE}


def is_number(text: str) -> bool:
    return bool(_NUMBER.match(text.strip()))


def format_size(size: float) -> str:
    """Shortest plain decimal form: 12.5 -> '12.5', 13.0 -> '13'.

    Never exponent notation, so ``is_number`` always accepts the result.
    """
    text = f"{size:.15g}"
    if "e" in text:
        text = f"{size:.15f}".rstrip("0").rstrip(".")
    return text


@dataclass(frozen=True)
class FontSettings:
    """Font directives as found on disk. Produced fresh on every read."""

    family: str = ""
    size_text: str = DEFAULT_SIZE_TEXT

    def size_value(self) -> float | None:
        if not is_number(self.size_text):
            return None
        return float(self.size_text)


def parse_font_settings(content: str) -> FontSettings:
    """Last ``font_family`` / ``font_size`` line wins.

    A size that is not a plain decimal number reads as ``"default"``.
    """
    family = ""
    size_text = DEFAULT_SIZE_TEXT

    for m in _FAMILY_RE.finditer(content):
        family = m.group("value").strip()

    for m in _SIZE_RE.finditer(content):
        value = m.group("value").strip()
        size_text = value if is_number(value) else DEFAULT_SIZE_TEXT

    return FontSettings(family=family, size_text=size_text)


def replace_directive(content: str, key: str, value: str) -> str:
    """Rewrite the value of the first ``key`` line only.

    Indentation and separator are kept; every other byte is untouched.
    When the key is absent the directive is appended as a new last line.
    """
    pattern = _PATTERNS.get(key) or _directive(key)
    m = pattern.search(content)
    if m is None:
        newline = "\r\n" if "\r\n" in content else "\n"
        if content and not content.endswith(("\n", "\r")):
            content += newline
        return f"{content}{key} {value}{newline}"

    start, end = m.span("value")
    return content[:start] + value + content[end:]


class ConfigStore:
    """Reads and mutates the kitty configuration file."""

    def __init__(
        self,
        config_ref: Callable[[], ConfigModel],
        fonts: FontResolver,
        executor: Executor,
    ):
        """Initialize store.

        Args:
            config_ref: returns the current config (setup may replace it)
            fonts: resolver used to validate family keys
            executor: runs pidof for the reload signal
        """
        self._config_ref = config_ref
        self.fonts = fonts
        self.executor = executor

    @property
    def path(self) -> Path:
        return self._config_ref().resolved_conf_path()

    # ----------------------------------------------------------------
    # Reading
    # ----------------------------------------------------------------

    def _read_text(self) -> str:
        path = self.path
        if not path.exists():
            raise ConfigNotFoundError(str(path))
        try:
            with path.open("r", encoding="utf-8", newline="") as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigIOError(str(path), str(e)) from e

    def _write_text(self, content: str) -> None:
        path = self.path
        try:
            with path.open("w", encoding="utf-8", newline="") as f:
                f.write(content)
        except OSError as e:
            raise ConfigIOError(str(path), str(e)) from e

    def read(self) -> FontSettings:
        return parse_font_settings(self._read_text())

    # ----------------------------------------------------------------
    # Mutations
    # ----------------------------------------------------------------

    def replace_family(self, key: str) -> str:
        """Point font_family at the catalog entry for ``key``.

        Resolution happens before the file is opened: an unknown key
        raises FontNotInstalledError with the file untouched.

        Returns:
            The display name written to the file.
        """
        display = self.fonts.resolve(key)
        if display is None:
            raise FontNotInstalledError(key)

        content = self._read_text()
        self._write_text(replace_directive(content, FAMILY_KEY, display))
        self.reload()
        return display

    def replace_size(self, size: float) -> str:
        """Point font_size at ``size``. Returns the text written."""
        text = format_size(size)
        content = self._read_text()
        self._write_text(replace_directive(content, SIZE_KEY, text))
        self.reload()
        return text

    # ----------------------------------------------------------------
    # Reload
    # ----------------------------------------------------------------

    def terminal_pids(self) -> list[int]:
        name = self._config_ref().process_name
        exit_code, stdout, _stderr = self.executor.run_argv(["pidof", name])
        if exit_code != 0:
            return []
        pids: list[int] = []
        for token in stdout.split():
            if token.isdigit():
                pids.append(int(token))
        return pids

    def reload(self) -> bool:
        """Ask every running terminal to re-read its config (SIGUSR1).

        A terminal that is not running is not an error.

        Returns:
            True if at least one process was signalled.
        """
        delivered = False
        for pid in self.terminal_pids():
            try:
                os.kill(pid, signal.SIGUSR1)
                delivered = True
            except (ProcessLookupError, PermissionError):
                # exited since pidof, or owned by another user
                continue
        return delivered
