# termfont - Kitty Font Family & Size Switcher
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Font discovery for termfont.

The catalog is the intersection of two independent enumerations:
- installed families (fc-list)
- families kitty can actually use (kitty's own font map, dumped as JSON)

Building it spawns two processes, so it is computed once and memoized
for the life of the process.
"""

from __future__ import annotations

import json
import math
import re
import threading
from collections.abc import Callable, Iterable
from typing import Any

from .interfaces import Executor

FC_LIST_ARGV = ["fc-list", ":", "family"]

KITTY_FONTS_SCRIPT = (
    "from kitty.fonts.common import all_fonts_map; import json; "
    "print(json.dumps(all_fonts_map(True), indent=2))"
)

_WHITESPACE = re.compile(r"\s+")


def normalize_font_key(name: str) -> str:
    """Catalog key for a family: all whitespace removed."""
    return _WHITESPACE.sub("", name or "")


def parse_installed_fonts(output: str) -> set[str]:
    """Parse ``fc-list : family`` output.

    One family per line, possibly comma-qualified with localized
    aliases; only the first comma token is kept.
    """
    fonts: set[str] = set()
    for line in output.splitlines():
        name = line.split(",", 1)[0].strip()
        if name:
            fonts.add(name)
    return fonts


def _collect_families(node: Any, out: set[str]) -> None:
    if isinstance(node, dict):
        for value in node.values():
            _collect_families(value, out)
    elif isinstance(node, list):
        for item in node:
            if isinstance(item, dict):
                family = item.get("family")
                if isinstance(family, str) and family.strip():
                    out.add(family.strip())
            else:
                _collect_families(item, out)


def parse_kitty_fonts(output: str) -> set[str]:
    """Extract every ``family`` from kitty's font map JSON.

    kitty nests the map under ``family_map``; a bare top-level map is
    accepted too. Anything malformed yields an empty set.
    """
    if not output or not output.strip():
        return set()
    try:
        data = json.loads(output)
    except ValueError:
        return set()
    if not isinstance(data, dict):
        return set()

    family_map = data.get("family_map", data)
    if not isinstance(family_map, dict):
        return set()

    fonts: set[str] = set()
    for entries in family_map.values():
        if isinstance(entries, list):
            _collect_families(entries, fonts)
    return fonts


def build_catalog(
    installed: Iterable[str], supported: set[str]
) -> dict[str, str]:
    """Map normalized key -> installed display name.

    A font qualifies when its exact name or its whitespace-stripped name
    is kitty-supported. Names are visited in sorted order and the first
    name for a key wins, so input order never matters.
    """
    catalog: dict[str, str] = {}
    for name in sorted(set(installed)):
        key = normalize_font_key(name)
        if not key or key in catalog:
            continue
        if name in supported or key in supported:
            catalog[key] = name
    return catalog


def format_columns(names: list[str], width: int, gap: int = 2) -> list[str]:
    """Lay names out column-major (like ``ls``) within ``width`` chars."""
    if not names:
        return []

    col_width = max(len(n) for n in names) + gap
    cols = max(1, (max(width, 0) + gap) // col_width)
    rows = math.ceil(len(names) / cols)
    cols = math.ceil(len(names) / rows)

    lines: list[str] = []
    for r in range(rows):
        cells = []
        for c in range(cols):
            idx = c * rows + r
            if idx < len(names):
                cells.append(names[idx].ljust(col_width))
        lines.append("".join(cells).rstrip())
    return lines


class CatalogCache:
    """Process-wide memo for the font catalog.

    ``get_or_compute`` runs ``compute`` at most once until ``invalidate``
    is called. The lock is shared with the owning kernel.
    """

    def __init__(self, lock: threading.RLock | None = None) -> None:
        self._lock = lock or threading.RLock()
        self._value: dict[str, str] | None = None

    @property
    def is_cached(self) -> bool:
        return self._value is not None

    def get_or_compute(
        self, compute: Callable[[], dict[str, str]]
    ) -> dict[str, str]:
        with self._lock:
            if self._value is None:
                self._value = compute()
            return self._value

    def invalidate(self) -> None:
        with self._lock:
            self._value = None


class FontResolver:
    """Produces the set of fonts both installed and usable by kitty."""

    def __init__(
        self,
        executor: Executor,
        lock: threading.RLock | None = None,
        kitty_argv: list[str] | None = None,
    ) -> None:
        self.executor = executor
        self.cache = CatalogCache(lock)
        self.kitty_argv = kitty_argv or [
            "kitty", "+runpy", KITTY_FONTS_SCRIPT
        ]

    def installed_fonts(self) -> set[str]:
        exit_code, stdout, _stderr = self.executor.run_argv(FC_LIST_ARGV)
        if exit_code != 0:
            return set()
        return parse_installed_fonts(stdout)

    def terminal_supported_fonts(self) -> set[str]:
        exit_code, stdout, _stderr = self.executor.run_argv(self.kitty_argv)
        if exit_code != 0:
            return set()
        return parse_kitty_fonts(stdout)

    def _compute(self) -> dict[str, str]:
        return build_catalog(
            self.installed_fonts(), self.terminal_supported_fonts()
        )

    def catalog(self) -> dict[str, str]:
        return self.cache.get_or_compute(self._compute)

    def resolve(self, key: str) -> str | None:
        return self.catalog().get(normalize_font_key(key))

    def sorted_names(self) -> list[str]:
        return sorted(self.catalog().values())

    def invalidate(self) -> None:
        self.cache.invalidate()
