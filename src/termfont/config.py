# termfont - Kitty Font Family & Size Switcher
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Setup intake and filesystem resolution for termfont.

Handles:
- Config value object (border style, kitty.conf path, size step)
- Packaged YAML defaults loading (termfont/defaults/*.yaml)
- User options file resolution (TERMFONT_CONFIG, ~/.config/termfont)
- Data root resolution for the crash log (TERMFONT_DATA_HOME)
- ANSI coloring constants for one-line notices
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

import yaml

try:
    # Py3.9+
    from importlib import resources as importlib_resources
except Exception:  # pragma: no cover
    import importlib_resources  # type: ignore


# -----------------------
# UI constants
# -----------------------

ANSI_COLORS: dict[str, str] = {
    "cyan": "\033[38;5;69;1m",
    "pink": "\033[38;5;169;1m",
    "yellow": "\033[38;5;226;1m",
    "reset": "\033[0m",
    "dim": "\033[2m",
    "green": "\033[32m",
    "red": "\033[31m",
}

TAG_COLORS: dict[str, str] = {
    "OK": "green",
    "INFO": "cyan",
    "ERR": "red",
    "ERROR": "red",
}

DEFAULT_CONF_PATH = "~/.config/kitty/kitty.conf"
DEFAULT_BORDER = "single"
DEFAULT_SIZE_STEP = 0.5
DEFAULT_PROCESS_NAME = "kitty"
DEFAULT_TIMEOUT = 30


def tag(name: str, text: str, color: bool = False) -> str:
    """Format a single-line notice: ``[NAME] text``."""
    label = f"[{name}]"
    if color:
        code = ANSI_COLORS.get(TAG_COLORS.get(name, "reset"), "")
        label = f"{code}{label}{ANSI_COLORS['reset']}"
    return f"{label} {text}"


# -----------------------
# Config model
# -----------------------


class BorderStyle(str, Enum):
    NONE = "none"
    SINGLE = "single"
    DOUBLE = "double"
    ROUNDED = "rounded"
    SOLID = "solid"
    SHADOW = "shadow"

    @classmethod
    def parse(cls, value: Any) -> BorderStyle:
        """Map an option value to a style; anything unknown draws no border."""
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.NONE


@dataclass(frozen=True)
class Config:
    """Session configuration; replaced wholesale by ``Kernel.setup``."""

    conf_path: str = DEFAULT_CONF_PATH
    border: BorderStyle = BorderStyle.SINGLE
    step: float = DEFAULT_SIZE_STEP
    process_name: str = DEFAULT_PROCESS_NAME
    timeout: int = DEFAULT_TIMEOUT

    @classmethod
    def from_options(cls, options: dict[str, Any] | None = None) -> Config:
        """Build a Config from a key/value options bag.

        Recognised keys (aliases in parentheses):
            borders (border): none|single|double|rounded|solid|shadow
            kitty_conf_path (conf_path): path to kitty.conf
            size_step: increment used by size_up/size_down
            process_name: terminal process signalled on reload
            timeout: seconds allowed for each external command

        Missing keys take the documented defaults.
        """
        opts = options if isinstance(options, dict) else {}

        def pick(*keys: str, default: Any) -> Any:
            for key in keys:
                val = opts.get(key)
                if val is not None:
                    return val
            return default

        border = BorderStyle.parse(
            pick("borders", "border", default=DEFAULT_BORDER)
        )
        conf_path = str(
            pick("kitty_conf_path", "conf_path", default=DEFAULT_CONF_PATH)
        )

        try:
            step = float(pick("size_step", default=DEFAULT_SIZE_STEP))
        except (TypeError, ValueError):
            step = DEFAULT_SIZE_STEP
        if step <= 0:
            step = DEFAULT_SIZE_STEP

        try:
            timeout = int(pick("timeout", default=DEFAULT_TIMEOUT))
        except (TypeError, ValueError):
            timeout = DEFAULT_TIMEOUT

        process_name = str(
            pick("process_name", default=DEFAULT_PROCESS_NAME)
        ).strip() or DEFAULT_PROCESS_NAME

        return cls(
            conf_path=conf_path,
            border=border,
            step=step,
            process_name=process_name,
            timeout=timeout,
        )

    def resolved_conf_path(self) -> Path:
        return Path(os.path.expanduser(self.conf_path))


# -----------------------
# Data root
# -----------------------


def get_data_root() -> Path:
    """Get the data root directory for termfont.

    Resolution order:
    1. TERMFONT_DATA_HOME environment variable (if set)
    2. ~/.local/share (default)
    """
    data_home = os.getenv("TERMFONT_DATA_HOME")
    if data_home:
        root = Path(data_home)
    else:
        root = Path.home() / ".local" / "share"

    root.mkdir(parents=True, exist_ok=True)
    return root


def crash_log_path(data_root: Path) -> Path:
    """<data_root>/termfont/logs/crash.log"""
    return data_root / "termfont" / "logs" / "crash.log"


def user_options_path() -> Path:
    """Location of the user options YAML.

    TERMFONT_CONFIG wins; otherwise ~/.config/termfont/config.yaml.
    """
    override = os.getenv("TERMFONT_CONFIG")
    if override:
        return Path(os.path.expanduser(override))
    return Path.home() / ".config" / "termfont" / "config.yaml"


# -----------------------
# Packaged defaults loading
# -----------------------


def _defaults_dir() -> Path:
    """Return the installed path to packaged defaults directory."""
    return Path(
        importlib_resources.files("termfont.defaults")
    )  # type: ignore[arg-type]


def load_defaults_yaml(filename: str) -> dict[str, Any]:
    """
    Load a YAML file from termfont/defaults/.
    """
    defaults_dir = _defaults_dir()
    path = defaults_dir / filename
    if not path.exists():
        raise FileNotFoundError(
            f"Missing defaults YAML: {filename} "
            f"(looked in {defaults_dir})"
        )

    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(
            f"Defaults YAML {filename} must load to a mapping/dict."
        )
    return data


def load_user_options(path: Path | None = None) -> dict[str, Any]:
    """Load the user's options YAML. A missing file is an empty bag."""
    path = path or user_options_path()
    if not path.exists():
        return {}

    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Options file {path} must load to a mapping/dict.")
    return data


def load_config(path: Path | None = None) -> Config:
    """
    Merge packaged settings.yaml with the user's options and build a Config.
    """
    options = dict(load_defaults_yaml("settings.yaml"))
    options.update(load_user_options(path))
    return Config.from_options(options)
