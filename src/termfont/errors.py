# termfont - Kitty Font Family & Size Switcher
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""Exception hierarchy for termfont."""

from __future__ import annotations


class TermfontError(Exception):
    """Base exception for all termfont errors."""

    pass


class ConfigIOError(TermfontError):
    """Reading or writing the kitty configuration file failed."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot access config '{path}': {reason}")


class ConfigNotFoundError(TermfontError):
    """The kitty configuration file does not exist."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Config file not found: {path}")


class FontNotInstalledError(TermfontError):
    """Requested family is not in the compatible font catalog."""

    def __init__(self, font: str) -> None:
        self.font = font
        super().__init__(
            f"Font '{font}' is not installed or not usable by kitty"
        )


class InvalidArgumentError(TermfontError):
    """A size (or other argument) could not be parsed."""

    def __init__(
        self, value: str, reason: str = "Invalid size format"
    ) -> None:
        self.value = value
        self.reason = reason
        super().__init__(f"{reason}: {value!r}")


class HostApiError(TermfontError):
    """The host surface failed to create, update or destroy a panel."""

    pass


class PanelStateNotice(TermfontError):
    """Benign state-machine guard; reported as information, never escalated."""

    pass


class AlreadyOpenNotice(PanelStateNotice):
    def __init__(self) -> None:
        super().__init__("Window is already open")


class AlreadyClosedNotice(PanelStateNotice):
    def __init__(self) -> None:
        super().__init__("Window is already closed")
