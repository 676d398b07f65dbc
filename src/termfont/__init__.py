# termfont - Kitty Font Family & Size Switcher
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
termfont core package.

Switch kitty's font family and size from a prompt_toolkit REPL, picking
from the fonts that are both installed and usable by kitty.
"""
from .kernel import Kernel as Kernel  # noqa: F401 (re-export)
