# termfont - Kitty Font Family & Size Switcher
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Subprocess-backed executor implementation for termfont.

Used for fc-list, kitty +runpy and pidof. Spawn failures and timeouts
are reported through the exit code and stderr, never raised, so callers
can degrade to empty results.
"""

from __future__ import annotations

import os
import subprocess

# Conventional "command not found" status
EXIT_NOT_FOUND = 127


class SubprocessExecutor:
    """Subprocess implementation of Executor protocol."""

    def __init__(self, timeout: int = 30):
        """Initialize executor with configuration.

        Args:
            timeout: Command timeout in seconds (default: 30)
        """
        self.timeout = timeout

    def _build_env(self) -> dict:
        env = os.environ.copy()
        # fc-list and kitty print family names; keep their output stable
        env.setdefault("LC_ALL", "C.UTF-8")
        return env

    def run_argv(self, argv: list[str]) -> tuple[int, str, str]:
        """Run argv without a shell and return buffered results.

        Args:
            argv: program followed by its arguments

        Returns:
            (exit_code, stdout, stderr)
        """
        try:
            result = subprocess.run(
                argv,
                capture_output=True,
                text=True,
                errors="replace",
                timeout=self.timeout,
                env=self._build_env(),
            )
            return (result.returncode, result.stdout, result.stderr)
        except subprocess.TimeoutExpired:
            return (
                1, "",
                f"Command timed out after {self.timeout} seconds",
            )
        except FileNotFoundError:
            return (
                EXIT_NOT_FOUND, "",
                f"Command not found: {argv[0] if argv else ''}",
            )
        except OSError as e:
            return (1, "", f"Error executing command: {e}")
