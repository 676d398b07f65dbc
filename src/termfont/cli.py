# termfont - Kitty Font Family & Size Switcher
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
termfont CLI entry point and REPL loop.

Design:
- CLI owns process startup and config loading.
- Kernel is the session engine (config + executor + surface injected).
- UI is a terminal-friendly PromptSession; panels run between prompts.

Usage:
    termfont                  interactive REPL (empty line = main menu)
    termfont <action> [arg]   run one command, show its panel, exit
"""

from __future__ import annotations

import os
import sys
from collections.abc import Callable

from . import config
from .config import tag
from .kernel import Kernel, NullSurface, write_crash_log
from .panels import PanelKind
from .ui import PromptToolkitSurface, PromptToolkitUI

EXIT_WORDS = {"exit", "quit"}

# Panels that only display text; plain mode has no keys to dismiss them
READ_ONLY_PANELS = {PanelKind.FONT_INFO, PanelKind.FONT_LIST}


def prompt_text() -> str:
    colors = config.ANSI_COLORS
    reset = colors["reset"]
    return f"{colors['cyan']}termfont{reset}{colors['pink']}>{reset}"


def settle_plain_panel(
    kernel: Kernel, output_fn: Callable[[str], None] = print
) -> None:
    """Close an echoed read-only panel, or say how to leave the others."""
    state = kernel.navigator.state
    if state is None:
        return
    if state in READ_ONLY_PANELS:
        kernel.handle_command("close")
        return
    output_fn(tag("INFO", "Panel is open; type 'close' to dismiss it"))


def run_once(
    kernel: Kernel,
    line: str,
    ui: PromptToolkitUI | None = None,
    output_fn: Callable[[str], None] = print,
) -> None:
    """Dispatch one line and show any panel it opened."""
    try:
        response = kernel.handle_command(line)
        if response:
            if ui is not None:
                ui.write(response + "\n")
            else:
                output_fn(response)

        if ui is not None:
            ui.run_panels()
        else:
            settle_plain_panel(kernel, output_fn)

    except Exception as e:
        # Unhandled exception - write crash log
        write_crash_log(
            e,
            panel=kernel.panel_name,
            raw_command=line,
            conf_path=kernel.config.conf_path,
        )
        error_msg = (
            f"[ERROR] Unhandled exception: "
            f"{type(e).__name__}: {e}"
        )
        if ui is not None:
            ui.write(error_msg + "\n")
        else:
            output_fn(error_msg)


def run_repl(
    kernel: Kernel,
    ui: PromptToolkitUI | None = None,
    input_fn: Callable[[str], str] = input,
    output_fn: Callable[[str], None] = print,
) -> None:
    """Run the termfont REPL loop until EOF or an exit word."""
    while True:
        try:
            if ui is not None:
                line = ui.read(prompt_text())
            else:
                line = input_fn("termfont> ")

            line = (line or "").strip()
            if line in EXIT_WORDS:
                break

            run_once(kernel, line, ui=ui, output_fn=output_fn)

        except (KeyboardInterrupt, EOFError):
            msg = "\nBye!\n"
            if ui is not None:
                ui.write(msg)
            else:
                output_fn(msg)
            break


def main(argv: list[str] | None = None) -> None:
    """Main entry point for termfont CLI."""
    args = sys.argv[1:] if argv is None else argv

    cfg = config.load_config()

    # Plain mode: no prompt_toolkit, panels stay headless
    if os.environ.get("TERMFONT_PLAIN_UI") == "1":
        kernel = Kernel(config=cfg, surface=NullSurface(echo=print))
        if args:
            run_once(kernel, " ".join(args))
        else:
            run_repl(kernel)
        return

    surface = PromptToolkitSurface()
    kernel = Kernel(config=cfg, surface=surface, color=True)
    ui = PromptToolkitUI(kernel, surface)

    # Route panel-time notices through UI (key presses inside panels)
    kernel.output_fn = ui.write
    kernel.error_fn = ui.write

    if args:
        run_once(kernel, " ".join(args), ui=ui)
        return

    run_repl(kernel, ui=ui)
