# tests/test_kernel.py
"""
Kernel tests with dependency injection.
Kernel only wires services together and turns errors into notices.
"""
from __future__ import annotations

import json
from pathlib import Path

import pytest

import termfont.kernel as kernel_mod
from termfont.config import BorderStyle, Config
from termfont.kernel import Kernel, NullSurface, write_crash_log
from termfont.panels import PanelKind

# ----------------------------------------------------------------
# Boundary tests (hard gates)
# ----------------------------------------------------------------


def test_kernel_module_does_not_load_yaml_or_draw() -> None:
    """
    HARD BOUNDARY:
    - Kernel must not read option files (the CLI injects a Config).
    - Kernel must not import prompt_toolkit (it only sees a Surface).
    """
    text = Path(kernel_mod.__file__).read_text(encoding="utf-8")

    forbidden_substrings = [
        "import yaml",
        "load_config(",
        "load_user_options(",
        "prompt_toolkit",
    ]

    hits = [s for s in forbidden_substrings if s in text]
    assert not hits, f"Kernel must stay host-agnostic. Found: {hits}"


# ----------------------------------------------------------------
# Mock dependencies
# ----------------------------------------------------------------

KITTY_JSON = json.dumps({"family_map": {"a": [{"family": "Arial"}]}})


class FakeExecutor:
    def __init__(self):
        self.calls: list[list[str]] = []

    def run_argv(self, argv: list[str]) -> tuple[int, str, str]:
        self.calls.append(list(argv))
        if argv[0] == "fc-list":
            return (0, "Arial\nFira Code\n", "")
        if argv[0] == "kitty":
            return (0, KITTY_JSON, "")
        return (1, "", "")


class RecordingSurface(NullSurface):
    """NullSurface that also keeps the key callback of each panel."""

    def __init__(self):
        super().__init__()
        self.on_keys = {}

    def open(self, view, on_key):
        handle = super().open(view, on_key)
        self.on_keys[handle] = on_key
        return handle


@pytest.fixture
def conf(tmp_path: Path) -> Path:
    path = tmp_path / "kitty.conf"
    path.write_text("font_family Arial\nfont_size 11\n", encoding="utf-8")
    return path


@pytest.fixture
def kernel(conf: Path) -> Kernel:
    return Kernel(
        config=Config(conf_path=str(conf)),
        executor=FakeExecutor(),
        surface=RecordingSurface(),
    )


# ----------------------------------------------------------------
# Commands
# ----------------------------------------------------------------


def test_handle_command_returns_notices(kernel: Kernel) -> None:
    assert kernel.handle_command("check") == (
        "Font family: Arial\nFont size: 11"
    )


def test_handle_command_streams_when_output_wired(kernel: Kernel) -> None:
    out: list[str] = []
    err: list[str] = []
    kernel.output_fn = out.append
    kernel.error_fn = err.append

    assert kernel.handle_command("set_size 13") == ""
    assert kernel.handle_command("nope") == ""

    assert out == ["[OK] Font size set to 13\n"]
    assert err == ["[ERR] Unknown command: nope\n"]


def test_termfont_errors_become_err_notices(kernel: Kernel) -> None:
    result = kernel.handle_command("set_font Helvetica")

    assert result.startswith("[ERR] Font 'Helvetica'")


def test_missing_config_file_is_reported(tmp_path: Path) -> None:
    missing = tmp_path / "absent.conf"
    k = Kernel(
        config=Config(conf_path=str(missing)), executor=FakeExecutor()
    )

    assert k.handle_command("check") == (
        f"[ERR] Config file not found: {missing}"
    )


def test_color_wraps_tag_only(kernel: Kernel) -> None:
    kernel.color = True

    result = kernel.handle_command("set_size 12")

    assert result.startswith("\033[32m[OK]\033[0m ")
    assert result.endswith("Font size set to 12")


def test_unhandled_exception_writes_crash_log(
    kernel: Kernel, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("TERMFONT_DATA_HOME", str(tmp_path / "data"))

    def boom(line: str):
        raise RuntimeError("kaboom")

    monkeypatch.setattr(kernel.router, "dispatch", boom)

    result = kernel.handle_command("check")

    assert result == "[ERROR] Unhandled exception: RuntimeError: kaboom"
    log = tmp_path / "data" / "termfont" / "logs" / "crash.log"
    text = log.read_text(encoding="utf-8")
    assert "raw=check" in text
    assert "panel=closed" in text
    assert "error=RuntimeError: kaboom" in text
    assert text.rstrip().endswith("----")


def test_write_crash_log_appends(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("TERMFONT_DATA_HOME", str(tmp_path))

    write_crash_log(ValueError("one"), panel="main_menu")
    write_crash_log(ValueError("two"))

    text = (tmp_path / "termfont" / "logs" / "crash.log").read_text(
        encoding="utf-8"
    )
    assert text.count("----") == 2
    assert "panel=main_menu" in text


# ----------------------------------------------------------------
# Panels and keys
# ----------------------------------------------------------------


def test_empty_command_opens_main_menu(kernel: Kernel) -> None:
    kernel.handle_command("")

    assert kernel.panel_name == PanelKind.MAIN_MENU.value


def test_surface_key_callback_goes_through_kernel(kernel: Kernel) -> None:
    kernel.handle_command("")
    surface = kernel.surface
    (handle, on_key), = surface.on_keys.items()

    on_key("q")

    assert kernel.panel_name == "closed"
    assert surface.views == {}


def test_size_control_keys_edit_file(kernel: Kernel, conf: Path) -> None:
    kernel.handle_command("set_size")

    kernel.handle_key("+")
    kernel.handle_key("+")

    assert "font_size 12\n" in conf.read_text(encoding="utf-8")


def test_guard_notice_is_info(kernel: Kernel) -> None:
    assert kernel.handle_command("close") == (
        "[INFO] Window is already closed"
    )


def test_complete_delegates_to_router(kernel: Kernel) -> None:
    assert kernel.complete("set_font ") == ["Arial"]
    assert kernel.complete("fl") == ["float_check", "float_list"]


# ----------------------------------------------------------------
# Setup and shared state
# ----------------------------------------------------------------


def test_setup_replaces_config(kernel: Kernel, conf: Path) -> None:
    cfg = kernel.setup(
        {"borders": "double", "kitty_conf_path": str(conf), "size_step": 1}
    )

    assert cfg.border is BorderStyle.DOUBLE
    assert kernel.config is cfg
    kernel.handle_command("size_up")
    assert "font_size 12\n" in conf.read_text(encoding="utf-8")


def test_setup_updates_executor_timeout(conf: Path) -> None:
    k = Kernel(config=Config(conf_path=str(conf)))

    k.setup({"timeout": 5})

    assert k.executor.timeout == 5


def test_catalog_cache_shares_kernel_lock(kernel: Kernel) -> None:
    assert kernel.fonts.cache._lock is kernel.lock


def test_catalog_computed_once_per_kernel(kernel: Kernel) -> None:
    kernel.handle_command("list")
    kernel.handle_command("set_font Arial")
    kernel.complete("set_font ")

    fc_calls = [c for c in kernel.executor.calls if c[0] == "fc-list"]
    assert len(fc_calls) == 1


def test_default_kernel_is_headless() -> None:
    k = Kernel()

    assert isinstance(k.surface, NullSurface)
    assert k.panel_name == "closed"
