"""
Tests for font discovery: parsing both enumerations, building the
catalog and memoizing it.
"""

from __future__ import annotations

import itertools
import json
import threading

import pytest

from termfont.fonts import (
    FC_LIST_ARGV,
    CatalogCache,
    FontResolver,
    build_catalog,
    format_columns,
    normalize_font_key,
    parse_installed_fonts,
    parse_kitty_fonts,
)

KITTY_JSON = json.dumps(
    {
        "family_map": {
            "firacode": [
                {"family": "FiraCode", "style": "Regular"},
                {"family": "FiraCode", "style": "Bold"},
            ],
            "arial": [{"family": "Arial", "style": "Regular"}],
        },
        "ps_map": {"firacode-regular": [{"family": "Ignored"}]},
    }
)


class FakeExecutor:
    def __init__(
        self,
        installed: str = "Fira Code\nArial\nHelvetica\n",
        kitty: str = KITTY_JSON,
        installed_code: int = 0,
        kitty_code: int = 0,
    ):
        self.responses = {
            "fc-list": (installed_code, installed, ""),
            "kitty": (kitty_code, kitty, ""),
        }
        self.calls: list[list[str]] = []

    def run_argv(self, argv: list[str]) -> tuple[int, str, str]:
        self.calls.append(list(argv))
        return self.responses.get(argv[0], (127, "", "not found"))

    def count(self, program: str) -> int:
        return sum(1 for c in self.calls if c[0] == program)


# ----------------------------------------------------------------
# Parsing
# ----------------------------------------------------------------


def test_normalize_strips_all_whitespace() -> None:
    assert normalize_font_key(" Fira\tCode  Retina ") == "FiraCodeRetina"
    assert normalize_font_key("") == ""


def test_parse_installed_keeps_first_comma_token() -> None:
    output = "Fira Code,Fira Code Retina\nArial\n\n  Arial \nNoto Sans,Noto\n"

    assert parse_installed_fonts(output) == {
        "Fira Code", "Arial", "Noto Sans"
    }


def test_parse_kitty_fonts_reads_family_map() -> None:
    assert parse_kitty_fonts(KITTY_JSON) == {"FiraCode", "Arial"}


def test_parse_kitty_fonts_accepts_bare_map() -> None:
    output = json.dumps({"mono": [{"family": "Iosevka"}]})

    assert parse_kitty_fonts(output) == {"Iosevka"}


@pytest.mark.parametrize(
    "output", ["", "   ", "not json", "[]", '{"family_map": 3}']
)
def test_parse_kitty_fonts_malformed_is_empty(output: str) -> None:
    assert parse_kitty_fonts(output) == set()


# ----------------------------------------------------------------
# Catalog
# ----------------------------------------------------------------


def test_build_catalog_intersects_by_normalized_key() -> None:
    catalog = build_catalog(
        ["Fira Code", "Arial", "Helvetica"], {"FiraCode", "Arial"}
    )

    assert catalog == {"FiraCode": "Fira Code", "Arial": "Arial"}


def test_build_catalog_is_order_independent() -> None:
    names = ["FiraCode", "Fira Code", "Arial"]
    supported = {"FiraCode", "Arial"}

    results = [
        build_catalog(list(p), supported)
        for p in itertools.permutations(names)
    ]

    assert all(r == results[0] for r in results)
    assert results[0]["FiraCode"] == "Fira Code"


def test_build_catalog_keys_never_contain_whitespace() -> None:
    catalog = build_catalog(
        ["JetBrains Mono", "Source Code Pro"],
        {"JetBrainsMono", "Source Code Pro"},
    )

    assert set(catalog) == {"JetBrainsMono", "SourceCodePro"}
    assert not any(" " in key for key in catalog)


def test_resolver_catalog_and_resolve() -> None:
    resolver = FontResolver(FakeExecutor())

    assert resolver.catalog() == {"FiraCode": "Fira Code", "Arial": "Arial"}
    assert resolver.resolve("FiraCode") == "Fira Code"
    assert resolver.resolve("Fira Code") == "Fira Code"
    assert resolver.resolve("Helvetica") is None
    assert resolver.sorted_names() == ["Arial", "Fira Code"]


def test_resolver_runs_fc_list_with_family_format() -> None:
    executor = FakeExecutor()

    FontResolver(executor).catalog()

    assert FC_LIST_ARGV in executor.calls
    assert any(c[:2] == ["kitty", "+runpy"] for c in executor.calls)


def test_resolver_memoizes_catalog() -> None:
    executor = FakeExecutor()
    resolver = FontResolver(executor)

    resolver.catalog()
    resolver.resolve("Arial")
    resolver.sorted_names()

    assert executor.count("fc-list") == 1
    assert executor.count("kitty") == 1


def test_resolver_invalidate_recomputes() -> None:
    executor = FakeExecutor()
    resolver = FontResolver(executor)

    resolver.catalog()
    resolver.invalidate()
    resolver.catalog()

    assert executor.count("fc-list") == 2


@pytest.mark.parametrize(
    "kwargs", [{"installed_code": 127}, {"kitty_code": 1}]
)
def test_resolver_failed_enumeration_gives_empty_catalog(
    kwargs: dict,
) -> None:
    resolver = FontResolver(FakeExecutor(**kwargs))

    assert resolver.catalog() == {}
    assert resolver.sorted_names() == []


def test_catalog_cache_computes_once() -> None:
    cache = CatalogCache(threading.RLock())
    calls: list[int] = []

    def compute() -> dict[str, str]:
        calls.append(1)
        return {"A": "A"}

    assert not cache.is_cached
    assert cache.get_or_compute(compute) == {"A": "A"}
    assert cache.get_or_compute(compute) == {"A": "A"}
    assert cache.is_cached
    assert len(calls) == 1

    cache.invalidate()
    assert not cache.is_cached


# ----------------------------------------------------------------
# Column layout
# ----------------------------------------------------------------


def test_format_columns_is_column_major() -> None:
    lines = format_columns(["a", "bb", "ccc", "dd"], width=12)

    assert lines == ["a    ccc", "bb   dd"]


def test_format_columns_narrow_width_gives_one_column() -> None:
    assert format_columns(["alpha", "beta"], width=0) == ["alpha", "beta"]


def test_format_columns_empty() -> None:
    assert format_columns([], width=80) == []
