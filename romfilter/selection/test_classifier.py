from __future__ import annotations

import time

import pytest

from romfilter.selection.classifier import extract_tags, split_title_and_revision


@pytest.mark.parametrize(
    ("filename", "expected"),
    [
        ("Super Game (Europe).zip", ["Europe"]),
        ("Game (USA) (Rev 1) (Beta).zip", ["USA", "Rev 1", "Beta"]),
        ("Beta Game.zip", []),
        ("Game ().zip", [""]),
        ("Game (USA) (USA).zip", ["USA", "USA"]),
    ],
)
def test_extract_tags_returns_parenthesized_groups_in_order(filename: str, expected: list[str]) -> None:
    assert extract_tags(filename) == expected


def test_extract_tags_nested_parentheses_restart_the_tag() -> None:
    assert extract_tags("Game (Disc (1) Extra).zip") == ["1"]


def test_extract_tags_ignores_stray_and_unclosed_parentheses() -> None:
    assert extract_tags("Game) (USA).zip") == ["USA"]
    assert extract_tags("Game (USA.zip") == []


@pytest.mark.parametrize(
    ("filename", "expected"),
    [
        ("Super Game (USA).zip", ("Super Game", None)),
        ("Super Game (Rev 2) (USA).zip", ("Super Game", 2)),
        ("Super Game (Rev 1).zip", ("Super Game", 1)),
        ("Game (Rev 12) (USA).zip", ("Game", 12)),
        ("Game (Rev2) (USA).zip", ("Game", 2)),
        ("Game.zip", ("Game", None)),
        ("Game", ("Game", None)),
    ],
)
def test_split_title_and_revision_basic(filename: str, expected: tuple[str, int | None]) -> None:
    assert split_title_and_revision(filename) == expected


@pytest.mark.parametrize(
    ("filename", "expected"),
    [
        ("Game (World) (Legacy Game Collection).zip", ("Game", None)),
        ("Game (Legacy Collection) (US) (Rev 1).zip", ("Game", 1)),
        ("Game (Rev 2) (Legacy Collection) (World).zip", ("Game", 2)),
        ("Game (World) (Rev 1) (Legacy Collection).zip", ("Game", 1)),
        ("Game with (Parentheses) in Name (World) (Rev 3).zip", ("Game with (Parentheses) in Name", 3)),
        ("Game (Collection Edition) (Rev 1) (US) (Reprint).zip", ("Game", 1)),
    ],
)
def test_split_title_and_revision_trailing_metadata_runs(
    filename: str, expected: tuple[str, int | None]
) -> None:
    assert split_title_and_revision(filename) == expected


def test_split_title_and_revision_keeps_dots_inside_title() -> None:
    assert split_title_and_revision("Dr. Mario (World).zip") == ("Dr. Mario", None)
    assert split_title_and_revision("Game v1.1 (USA).zip") == ("Game v1.1", None)
    assert split_title_and_revision("Game (v1.1) (USA).zip") == ("Game", None)


def test_split_title_and_revision_non_numeric_revision_is_unversioned() -> None:
    assert split_title_and_revision("Game (Rev A) (USA).zip") == ("Game", None)


def test_split_title_and_revision_falls_back_to_revision_inside_title() -> None:
    assert split_title_and_revision("Game (Rev 3) Special (USA).zip") == ("Game (Rev 3) Special", 3)


def test_split_title_and_revision_only_metadata_gives_empty_title() -> None:
    assert split_title_and_revision("(USA).zip") == ("", None)


def test_split_title_and_revision_unmatchable_name_is_returned_verbatim() -> None:
    name = "Bad\nName (Rev 1).zip"
    assert split_title_and_revision(name) == (name, None)


def test_split_title_and_revision_is_deterministic() -> None:
    name = "Game (Rev 2) (Legacy Collection) (World).zip"
    assert split_title_and_revision(name) == split_title_and_revision(name)


@pytest.mark.parametrize(
    "name",
    [
        "G" + "(USA,USA,USA,USA)" * 14 + "x",
        "Game" + " (USA, Europe)" * 18 + " x",
    ],
)
def test_split_title_and_revision_many_region_groups_stay_fast(name: str) -> None:
    started = time.perf_counter()
    title, revision = split_title_and_revision(name)
    elapsed = time.perf_counter() - started

    assert title == name
    assert revision is None
    assert elapsed < 1.0


def test_split_title_and_revision_ignores_non_ascii_digits() -> None:
    assert split_title_and_revision("Game (Rev ٣) (USA).zip") == ("Game", None)
    assert split_title_and_revision("Game (USA) (Rev ٣).zip") == ("Game", None)
