from __future__ import annotations

from pathlib import Path

import pytest
from rich.console import Console

from romfilter import cli
from romfilter.config import FilterOptions, RomfilterConfig
from romfilter.errors import FetchError
from romfilter.selection.types import ReleaseRecord


def _args(*argv: str):
    return cli.build_parser().parse_args(list(argv))


def test_ui_info_warn_error_emit_prefixed_messages(monkeypatch: pytest.MonkeyPatch) -> None:
    lines: list[str] = []
    monkeypatch.setattr(cli.console, "print", lambda msg, *_args, **_kwargs: lines.append(str(msg)))

    cli._ui_info("hello")
    cli._ui_warn("careful")
    cli._ui_error("boom")

    assert lines == [
        "[cyan][INFO][/cyan] hello",
        "[yellow][WARNING][/yellow] careful",
        "[red][ERROR][/red] boom",
    ]


@pytest.mark.parametrize(
    ("seconds", "expected"),
    [(4.24, "4.2s"), (90, "1.5m"), (5_400, "1.5h")],
)
def test_format_elapsed_runtime(seconds: float, expected: str) -> None:
    assert cli._format_elapsed_runtime(seconds) == expected


def test_apply_filter_overrides_without_flags_keeps_config() -> None:
    options = FilterOptions(region="Europe", exclude_patterns=["Rental"])
    assert cli.apply_filter_overrides(options, _args("Nintendo - Game Boy")) == options


def test_apply_filter_overrides_layers_flags() -> None:
    options = FilterOptions(region_limit=False, region="USA", exclude_patterns=["Rental"])
    args = _args(
        "--region", "Japan",
        "--no-smart-filters",
        "--exclude", "Alt",
        "--exclude", "Rev B",
        "--all-revisions",
        "Nintendo - Game Boy",
    )

    updated = cli.apply_filter_overrides(options, args)

    assert updated.region == "Japan"
    assert updated.region_limit is True
    assert updated.smart_filters is False
    assert updated.exclude_patterns == ["Rental", "Alt", "Rev B"]
    assert updated.latest_revision is False
    assert options.exclude_patterns == ["Rental"]


def test_no_region_limit_wins_over_region() -> None:
    updated = cli.apply_filter_overrides(FilterOptions(), _args("--region", "Europe", "--no-region-limit", "X"))
    assert updated.region == "Europe"
    assert updated.region_limit is False


def test_parser_list_dirs_optional_value() -> None:
    assert _args("--list-dirs").list_dirs == ""
    assert _args("--list-dirs", "No-Intro").list_dirs == "No-Intro"
    assert _args("Sega - Game Gear").list_dirs is None


def test_resolve_config_path_prefers_explicit_path(tmp_path: Path) -> None:
    assert cli.resolve_config_path(str(tmp_path)) == tmp_path / "config.toml"
    explicit = tmp_path / "custom.toml"
    assert cli.resolve_config_path(str(explicit)) == explicit


def test_resolve_config_path_uses_cwd_config_when_present(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    assert cli.resolve_config_path(None) is None

    (tmp_path / "config.toml").write_text("[filters]\n", encoding="utf-8")
    assert cli.resolve_config_path(None) == tmp_path / "config.toml"


def test_render_roms_table_keeps_brackets_literal() -> None:
    records = [
        ReleaseRecord(filename="Game [b] (USA) (Rev 2).zip", url="https://files.example/a.zip"),
        ReleaseRecord(filename="Other (World).zip", url="https://files.example/b.zip"),
    ]
    console = Console(record=True, width=200)

    console.print(cli.render_roms_table("[BIOS] System", records))
    output = console.export_text()

    assert "[BIOS] System (2 selected)" in output
    assert "Game [b]" in output
    assert "Game [b] (USA) (Rev 2).zip" in output
    assert " 2 " in output
    assert " - " in output


def test_main_without_arguments_shows_help(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as exc_info:
        cli.main([])

    assert exc_info.value.code == 0
    assert "romfilter v" in capsys.readouterr().out


def test_main_reports_fetch_errors_and_exits_nonzero(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    errors: list[str] = []
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(cli, "_ui_error", errors.append)

    async def _failing_select(config: RomfilterConfig, system: str, subdir: str, **_kwargs) -> bool:
        raise FetchError(f"https://files.example/{subdir}/{system}/", "Not Found", status=404)

    monkeypatch.setattr(cli, "run_select", _failing_select)

    with pytest.raises(SystemExit) as exc_info:
        cli.main(["--subdir", "Redump", "Missing"])

    assert exc_info.value.code == 1
    assert errors == ["Failed to fetch https://files.example/Redump/Missing/ (HTTP 404: Not Found)"]


def test_main_passes_cli_overrides_to_selection(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    seen: dict = {}
    monkeypatch.chdir(tmp_path)

    async def _fake_select(config: RomfilterConfig, system: str, subdir: str, *, download: bool, output_dir: Path) -> bool:
        seen.update(config=config, system=system, subdir=subdir, download=download, output_dir=output_dir)
        return True

    monkeypatch.setattr(cli, "run_select", _fake_select)

    with pytest.raises(SystemExit) as exc_info:
        cli.main(["--download", "-o", str(tmp_path / "out"), "--region", "Europe", "Nintendo - Game Boy"])

    assert exc_info.value.code == 0
    assert seen["system"] == "Nintendo - Game Boy"
    assert seen["subdir"] == "No-Intro"
    assert seen["download"] is True
    assert seen["output_dir"] == tmp_path / "out"
    assert seen["config"].filters.region == "Europe"
