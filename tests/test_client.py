from __future__ import annotations

import io
from pathlib import Path

import pytest

from sortdeck.client.main import main, parse_command, render
from sortdeck.engine.commands import (
    AdvancePhaseCommand,
    PurchaseCommand,
    SelectCardCommand,
    UseActionCommand,
)
from sortdeck.engine.game import new_game
from sortdeck.paths import get_paths
from sortdeck.services.content import ContentService


def test_parse_command() -> None:
    assert parse_command("s 1 3") == [SelectCardCommand(index=1), SelectCardCommand(index=3)]
    assert parse_command("u 2") == UseActionCommand(slot=2)
    assert parse_command("b upshift") == PurchaseCommand(offer_id="upshift")
    assert parse_command("n") == AdvancePhaseCommand()
    assert parse_command("u two") is None
    assert parse_command("") is None
    assert parse_command("fly") is None


def test_render_sorting_phase() -> None:
    paths = get_paths()
    catalog = ContentService(paths.data_dir, paths.schema_dir).load_catalog()
    state = new_game(catalog, seed=5)
    out = io.StringIO()
    render(state, out)
    text = out.getvalue()
    assert "Round 1 | sorting | cash 0" in text
    assert "hands: 9/9" in text


def test_validate_flag() -> None:
    assert main(["--validate"]) == 0


def test_userdata_follows_working_directory(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    paths = get_paths()
    assert paths.userdata_dir == Path.cwd() / "userdata"
    assert (paths.data_dir / "actions.json").is_file()
    assert (paths.schema_dir / "actions.schema.json").is_file()
    assert get_paths(workdir=tmp_path / "run").userdata_dir == tmp_path / "run" / "userdata"


def test_default_telemetry_lands_in_working_directory(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("sys.stdin", io.StringIO("q\n"))
    assert main(["--seed", "3"]) == 0
    telemetry = Path.cwd() / "userdata" / "telemetry.jsonl"
    assert telemetry.is_file()
    assert '"RUN_STARTED"' in telemetry.read_text(encoding="utf-8")
