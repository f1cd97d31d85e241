"""Tests for the starship-merge command."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from starship_setup.merge_cli import load_edit_batch, main


@pytest.fixture
def edits_yaml(tmp_path: Path) -> Path:
    p = tmp_path / "edits.yaml"
    p.write_text(
        "edits:\n"
        "  - name: ubuntu-tab\n"
        "    kind: upsert_into_named_list\n"
        "    path: [profiles, list]\n"
        "    value: {name: Ubuntu, tabColor: '#00F6FF'}\n",
        encoding="utf-8",
    )
    return p


def test_load_batch_from_json_list(tmp_path: Path) -> None:
    p = tmp_path / "edits.json"
    p.write_text(json.dumps([{"name": "a", "kind": "upsert_scalar", "path": "x.y", "value": 1}]), encoding="utf-8")
    (op,) = load_edit_batch(str(p))
    assert op.target_path == ("x", "y")


def test_load_batch_rejects_scalar(tmp_path: Path) -> None:
    p = tmp_path / "edits.yaml"
    p.write_text("just text\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_edit_batch(str(p))


def test_cli_merges_then_no_ops(reset_logging, tmp_path: Path, settings_file: Path, edits_yaml: Path) -> None:
    argv = [str(settings_file), "--edits", str(edits_yaml), "--log", str(tmp_path / "merge.log")]
    assert main(argv) == 0
    after_first = settings_file.read_bytes()
    assert main(argv) == 0
    assert settings_file.read_bytes() == after_first

    names = [p["name"] for p in json.loads(after_first)["profiles"]["list"]]
    assert names == ["Arch", "Ubuntu"]
    assert len([p for p in tmp_path.iterdir() if ".backup-" in p.name]) == 1


def test_cli_reports_path_error(reset_logging, tmp_path: Path, edits_yaml: Path, caplog) -> None:
    settings = tmp_path / "settings.json"
    settings.write_text('{"profiles": {"list": "not a list"}}', encoding="utf-8")
    with caplog.at_level("ERROR"):
        rc = main([str(settings), "--edits", str(edits_yaml), "--log", str(tmp_path / "merge.log")])
    assert rc == 1
    assert "ubuntu-tab" in caplog.text
    assert json.loads(settings.read_text(encoding="utf-8")) == {"profiles": {"list": "not a list"}}


def test_cli_missing_settings(reset_logging, tmp_path: Path, edits_yaml: Path) -> None:
    settings = tmp_path / "settings.json"
    assert main([str(settings), "--edits", str(edits_yaml), "--log", str(tmp_path / "merge.log")]) == 1
    assert main([str(settings), "--edits", str(edits_yaml), "--create", "--log", str(tmp_path / "merge.log")]) == 0
    assert json.loads(settings.read_text(encoding="utf-8")) == {
        "profiles": {"list": [{"name": "Ubuntu", "tabColor": "#00F6FF"}]}
    }
