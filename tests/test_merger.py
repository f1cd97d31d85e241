"""Tests for ConfigMerger: load -> apply -> backup -> atomic save."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

import starship_setup.lib.settings_file as settings_io
from starship_setup.lib.edits import upsert_into_named_list, upsert_object, upsert_scalar
from starship_setup.lib.errors import PathError, SettingsIOError, SettingsNotFound
from starship_setup.lib.merger import ConfigMerger


def _backups(path: Path) -> list:
    return sorted(p for p in path.parent.iterdir() if ".backup-" in p.name)


@pytest.fixture
def merger() -> ConfigMerger:
    return ConfigMerger()


@pytest.fixture
def batch():
    return [
        upsert_object("font", ["profiles", "defaults", "font"], {"face": "Hack Nerd Font", "size": 11}),
        upsert_into_named_list("ubuntu-tab", ["profiles", "list"], {"name": "Ubuntu", "tabColor": "#00F6FF"}),
        upsert_scalar("copy", ["copyOnSelect"], True),
    ]


class TestMergeFile:
    def test_first_run_writes_and_backs_up(self, merger, settings_file: Path, batch) -> None:
        original = settings_file.read_bytes()
        result = merger.merge_file(settings_file, batch)

        assert result.changed
        assert result.applied == ["font", "ubuntu-tab", "copy"]
        assert result.backup_path is not None
        assert Path(result.backup_path).read_bytes() == original

        data = json.loads(settings_file.read_text(encoding="utf-8"))
        assert data["profiles"]["defaults"] == {"fontSize": 11, "font": {"face": "Hack Nerd Font", "size": 11}}
        assert data["profiles"]["list"][-1] == {"name": "Ubuntu", "tabColor": "#00F6FF"}
        assert data["copyOnSelect"] is True
        assert data["$schema"] == "https://aka.ms/terminal-profiles-schema"

    def test_second_run_is_a_no_op(self, merger, settings_file: Path, batch) -> None:
        merger.merge_file(settings_file, batch)
        after_first = settings_file.read_bytes()

        result = merger.merge_file(settings_file, batch)

        assert not result.changed
        assert result.backup_path is None
        assert settings_file.read_bytes() == after_first
        assert len(_backups(settings_file)) == 1

    def test_bool_vs_int_counts_as_change(self, merger, tmp_path: Path) -> None:
        p = tmp_path / "settings.json"
        p.write_text('{"flag": true}', encoding="utf-8")
        result = merger.merge_file(p, [upsert_scalar("flag", ["flag"], 1)])
        assert result.changed
        assert json.loads(p.read_text(encoding="utf-8")) == {"flag": 1}

    def test_missing_file_raises_by_default(self, merger, tmp_path: Path, batch) -> None:
        with pytest.raises(SettingsNotFound):
            merger.merge_file(tmp_path / "settings.json", batch)

    def test_missing_file_created_on_request(self, merger, tmp_path: Path) -> None:
        p = tmp_path / "new" / "settings.json"
        result = merger.merge_file(p, [upsert_scalar("c", ["a", "b", "c"], 1)], create_missing=True)
        assert result.created
        assert result.backup_path is None
        assert json.loads(p.read_text(encoding="utf-8")) == {"a": {"b": {"c": 1}}}

    def test_yaml_document(self, merger, tmp_path: Path) -> None:
        p = tmp_path / "settings.yaml"
        p.write_text("keep: 1\n", encoding="utf-8")
        merger.merge_file(p, [upsert_scalar("theme", ["theme"], "dark")], backup=False)
        assert p.read_text(encoding="utf-8") == "keep: 1\ntheme: dark\n"
        assert _backups(p) == []

    def test_dry_run_writes_nothing(self, merger, settings_file: Path, batch) -> None:
        original = settings_file.read_bytes()
        result = merger.merge_file(settings_file, batch, dry_run=True)
        assert result.changed
        assert settings_file.read_bytes() == original
        assert _backups(settings_file) == []

    def test_path_error_leaves_file_untouched(self, merger, settings_file: Path) -> None:
        original = settings_file.read_bytes()
        ops = [
            upsert_scalar("ok", ["newKey"], 1),
            upsert_scalar("bad", ["copyOnSelect", "nested"], 1),
        ]
        with pytest.raises(PathError) as exc:
            merger.merge_file(settings_file, ops)
        assert exc.value.operation == "bad"
        assert settings_file.read_bytes() == original
        assert _backups(settings_file) == []

    def test_save_failure_keeps_original_and_backup(self, merger, settings_file: Path, batch, monkeypatch) -> None:
        original = settings_file.read_bytes()

        def disk_full(src, dst):
            raise OSError(28, "No space left on device")

        monkeypatch.setattr(settings_io.os, "replace", disk_full)
        with pytest.raises(SettingsIOError):
            merger.merge_file(settings_file, batch)

        assert settings_file.read_bytes() == original
        backups = _backups(settings_file)
        assert len(backups) == 1
        assert backups[0].read_bytes() == original


class TestSteps:
    def test_apply_does_not_touch_disk(self, merger, settings_file: Path, batch) -> None:
        original = settings_file.read_bytes()
        doc = merger.load(settings_file)
        updated = merger.apply(doc, batch)
        assert updated.root != doc.root
        assert settings_file.read_bytes() == original

    def test_explicit_backup_then_save(self, merger, settings_file: Path, batch) -> None:
        doc = merger.apply(merger.load(settings_file), batch)
        backup = merger.backup(settings_file)
        merger.save(doc, settings_file)
        assert json.loads(backup.read_text(encoding="utf-8"))["copyOnSelect"] is False
        assert merger.load(settings_file).root == doc.root


def test_merge_through_symlink(merger, tmp_path: Path) -> None:
    target = tmp_path / "real.json"
    target.write_text('{"a": 1}', encoding="utf-8")
    link = tmp_path / "settings.json"
    link.symlink_to(target)

    result = merger.merge_file(link, [upsert_scalar("b", ["b"], 2)])

    assert result.changed
    assert link.is_symlink()
    assert json.loads(target.read_text(encoding="utf-8")) == {"a": 1, "b": 2}
    assert json.loads(Path(result.backup_path).read_text(encoding="utf-8")) == {"a": 1}
