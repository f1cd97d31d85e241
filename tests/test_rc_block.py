"""Tests for managed blocks in shell rc files."""

from __future__ import annotations

from pathlib import Path

from starship_setup.lib.rc_block import RcBlock, merge_rc_file, upsert_block
from starship_setup.lib.zsh_profile import STARSHIP_SENTINEL, zsh_blocks

BLOCK = RcBlock(name="prompt", body='eval "$(starship init zsh)"', sentinel=STARSHIP_SENTINEL)


class TestUpsertBlock:
    def test_insert_into_empty_text(self) -> None:
        text, action = upsert_block("", BLOCK)
        assert action == "inserted"
        assert text == (
            "# >>> starship-setup: prompt >>>\n"
            'eval "$(starship init zsh)"\n'
            "# <<< starship-setup: prompt <<<\n"
        )

    def test_insert_keeps_existing_content(self) -> None:
        text, action = upsert_block("export EDITOR=vim\n", BLOCK)
        assert action == "inserted"
        assert text.startswith("export EDITOR=vim\n\n# >>> starship-setup: prompt >>>")

    def test_insert_after_unterminated_last_line(self) -> None:
        text, _ = upsert_block("export EDITOR=vim", BLOCK)
        assert text.startswith("export EDITOR=vim\n\n# >>>")

    def test_second_upsert_is_unchanged(self) -> None:
        once, _ = upsert_block("alias ls='ls -G'\n", BLOCK)
        twice, action = upsert_block(once, BLOCK)
        assert action == "unchanged"
        assert twice == once

    def test_changed_body_replaced_in_place(self) -> None:
        text, _ = upsert_block("before\n", BLOCK)
        text += "after\n"
        updated = RcBlock(name="prompt", body='export X=1\neval "$(starship init zsh)"')
        out, action = upsert_block(text, updated)
        assert action == "replaced"
        assert out.startswith("before\n\n# >>> starship-setup: prompt >>>\nexport X=1\n")
        assert out.endswith("# <<< starship-setup: prompt <<<\nafter\n")

    def test_duplicates_collapse_to_one(self) -> None:
        text, _ = upsert_block("", BLOCK)
        doubled = text + "middle\n" + text
        out, action = upsert_block(doubled, BLOCK)
        assert action == "replaced"
        assert out.count(BLOCK.begin_marker) == 1
        assert "middle\n" in out

    def test_hand_configured_file_is_skipped(self) -> None:
        manual = 'eval "$(starship init zsh)"\n'
        out, action = upsert_block(manual, BLOCK)
        assert action == "skipped"
        assert out == manual

    def test_sentinel_inside_other_managed_block_does_not_skip(self) -> None:
        other = RcBlock(name="other", body='# mentions starship init zsh')
        text, _ = upsert_block("", other)
        _, action = upsert_block(text, BLOCK)
        assert action == "inserted"


class TestMergeRcFile:
    def test_creates_missing_file_without_backup(self, tmp_path: Path) -> None:
        rc = tmp_path / ".zshrc"
        result = merge_rc_file(rc, [BLOCK])
        assert result.changed
        assert result.backup_path is None
        assert BLOCK.begin_marker in rc.read_text(encoding="utf-8")

    def test_rerun_is_a_no_op(self, tmp_path: Path) -> None:
        rc = tmp_path / ".zshrc"
        rc.write_text("export PATH=$HOME/bin:$PATH\n", encoding="utf-8")
        blocks = zsh_blocks(icon="")

        first = merge_rc_file(rc, blocks)
        content = rc.read_text(encoding="utf-8")
        second = merge_rc_file(rc, blocks)

        assert first.changed and first.backup_path
        assert first.actions == [("helpers", "inserted"), ("starship", "inserted")]
        assert not second.changed
        assert second.actions == [("helpers", "unchanged"), ("starship", "unchanged")]
        assert rc.read_text(encoding="utf-8") == content
        assert content.count(STARSHIP_SENTINEL) == 1

    def test_hand_configured_zshrc_left_alone(self, tmp_path: Path) -> None:
        rc = tmp_path / ".zshrc"
        rc.write_text('eval "$(starship init zsh)"\n', encoding="utf-8")
        result = merge_rc_file(rc, zsh_blocks(icon="x"))
        assert not result.changed
        assert [a for _, a in result.actions] == ["skipped", "skipped"]

    def test_dry_run(self, tmp_path: Path) -> None:
        rc = tmp_path / ".zshrc"
        rc.write_text("# empty\n", encoding="utf-8")
        result = merge_rc_file(rc, [BLOCK], dry_run=True)
        assert result.changed
        assert rc.read_text(encoding="utf-8") == "# empty\n"


class TestZshProfile:
    def test_icon_and_exa_aliases(self) -> None:
        helpers, prompt = zsh_blocks(icon="@", with_exa=False)
        assert 'export STARSHIP_DISTRO="@ "' in prompt.body
        assert "exa" not in helpers.body
        assert "alias k='kubectl'" in helpers.body

    def test_with_exa(self) -> None:
        helpers, _ = zsh_blocks(icon="@")
        assert "alias ll='exa --icons --group-directories-first -l'" in helpers.body


def test_symlinked_zshrc_keeps_link(tmp_path: Path) -> None:
    dotfiles = tmp_path / "dotfiles"
    dotfiles.mkdir()
    target = dotfiles / "zshrc"
    target.write_text("export EDITOR=vim\n", encoding="utf-8")
    rc = tmp_path / ".zshrc"
    rc.symlink_to(target)

    result = merge_rc_file(rc, zsh_blocks(icon="x"))

    assert result.changed
    assert rc.is_symlink()
    content = target.read_text(encoding="utf-8")
    assert content.startswith("export EDITOR=vim\n")
    assert STARSHIP_SENTINEL in content
    assert Path(result.backup_path).parent == dotfiles.resolve()
    assert not merge_rc_file(rc, zsh_blocks(icon="x")).changed
