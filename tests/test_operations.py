"""Tests for insert / move / delete / edit on a roster stored in tmp_path."""

from __future__ import annotations

import pytest

from conftest import TODAY, assert_invariants, names, seed
from tierlist.errors import EmptyInput, NoChange, NotFound, StoreError
from tierlist.models import Tier
from tierlist.operations import RosterEditor
from tierlist.publishers import PublishResult, SimulatedPublisher


class FailingPublisher:
    @property
    def name(self) -> str:
        return "fail"

    def publish(self, paths, message) -> PublishResult:
        return PublishResult(ok=False, detail="no remote")


class TestInsert:
    def test_insert_at_top_of_full_tier(self, editor: RosterEditor):
        """New #1 pushes the old #75 into Mid and every Top item gets one entry."""
        seed(editor, 75, 3, 0)
        result = editor.insert(Tier.TOP, {"name": "New", "creator": "me"}, position=1)

        state = editor.load()
        assert result.rank == 1
        assert state.top[0].name == "New"
        assert state.top[0].history == [f"{TODAY} - Added to the list at position 1, above T1"]
        assert names(state.mid[:2]) == ["T75", "M1"]
        assert state.mid[0].history is None
        for i, item in enumerate(state.top[1:], start=1):
            assert item.name == f"T{i}"
            assert item.history == [f"seed T{i}", f"{TODAY} - New was added above (-1)"]
        assert "T75 dropped from Top rank 76 to Mid rank 76" in result.changes
        assert "dropping T75 out of Top" in result.description
        assert_invariants(state)

    def test_insert_defaults_to_tier_end(self, editor: RosterEditor):
        seed(editor, 2, 2, 0)
        result = editor.insert(Tier.MID, {"name": "X"})
        assert result.rank == 78
        assert editor.load().mid[-1].history is None

    def test_out_of_range_position_is_clamped(self, editor: RosterEditor):
        seed(editor, 3)
        result = editor.insert(Tier.TOP, {"name": "X"}, position=500)
        assert result.rank == 4
        result = editor.insert(Tier.TOP, {"name": "Y"}, position=-3)
        assert result.rank == 1

    def test_mid_insert_cascades_to_overflow(self, editor: RosterEditor):
        seed(editor, 75, 75, 1)
        editor.insert(Tier.MID, {"name": "X"}, position=1)
        state = editor.load()
        assert state.mid[0].name == "X"
        assert names(state.overflow) == ["M75", "O1"]
        assert_invariants(state)

    def test_name_required(self, editor: RosterEditor):
        seed(editor, 1)
        with pytest.raises(EmptyInput):
            editor.insert(Tier.TOP, {"name": "  "})

    def test_negative_external_position_rejected(self, editor: RosterEditor):
        seed(editor, 2)
        before = [p.read_bytes() for p in editor.store.paths]
        with pytest.raises(ValueError, match="0 or more"):
            editor.insert(Tier.TOP, {"name": "X", "external_position": -5})
        assert [p.read_bytes() for p in editor.store.paths] == before

    def test_clamped_past_full_top_reports_final_tier(self, editor: RosterEditor):
        seed(editor, 75)
        result = editor.insert(Tier.TOP, {"name": "X"}, position=80)

        state = editor.load()
        assert state.mid[0].name == "X"
        assert state.mid[0].history is None
        assert result.rank == 76
        assert result.description.startswith("X added at position 76 (Mid)")
        assert_invariants(state)

    def test_publishes_and_logs(self, editor: RosterEditor, publisher: SimulatedPublisher):
        seed(editor, 1)
        result = editor.insert(Tier.TOP, {"name": "X"})
        assert result.published.ok
        files, message = publisher.calls[-1]
        assert message.startswith("Added: X added at position 2")
        assert any(f.endswith("levels_main.json") for f in files)
        changelog = (editor.store.root / "CHANGELOG.md").read_text(encoding="utf-8")
        assert "X added at position 2 (Top)" in changelog


class TestMove:
    def test_move_up_within_top(self, editor: RosterEditor):
        seed(editor, 75, 5, 0)
        result = editor.move("10", 3)

        state = editor.load()
        item = state.top[2]
        assert item.name == "T10"
        assert item.history[-1] == f"{TODAY} - Moved to position 3 (+7), below T2 and above T3"
        for i in range(3, 10):
            assert state.top[i].name == f"T{i}"
            assert state.top[i].history == [f"seed T{i}", f"{TODAY} - T10 was moved above (-1)"]
        assert state.top[1].history == ["seed T2"]
        assert state.top[10].history == ["seed T11"]
        assert result.changes == []
        assert len(state.top) == 75 and len(state.mid) == 5

    def test_move_top_to_overflow_strips_history(self, editor: RosterEditor):
        seed(editor, 75, 75, 60)
        editor.move("T5", 200)

        state = editor.load()
        moved = next(i for i in state.overflow if i.name == "T5")
        assert moved.history is None
        assert state.overflow.index(moved) == 49  # global rank 200
        assert state.top[-1].name == "M1"
        assert state.top[-1].history == [f"{TODAY} - Promoted to Top at position 75 (was #76)"]
        assert state.top[3].history == ["seed T4"]
        assert state.top[4].history == ["seed T6"]
        assert_invariants(state)

    def test_move_top_to_mid_refills_only_top(self, editor: RosterEditor):
        seed(editor, 75, 75, 5)
        result = editor.move("T5", 100)

        state = editor.load()
        assert result.changes == ["M1 promoted from Mid to Top (#75)"]
        assert state.mid[24].name == "T5"
        assert result.rank == 100
        assert names(state.overflow) == ["O1", "O2", "O3", "O4", "O5"]
        assert "Overflow" not in result.description
        assert_invariants(state)

    def test_move_mid_into_top(self, editor: RosterEditor):
        seed(editor, 75, 75, 1)
        result = editor.move("m10", 1)

        state = editor.load()
        assert state.top[0].name == "M10"
        assert state.top[0].history == [
            f"{TODAY} - Moved to position 1 (+84), above T1"
        ]
        assert state.mid[0].name == "T75"
        assert state.mid[0].history is None
        assert names(state.overflow) == ["O1"]
        assert len(state.mid) == 75
        assert "T75 dropped from Top rank 76 to Mid rank 76" in result.changes
        assert_invariants(state)

    def test_move_to_same_position(self, editor: RosterEditor, publisher: SimulatedPublisher):
        seed(editor, 5)
        with pytest.raises(NoChange):
            editor.move("T3", 3)
        with pytest.raises(NoChange):
            editor.move("T5", 40)  # clamps back onto its own slot
        assert publisher.calls == []

    def test_unknown_item(self, editor: RosterEditor):
        seed(editor, 5)
        before = [p.read_bytes() for p in editor.store.paths]
        with pytest.raises(NotFound):
            editor.move("ghost", 1)
        assert [p.read_bytes() for p in editor.store.paths] == before


class TestDelete:
    def test_delete_first_promotes_from_mid(self, editor: RosterEditor):
        seed(editor, 75, 75, 2)
        result = editor.delete("1")

        state = editor.load()
        assert "T1" not in names(state.top)
        assert len(state.top) == 75
        assert state.top[74].name == "M1"
        assert state.top[74].history == [f"{TODAY} - Promoted to Top at position 75 (was #76)"]
        assert state.mid[0].name == "M2"
        assert state.mid[-1].name == "O1"
        assert names(state.overflow) == ["O2"]
        assert result.rank == 1
        assert "M1 promoted into Top" in result.description
        assert_invariants(state)

    def test_delete_from_mid_backfills_from_overflow(self, editor: RosterEditor):
        seed(editor, 75, 75, 2)
        editor.delete("M3")
        state = editor.load()
        assert len(state.top) == 75
        assert state.mid[-1].name == "O1"
        assert all(i.history is None for i in state.mid)

    def test_delete_without_lower_tiers(self, editor: RosterEditor):
        seed(editor, 3)
        result = editor.delete("t2")
        assert names(editor.load().top) == ["T1", "T3"]
        assert result.changes == []

    def test_empty_query_cancels(self, editor: RosterEditor):
        seed(editor, 3)
        with pytest.raises(EmptyInput):
            editor.delete("")


class TestEdit:
    def test_edit_changes_fields_not_history(self, editor: RosterEditor):
        seed(editor, 2)
        result = editor.edit("T1", {"creator": "new", "rank": "Extreme Demon", "external_position": 3})

        item = editor.load().top[0]
        assert item.creator == "new"
        assert item.rank == "Extreme Demon"
        assert item.external_position == 3
        assert item.history == ["seed T1"]
        assert result.description == (
            "T1 updated: creator: c → new, rank:  → Extreme Demon, external position: 0 → 3"
        )

    def test_edit_url_only_mentions_url(self, editor: RosterEditor):
        seed(editor, 1)
        assert editor.edit("1", {"video_url": "https://x"}).description == "T1 updated: URL"

    def test_edit_without_changes(self, editor: RosterEditor):
        seed(editor, 1)
        assert editor.edit("T1", {"creator": "c"}).description == "T1 edited (no changes)"

    def test_edit_rejects_negative_external_position(self, editor: RosterEditor):
        seed(editor, 1)
        with pytest.raises(ValueError):
            editor.edit("T1", {"creator": "z", "external_position": -1})
        item = editor.load().top[0]
        assert item.creator == "c"
        assert item.external_position == 0

    def test_edit_rejects_unknown_fields(self, editor: RosterEditor):
        seed(editor, 1)
        with pytest.raises(ValueError):
            editor.edit("T1", {"name": "renamed"})


class TestPublishFailure:
    def test_failure_keeps_saved_state(self, config):
        ed = RosterEditor.from_config(config, FailingPublisher())
        seed(ed, 2)
        result = ed.insert(Tier.TOP, {"name": "X"}, position=1)
        assert result.published.ok is False
        assert ed.load().top[0].name == "X"

    def test_deferred_publish(self, editor: RosterEditor, publisher: SimulatedPublisher):
        seed(editor, 2)
        result = editor.delete("T2", publish=False)
        assert result.published is None
        assert publisher.calls == []


class TestInvariantsAcrossSequences:
    def test_mixed_operations(self, editor: RosterEditor):
        seed(editor, 75, 75, 20)
        editor.insert(Tier.TOP, {"name": "A"}, position=10)
        editor.insert(Tier.MID, {"name": "B"}, position=1)
        editor.move("A", 160)
        editor.move("O5", 2)
        editor.delete("3")
        editor.move("T40", 100)
        editor.insert(Tier.OVERFLOW, {"name": "C"}, position=1)
        editor.delete("B")
        state = editor.load()
        assert_invariants(state)
        assert len(state.top) == 75
        assert len(state.mid) == 75
        total = len(state.top) + len(state.mid) + len(state.overflow)
        assert total == 75 + 75 + 20 + 3 - 2


class TestWriteFailure:
    def test_changelog_failure_keeps_saved_state(self, editor: RosterEditor, publisher: SimulatedPublisher):
        seed(editor, 3)
        (editor.store.root / "CHANGELOG.md").mkdir()
        result = editor.delete("T1")

        assert result.changelog_error
        assert names(editor.load().top) == ["T2", "T3"]
        assert result.published.ok
        assert len(publisher.calls) == 1

    def test_tier_save_failure_raises_store_error(self, editor: RosterEditor, monkeypatch):
        seed(editor, 3)

        def broken_write(path, content):
            raise OSError("disk full")

        monkeypatch.setattr("tierlist.store.atomic_write_text", broken_write)
        with pytest.raises(StoreError, match="disk full"):
            editor.delete("T1")
