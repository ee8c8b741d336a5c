"""Tests for the persistent roster manager."""

import json
import random

import pytest

from core.exceptions import PersistenceError, RosterError
from core.roster import RosterManager
from core.roster.protocol import RosterBug, RosterProvider
from core.roster.roster_manager import selection_weight

CLIENT_KEYS = {"id", "name", "stats", "weapon", "defense", "mobility", "wins", "losses", "genome"}


@pytest.fixture
def roster():
    return RosterManager(rng=random.Random(3))


class TestGeneration:
    def test_fills_to_roster_size(self, roster):
        assert len(roster) == 20

    def test_ids_are_unique_base36(self, roster):
        ids = [bug.id for bug in roster.bugs]
        assert len(set(ids)) == len(ids)
        for bug_id in ids:
            assert len(bug_id) == 9
            assert all(c in "0123456789abcdefghijklmnopqrstuvwxyz" for c in bug_id)

    def test_first_bugs_are_varied(self, roster):
        first = roster.bugs[:6]
        assert len({bug.genome.weapon for bug in first}) >= 4
        assert len({bug.genome.mobility for bug in first}) == 3

    def test_custom_size(self):
        assert len(RosterManager(roster_size=4, rng=random.Random(1))) == 4

    def test_size_below_two_rejected(self):
        with pytest.raises(RosterError):
            RosterManager(roster_size=1)

    def test_satisfies_roster_protocol(self, roster):
        assert isinstance(roster, RosterProvider)


class TestSelection:
    @pytest.mark.parametrize("fights, weight", [(0, 10), (4, 8), (18, 1), (40, 1)])
    def test_weight_favours_new_bugs(self, make_genome, fights, weight):
        bug = RosterBug("x", "X", make_genome(), wins=fights)
        assert selection_weight(bug) == weight

    def test_picks_two_different_bugs(self, roster):
        for _ in range(50):
            a, b = roster.select_fighters()
            assert a.id != b.id

    def test_veterans_picked_less_often(self, roster):
        for bug in roster.bugs[1:]:
            bug.wins = 30
        counts = sum(1 for _ in range(400) if roster.bugs[0] in roster.select_fighters())
        # 10 vs 1 weighting: the rookie shows up in most matches
        assert counts > 160

    def test_needs_two_bugs(self, roster):
        roster.bugs = roster.bugs[:1]
        with pytest.raises(RosterError):
            roster.select_fighters()


class TestRecords:
    def test_record_win_and_loss(self, roster):
        bug = roster.bugs[0]
        roster.record_win(bug.id)
        roster.record_loss(bug.id)
        roster.record_win(bug.id)
        assert (bug.wins, bug.losses) == (2, 1)
        assert bug.total_fights == 3

    def test_unknown_id_is_ignored(self, roster):
        roster.record_win("nope")
        assert all(bug.wins == 0 for bug in roster.bugs)

    def test_get_roster_rows(self, roster):
        rows = roster.get_roster()
        assert len(rows) == 20
        assert set(rows[0]) == CLIENT_KEYS
        assert set(rows[0]["stats"]) == {"bulk", "speed", "fury", "instinct"}

    def test_get_bug(self, roster):
        bug = roster.bugs[5]
        assert roster.get_bug(bug.id) is bug
        assert roster.get_bug("missing") is None


class TestBreeding:
    def test_breed_adds_child(self, roster):
        a, b = roster.bugs[0], roster.bugs[1]
        child = roster.breed_new_bug(a.id, b.id)
        assert len(roster) == 21
        assert roster.get_bug(child.id) is child
        assert child.wins == child.losses == 0
        assert child.genome.validate()["ok"]

    def test_unknown_parent(self, roster):
        with pytest.raises(RosterError, match="ghost"):
            roster.breed_new_bug(roster.bugs[0].id, "ghost")

    def test_cannot_breed_with_self(self, roster):
        bug_id = roster.bugs[0].id
        with pytest.raises(RosterError):
            roster.breed_new_bug(bug_id, bug_id)


class TestPersistence:
    def test_save_and_reload(self, tmp_path):
        path = tmp_path / "roster.json"
        first = RosterManager(path, rng=random.Random(8))
        first.record_win(first.bugs[2].id)
        assert first.flush() is True

        data = json.loads(path.read_text())
        assert len(data["bugs"]) == 20
        assert "savedAt" in data

        second = RosterManager(path, rng=random.Random(9))
        assert [b.id for b in second.bugs] == [b.id for b in first.bugs]
        assert second.bugs[2].wins == 1
        assert second.bugs[2].genome == first.bugs[2].genome

    def test_results_only_mark_dirty(self, tmp_path):
        path = tmp_path / "roster.json"
        roster = RosterManager(path, roster_size=4, rng=random.Random(8))
        before = path.read_text()
        assert roster.dirty is False

        roster.record_win(roster.bugs[0].id)
        roster.record_loss(roster.bugs[1].id)
        roster.breed_new_bug(roster.bugs[0].id, roster.bugs[1].id)

        assert roster.dirty is True
        assert path.read_text() == before

    def test_flush_writes_once(self, tmp_path):
        path = tmp_path / "roster.json"
        roster = RosterManager(path, roster_size=4, rng=random.Random(8))
        assert roster.flush() is False

        roster.record_win(roster.bugs[3].id)
        assert roster.flush() is True
        assert roster.dirty is False
        assert json.loads(path.read_text())["bugs"][3]["wins"] == 1
        assert roster.flush() is False

    def test_capture_clears_dirty(self, tmp_path):
        roster = RosterManager(tmp_path / "roster.json", roster_size=4, rng=random.Random(8))
        assert roster.capture_state_for_save() is None

        roster.record_loss(roster.bugs[0].id)
        snapshot = roster.capture_state_for_save()
        assert snapshot["bugs"][0]["losses"] == 1
        assert roster.dirty is False

    def test_failed_write_stays_dirty(self, tmp_path):
        roster = RosterManager(tmp_path, roster_size=4, rng=random.Random(5))
        roster.record_win(roster.bugs[0].id)
        assert roster.flush() is False
        assert roster.dirty is True

    def test_small_file_is_topped_up(self, tmp_path):
        path = tmp_path / "roster.json"
        RosterManager(path, roster_size=3, rng=random.Random(1))
        assert len(RosterManager(path, roster_size=5, rng=random.Random(2))) == 5

    def test_corrupt_file_regenerates(self, tmp_path, caplog):
        path = tmp_path / "roster.json"
        path.write_text("{not json")
        roster = RosterManager(path, rng=random.Random(4))
        assert len(roster) == 20
        assert "Error loading roster" in caplog.text

    def test_bad_genome_in_file_regenerates(self, tmp_path):
        path = tmp_path / "roster.json"
        path.write_text(json.dumps({"bugs": [{"id": "a", "name": "A", "genome": {"bulk": 1}}]}))
        roster = RosterManager(path, rng=random.Random(4))
        assert len(roster) == 20
        assert roster.get_bug("a") is None

    def test_unwritable_path_is_not_fatal(self, tmp_path):
        roster = RosterManager(tmp_path, rng=random.Random(5))
        assert len(roster) == 20
        assert roster.save() is False
        roster.record_win(roster.bugs[0].id)
        assert roster.bugs[0].wins == 1

    def test_memory_only_roster_does_not_save(self, roster):
        assert roster.save() is False

    def test_created_at_round_trips(self, make_genome):
        bug = RosterBug("id1", "Name", make_genome(), wins=2, losses=1, created_at="2024-01-01T00:00:00+00:00")
        record = bug.to_dict()
        assert record["createdAt"] == "2024-01-01T00:00:00+00:00"
        assert RosterBug.from_dict(record) == bug

    def test_read_file_reports_bad_records(self, tmp_path):
        path = tmp_path / "roster.json"
        roster = RosterManager(path, roster_size=2, rng=random.Random(6))
        path.write_text(json.dumps({"bugs": [{"name": "no id"}]}))
        with pytest.raises(PersistenceError, match="cannot read roster"):
            roster.read_file()
