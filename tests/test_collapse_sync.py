"""Tests for cross-instance collapse synchronization."""

from unittest.mock import MagicMock

import pytest

from conftest import FakeClock
from zjsidebar.exceptions import StoreReadError, StoreWriteError
from zjsidebar.models.collapse import CollapseRecord
from zjsidebar.services.collapse_store import FileCollapseStore, MemoryCollapseStore
from zjsidebar.services.collapse_sync import CollapseSync, PollState


def make_sync(store, clock, **poll):
    poll_state = PollState(floor=0.05, ceiling=2.0, growth_factor=2.0, **poll)
    return CollapseSync(store, poll_state, clock=clock)


class TestPollState:
    """Tests for PollState validation and arithmetic."""

    def test_grow_is_capped(self):
        state = PollState(floor=0.1, ceiling=0.5, growth_factor=3.0)
        state.grow()
        assert state.current_interval == pytest.approx(0.3)
        state.grow()
        assert state.current_interval == 0.5

    def test_reset(self):
        state = PollState(floor=0.1, ceiling=0.5, growth_factor=3.0)
        state.grow()
        state.reset()
        assert state.current_interval == 0.1

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"floor": 0},
            {"floor": 1.0, "ceiling": 0.5},
            {"growth_factor": 0.5},
        ],
    )
    def test_invalid(self, kwargs):
        with pytest.raises(ValueError):
            PollState(**kwargs)


class TestToggle:
    """Tests for CollapseSync.toggle()."""

    def test_default_is_expanded(self, memory_store, clock):
        assert make_sync(memory_store, clock).desired_state() is False

    def test_toggle_flips_and_publishes(self, memory_store, clock):
        sync = make_sync(memory_store, clock)
        record = sync.toggle()
        assert record == CollapseRecord(timestamp=clock.now, collapsed=True)
        assert sync.desired_state() is True
        assert memory_store.read() == record

        clock.advance(10)
        assert sync.toggle().collapsed is False
        assert memory_store.read().collapsed is False

    def test_toggle_resets_interval(self, memory_store, clock):
        sync = make_sync(memory_store, clock)
        for _ in range(5):
            sync.poll_once()
        assert sync.next_poll_delay() > 0.05
        sync.toggle()
        assert sync.next_poll_delay() == 0.05

    def test_own_write_not_adopted_again(self, memory_store, clock):
        sync = make_sync(memory_store, clock)
        record = sync.toggle()
        assert sync.poll_once() is None
        assert sync.belief == record

    def test_sibling_write_racing_toggle_is_seen(self, clock):
        """A write landing right after ours must not be marked as already seen."""

        class RacingStore(MemoryCollapseStore):
            raced = False

            def write(self, record):
                super().write(record)
                if not self.raced:
                    self.raced = True
                    super().write(CollapseRecord(timestamp=record.timestamp + 1, collapsed=False))

        sync = make_sync(RacingStore(), clock)
        record = sync.toggle()
        assert sync.desired_state() is True

        assert sync.poll_once() is False
        assert sync.desired_state() is False
        assert sync.belief.timestamp == record.timestamp + 1

    def test_timestamps_strictly_increase(self, memory_store, clock):
        sync = make_sync(memory_store, clock)
        first = sync.toggle()
        second = sync.toggle()  # clock did not move
        assert second.timestamp > first.timestamp

    def test_write_failure_keeps_local_belief(self, clock):
        store = MagicMock()
        store.write.side_effect = StoreWriteError("disk full")
        sync = make_sync(store, clock)

        record = sync.toggle()

        assert sync.desired_state() is True
        assert sync.belief == record
        assert isinstance(sync.write_error, StoreWriteError)


class TestPollOnce:
    """Tests for CollapseSync.poll_once()."""

    def test_backoff_grows_to_ceiling(self, memory_store, clock):
        sync = make_sync(memory_store, clock)
        delays = []
        for _ in range(10):
            assert sync.poll_once() is None
            delays.append(sync.next_poll_delay())
        assert delays == sorted(delays)
        assert delays[0] == pytest.approx(0.1)
        assert delays[-1] == 2.0

    def test_adopts_newer_record(self, memory_store, clock):
        sync = make_sync(memory_store, clock)
        for _ in range(4):
            sync.poll_once()

        memory_store.write(CollapseRecord(timestamp=clock.now + 5, collapsed=True))

        assert sync.poll_once() is True
        assert sync.desired_state() is True
        assert sync.next_poll_delay() == 0.05

    def test_stale_record_ignored(self, memory_store, clock):
        sync = make_sync(memory_store, clock)
        clock.advance(100)
        sync.toggle()  # local belief at t+100, collapsed

        memory_store.write(CollapseRecord(timestamp=clock.now - 50, collapsed=False))
        revision = memory_store.revision()

        assert sync.poll_once() is None
        assert sync.desired_state() is True
        assert sync.poll_state.last_seen_version == revision
        assert sync.next_poll_delay() > 0.05

    def test_unchanged_revision_skips_read(self, clock):
        store = MagicMock()
        store.revision.return_value = 3
        store.read.return_value = CollapseRecord(timestamp=1, collapsed=True)
        sync = make_sync(store, clock)

        assert sync.poll_once() is True
        assert sync.poll_once() is None
        assert store.read.call_count == 1

    def test_unreadable_store_keeps_belief(self, clock):
        store = MagicMock()
        store.revision.side_effect = StoreReadError("permission denied")
        sync = make_sync(store, clock)

        assert sync.poll_once() is None
        assert sync.desired_state() is False
        assert sync.next_poll_delay() == pytest.approx(0.1)

    def test_corrupt_record_keeps_belief(self, tmp_path, clock):
        path = tmp_path / "collapse.json"
        path.write_text("{garbage")
        sync = make_sync(FileCollapseStore(path), clock)

        assert sync.poll_once() is None
        assert sync.desired_state() is False

    def test_undecodable_record_keeps_belief(self, tmp_path, clock):
        path = tmp_path / "collapse.json"
        path.write_bytes(b"\xff\xfe\x00garbage")
        sync = make_sync(FileCollapseStore(path), clock)

        assert sync.poll_once() is None
        assert sync.desired_state() is False
        assert sync.next_poll_delay() == pytest.approx(0.1)

    def test_missing_record(self, tmp_path, clock):
        sync = make_sync(FileCollapseStore(tmp_path / "collapse.json"), clock)
        assert sync.poll_once() is None
        assert sync.desired_state() is False


class TestConvergence:
    """Several instances sharing one store."""

    def test_last_writer_wins(self, clock):
        store = MemoryCollapseStore()
        instances = [make_sync(store, clock) for _ in range(3)]

        instances[0].toggle()  # t1: collapsed
        clock.advance(20)
        instances[1].toggle()  # t2: instance 1 had not seen t1, so also collapsed

        for sync in instances:
            sync.poll_once()

        assert {sync.desired_state() for sync in instances} == {True}
        assert all(sync.belief.timestamp == clock.now for sync in instances)

    def test_toggle_after_catch_up(self, clock):
        store = MemoryCollapseStore()
        a, b = make_sync(store, clock), make_sync(store, clock)

        a.toggle()
        b.poll_once()
        clock.advance(5)
        b.toggle()
        a.poll_once()

        assert a.desired_state() is False
        assert b.desired_state() is False

    def test_file_store_convergence(self, tmp_path):
        clock = FakeClock()
        path = tmp_path / "collapse.json"
        a = make_sync(FileCollapseStore(path), clock)
        b = make_sync(FileCollapseStore(path), clock)

        a.toggle()
        clock.advance(1)
        b.poll_once()

        assert b.desired_state() is True
