"""Tests for the per-tab alert lifecycle."""

import pytest

from conftest import make_tabs
from zjsidebar.exceptions import TabNotFoundError
from zjsidebar.models.alerts import CommandResult, Notification
from zjsidebar.models.tabs import TabSnapshot
from zjsidebar.services.alert_engine import AlertEngine


class TestCommandResult:
    """Tests for command-result alerts."""

    def test_first_alert_signalled(self, engine):
        assert engine.report_command_result(1, success=True) is True
        assert engine.report_command_result(2, success=False) is False

    def test_entry_starts_highlighted(self, engine):
        engine.report_command_result(1, success=False)
        assert engine.get(1) == CommandResult(success=False, alternate_color=True)

    def test_overwrites_existing_entry(self, engine):
        engine.report_command_result(1, success=False)
        engine.advance_one_tick()
        engine.report_command_result(1, success=True)
        assert engine.get(1) == CommandResult(success=True, alternate_color=True)

    def test_unknown_position_raises(self, engine):
        with pytest.raises(TabNotFoundError):
            engine.report_command_result(7, success=True)
        assert engine.is_empty()

    def test_never_expires(self, engine):
        """Tab 1 failure alternates on every tick and survives indefinitely."""
        engine.report_command_result(1, success=False)

        engine.advance_one_tick()
        assert engine.get(1).alternate_color is False
        engine.advance_one_tick()
        result = engine.advance_one_tick()

        assert engine.get(1) is not None
        assert result.removed == set()
        assert result.needs_more is True

    def test_activation_clears_regardless_of_ticks(self, engine):
        engine.report_command_result(1, success=False)
        for _ in range(3):
            engine.advance_one_tick()

        engine.sync_tabs(TabSnapshot(tabs=make_tabs(3, active=1)))

        assert engine.get(1) is None
        assert engine.is_empty()


class TestNotification:
    """Tests for flashing notifications."""

    def test_refused_for_active_tab(self, engine):
        assert engine.report_notification(0, 3) is False
        assert engine.is_empty()

    def test_refused_for_unknown_tab(self, engine):
        assert engine.report_notification(9, 3) is False

    def test_phases(self, engine):
        """On phase first, decrement on the off phase, persistent stays."""
        assert engine.report_notification(1, 2) is True
        assert engine.get(1) == Notification(flash_count=2, persistent=True, alternate_color=False)

        engine.advance_one_tick()
        assert engine.get(1).alternate_color is True
        assert engine.get(1).flash_count == 2

        engine.advance_one_tick()
        assert engine.get(1).alternate_color is False
        assert engine.get(1).flash_count == 1

        engine.advance_one_tick()
        result = engine.advance_one_tick()
        assert engine.get(1).flash_count == 0
        assert 1 not in result.removed
        assert result.needs_more is False

    def test_persistent_stays_lit_after_flashing(self, engine):
        engine.report_notification(1, 1)
        for _ in range(6):
            engine.advance_one_tick()
        alert = engine.get(1)
        assert alert.flash_count == 0
        assert alert.alternate_color is True

    def test_ten_unit_notification_removed_after_ten_off_phases(self, engine):
        """Each flash unit is one full on/off cycle, so ten units last twenty ticks."""
        engine.replace_all({2: Notification(flash_count=10, persistent=False)})

        off_phases = 0
        ticks = 0
        while engine.get(2) is not None:
            before = engine.get(2).alternate_color
            result = engine.advance_one_tick()
            ticks += 1
            after = engine.get(2)
            if before and (after is None or not after.alternate_color):
                off_phases += 1
            assert ticks < 100

        assert off_phases == 10
        assert ticks == 20
        assert result.removed == {2}
        assert result.needs_more is False

    def test_persistent_cleared_only_by_activation(self, engine):
        engine.report_notification(2, 10)
        for _ in range(50):
            engine.advance_one_tick()
        assert engine.get(2) is not None

        engine.clear_on_activation(2)
        assert engine.get(2) is None


class TestTicks:
    """Tests for tick bookkeeping."""

    def test_empty_tick_is_noop(self):
        engine = AlertEngine()
        first = engine.advance_one_tick()
        second = engine.advance_one_tick()
        assert first.removed == set() and first.needs_more is False
        assert second.removed == set() and second.needs_more is False
        assert engine.is_empty()

    def test_needs_ticks_reflects_live_entries(self, engine):
        assert engine.needs_ticks() is False
        engine.report_notification(1, 0)
        assert engine.needs_ticks() is False
        engine.report_command_result(2, success=True)
        assert engine.needs_ticks() is True

    def test_snapshot_is_a_copy(self, engine):
        engine.report_command_result(1, success=True)
        snap = engine.snapshot()
        snap[1].alternate_color = False
        snap[2] = CommandResult(success=False)
        assert engine.get(1).alternate_color is True
        assert engine.get(2) is None


class TestSyncTabs:
    """Tests for tab tracking."""

    def test_removed_tab_drops_its_alert(self, engine):
        engine.report_command_result(2, success=True)
        engine.sync_tabs(TabSnapshot(tabs=make_tabs(2, active=0)))
        assert engine.get(2) is None

    def test_replace_all_keeps_active_tab_clear(self, engine):
        engine.replace_all({0: CommandResult(success=True), 1: CommandResult(success=False)})
        assert engine.get(0) is None
        assert engine.get(1) is not None
