"""Tests for alert catch-up between sibling instances."""

import json

from zjsidebar.config.constants import PIPE_BROADCAST
from zjsidebar.models.alerts import CommandResult, Notification, dump_alert_map, load_alert_map
from zjsidebar.services.alert_engine import AlertEngine
from zjsidebar.services.broadcast_relay import BroadcastRelay


def sibling_payload():
    return dump_alert_map({
        1: CommandResult(success=False, alternate_color=False),
        2: Notification(flash_count=2, persistent=True, alternate_color=True),
    })


class TestOutbound:
    """Tests for the emission side."""

    def test_nothing_to_send_when_empty(self, engine):
        assert BroadcastRelay(engine).outbound() is None

    def test_payload_round_trips(self, engine):
        engine.report_command_result(1, success=True)
        message = BroadcastRelay(engine).outbound()
        assert message.name == PIPE_BROADCAST
        assert load_alert_map(message.payload) == {1: CommandResult(success=True, alternate_color=True)}

    def test_payload_keyed_by_position(self, engine):
        engine.report_notification(2, 4)
        raw = json.loads(BroadcastRelay(engine).outbound().payload)
        assert raw == {
            "2": {"kind": "notification", "flash_count": 4, "persistent": True, "alternate_color": False}
        }


class TestReceive:
    """Tests for on_broadcast_received()."""

    def test_applied_when_empty(self, engine):
        relay = BroadcastRelay(engine)
        assert relay.on_broadcast_received(sibling_payload()) is True
        assert engine.get(1) == CommandResult(success=False, alternate_color=False)
        assert engine.get(2).flash_count == 2

    def test_ignored_when_own_alerts_exist(self, engine):
        engine.report_command_result(2, success=True)
        relay = BroadcastRelay(engine)
        assert relay.on_broadcast_received(sibling_payload()) is False
        assert engine.get(1) is None

    def test_strict_applies_when_different(self, engine):
        engine.report_command_result(2, success=True)
        relay = BroadcastRelay(engine, strict=True)
        assert relay.on_broadcast_received(sibling_payload()) is True
        assert engine.get(1) is not None

    def test_strict_ignores_identical_map(self, engine):
        engine.replace_all(load_alert_map(sibling_payload()))
        relay = BroadcastRelay(engine, strict=True)
        assert relay.on_broadcast_received(sibling_payload()) is False

    def test_active_tab_entry_not_adopted(self, engine):
        payload = dump_alert_map({0: CommandResult(success=True), 1: CommandResult(success=True)})
        BroadcastRelay(engine).on_broadcast_received(payload)
        assert engine.get(0) is None
        assert engine.get(1) is not None

    def test_malformed_payload_dropped(self):
        engine = AlertEngine()
        relay = BroadcastRelay(engine)
        for payload in [None, "", "nope", "[]", '{"x": {}}', '{"1": {"kind": "bogus"}}', '{"1": {"success": 1}}']:
            assert relay.on_broadcast_received(payload) is False
        assert engine.is_empty()

    def test_legacy_entry_without_kind(self):
        engine = AlertEngine()
        payload = json.dumps({"3": {"success": True, "alternate_color": False}})
        assert BroadcastRelay(engine).on_broadcast_received(payload) is True
        assert engine.get(3) == CommandResult(success=True, alternate_color=False)
