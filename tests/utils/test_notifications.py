# tests/utils/test_notifications.py

from unittest.mock import MagicMock

from matchpoint.utils import notifications
from matchpoint.utils.notifications import (
    GAME_CANCELED,
    TOPIC_NOTIFICATIONS,
    WAITLIST_PROMOTED,
    notify,
)


def test_skips_when_producer_unavailable(monkeypatch):
    monkeypatch.setattr(notifications, "get_kafka_singleton", lambda: None)

    assert notify("u1", WAITLIST_PROMOTED, {"gameId": "gam_1"}) is False


def test_publishes_event(monkeypatch):
    producer = MagicMock()
    monkeypatch.setattr(notifications, "get_kafka_singleton", lambda: producer)

    assert notify("u1", WAITLIST_PROMOTED, {"gameId": "gam_1", "groupId": "grp_1"}) is True

    producer.send.assert_called_once()
    topic = producer.send.call_args.args[0]
    event = producer.send.call_args.kwargs["value"]
    assert topic == TOPIC_NOTIFICATIONS
    assert event["type"] == WAITLIST_PROMOTED
    assert event["userId"] == "u1"
    assert event["payload"] == {"gameId": "gam_1", "groupId": "grp_1"}
    assert "timestamp" in event


def test_send_failure_is_swallowed(monkeypatch):
    producer = MagicMock()
    producer.send.side_effect = RuntimeError("broker down")
    monkeypatch.setattr(notifications, "get_kafka_singleton", lambda: producer)

    assert notify("u1", GAME_CANCELED) is False


def test_missing_payload_defaults_to_empty(monkeypatch):
    producer = MagicMock()
    monkeypatch.setattr(notifications, "get_kafka_singleton", lambda: producer)

    notify("u1", GAME_CANCELED)

    assert producer.send.call_args.kwargs["value"]["payload"] == {}
