# tests/utils/test_kafka_producer.py

from unittest.mock import MagicMock

import pytest
from kafka.errors import KafkaError

from matchpoint.core import kafka_producer
from matchpoint.core.config import settings


@pytest.fixture(autouse=True)
def reset_singleton(monkeypatch):
    monkeypatch.setattr(kafka_producer, "_producer", None)
    yield


def test_disabled_returns_none(monkeypatch):
    monkeypatch.setattr(settings, "KAFKA_ENABLED", False)
    build = MagicMock()
    monkeypatch.setattr(kafka_producer, "_build_producer", build)

    assert kafka_producer.get_kafka_singleton() is None
    build.assert_not_called()


def test_producer_is_created_once(monkeypatch):
    monkeypatch.setattr(settings, "KAFKA_ENABLED", True)
    producer = MagicMock()
    build = MagicMock(return_value=producer)
    monkeypatch.setattr(kafka_producer, "_build_producer", build)

    assert kafka_producer.get_kafka_singleton() is producer
    assert kafka_producer.get_kafka_singleton() is producer
    build.assert_called_once()

    kafka_producer.close_kafka_singleton()
    producer.flush.assert_called_once()
    producer.close.assert_called_once()
    assert kafka_producer._producer is None


def test_unreachable_broker_returns_none(monkeypatch):
    monkeypatch.setattr(settings, "KAFKA_ENABLED", True)
    monkeypatch.setattr(kafka_producer, "_build_producer", MagicMock(side_effect=KafkaError("no brokers available")))

    assert kafka_producer.get_kafka_singleton() is None
