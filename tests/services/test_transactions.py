# tests/services/test_transactions.py

from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm.exc import StaleDataError

from matchpoint.core.exceptions import GameFull, TransientStoreError
from matchpoint.services import transactions
from matchpoint.services.transactions import run_with_retry


@pytest.fixture(autouse=True)
def no_backoff(monkeypatch):
    sleep_mock = MagicMock()
    monkeypatch.setattr(transactions.time, "sleep", sleep_mock)
    return sleep_mock


def test_commits_result_on_first_attempt():
    db = MagicMock()
    operation = MagicMock(return_value="ok")

    assert run_with_retry(db, operation, description="test op") == "ok"
    operation.assert_called_once()
    db.commit.assert_called_once()
    db.rollback.assert_not_called()


def test_retries_after_conflicts(no_backoff):
    db = MagicMock()
    operation = MagicMock(
        side_effect=[
            StaleDataError("version mismatch"),
            IntegrityError("INSERT", {}, Exception("unique")),
            "ok",
        ]
    )

    assert run_with_retry(db, operation, description="test op", max_attempts=5) == "ok"
    assert operation.call_count == 3
    assert db.rollback.call_count == 2
    assert no_backoff.call_count == 2


def test_commit_conflict_is_retried():
    db = MagicMock()
    db.commit.side_effect = [OperationalError("UPDATE", {}, Exception("database is locked")), None]
    operation = MagicMock(return_value=1)

    assert run_with_retry(db, operation, description="test op", max_attempts=2) == 1
    assert operation.call_count == 2


def test_gives_up_after_max_attempts(no_backoff):
    db = MagicMock()
    operation = MagicMock(side_effect=StaleDataError("version mismatch"))

    with pytest.raises(TransientStoreError):
        run_with_retry(db, operation, description="test op", max_attempts=3)

    assert operation.call_count == 3
    assert db.rollback.call_count == 3
    # No pause after the final attempt
    assert no_backoff.call_count == 2


def test_domain_error_is_not_retried():
    db = MagicMock()
    operation = MagicMock(side_effect=GameFull())

    with pytest.raises(GameFull):
        run_with_retry(db, operation, description="test op", max_attempts=5)

    operation.assert_called_once()
    db.rollback.assert_called_once()
    db.commit.assert_not_called()
