# tests/services/test_capacity_concurrency.py

import threading

from matchpoint.constants.statuses import ParticipantStatus
from matchpoint.crud import crud_game
from matchpoint.db.session import SessionLocal
from matchpoint.services.capacity_gate import CapacityGate
from tests.utils.game import create_game

THREADS = 8
CAPACITY = 3


def test_concurrent_joins_never_overfill(db_session):
    game = create_game(db_session, max_participants=CAPACITY)
    game_id = game.id

    # Every writer but one loses each round, so allow plenty of retries
    gate = CapacityGate(max_attempts=30)
    barrier = threading.Barrier(THREADS)
    results: dict[str, ParticipantStatus] = {}
    errors: list[Exception] = []
    lock = threading.Lock()

    def join(user_id: str):
        session = SessionLocal()
        try:
            barrier.wait()
            status = gate.try_confirm(session, game_id=game_id, user_id=user_id)
            with lock:
                results[user_id] = status
        except Exception as e:
            with lock:
                errors.append(e)
        finally:
            session.close()

    threads = [threading.Thread(target=join, args=(f"racer_{i}",)) for i in range(THREADS)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    confirmed = [u for u, s in results.items() if s == ParticipantStatus.CONFIRMED]
    waitlisted = [u for u, s in results.items() if s == ParticipantStatus.WAITLIST]
    assert len(confirmed) == CAPACITY
    assert len(waitlisted) == THREADS - CAPACITY

    db_session.expire_all()
    game = crud_game.game.get(db_session, id=game_id)
    assert game.current_participants == CAPACITY
    assert sorted(game.participant_ids) == sorted(confirmed)
    assert sorted(game.waitlist_ids) == sorted(waitlisted)
