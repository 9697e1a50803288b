# tests/services/test_game_lifecycle.py

from unittest.mock import MagicMock

import pytest

from matchpoint.constants.statuses import GameStatus, ParticipantStatus
from matchpoint.core.exceptions import GameNotFound, InvalidTransition
from matchpoint.services.capacity_gate import capacity_gate
from matchpoint.services.game_lifecycle import transition_game, validate_transition
from matchpoint.utils.notifications import GAME_CANCELED
from tests.utils.game import create_game, register


class TestValidateTransition:
    @pytest.mark.parametrize(
        "current, new",
        [
            (GameStatus.UPCOMING, GameStatus.IN_PROGRESS),
            (GameStatus.UPCOMING, GameStatus.CANCELED),
            (GameStatus.IN_PROGRESS, GameStatus.COMPLETED),
            (GameStatus.IN_PROGRESS, GameStatus.CANCELED),
        ],
    )
    def test_allowed(self, current, new):
        validate_transition(current, new)

    @pytest.mark.parametrize(
        "current, new",
        [
            (GameStatus.UPCOMING, GameStatus.COMPLETED),
            (GameStatus.UPCOMING, GameStatus.UPCOMING),
            (GameStatus.IN_PROGRESS, GameStatus.UPCOMING),
            (GameStatus.COMPLETED, GameStatus.CANCELED),
            (GameStatus.CANCELED, GameStatus.UPCOMING),
        ],
    )
    def test_rejected(self, current, new):
        with pytest.raises(InvalidTransition):
            validate_transition(current, new)


def test_start_then_complete(db_session):
    game = create_game(db_session)
    notifier = MagicMock()

    game = transition_game(db_session, game_id=game.id, new_status=GameStatus.IN_PROGRESS, notifier=notifier)
    assert game.status == GameStatus.IN_PROGRESS

    game = transition_game(db_session, game_id=game.id, new_status=GameStatus.COMPLETED, notifier=notifier)
    assert game.status == GameStatus.COMPLETED
    notifier.assert_not_called()


def test_cancel_notifies_confirmed_and_waitlisted(db_session):
    game = create_game(db_session, max_participants=1, title="Friday Futsal")
    capacity_gate.try_confirm(db_session, game_id=game.id, user_id="u1")
    capacity_gate.try_confirm(db_session, game_id=game.id, user_id="w1")
    register(db_session, game, "invitee", ParticipantStatus.INVITED)
    notifier = MagicMock()

    transition_game(db_session, game_id=game.id, new_status=GameStatus.CANCELED, notifier=notifier)

    notified = {c.args[0] for c in notifier.call_args_list}
    assert notified == {"u1", "w1"}
    for c in notifier.call_args_list:
        assert c.args[1] == GAME_CANCELED
        assert c.args[2] == {"gameId": game.id, "title": "Friday Futsal"}


def test_invalid_transition_leaves_status(db_session):
    game = create_game(db_session)

    with pytest.raises(InvalidTransition):
        transition_game(db_session, game_id=game.id, new_status=GameStatus.COMPLETED, notifier=MagicMock())

    db_session.expire_all()
    assert game.status == GameStatus.UPCOMING


def test_transition_unknown_game(db_session):
    with pytest.raises(GameNotFound):
        transition_game(db_session, game_id="gam_missing", new_status=GameStatus.CANCELED)
