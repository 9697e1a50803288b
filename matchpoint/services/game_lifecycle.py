# matchpoint/services/game_lifecycle.py
import logging
from datetime import datetime, timezone
from typing import Callable

from sqlalchemy.orm import Session

from matchpoint.constants.statuses import GameStatus, ParticipantStatus
from matchpoint.core.exceptions import GameNotFound, InvalidTransition
from matchpoint.crud.crud_game_participant import game_participant as registry
from matchpoint.models.game import Game
from matchpoint.services.transactions import run_with_retry
from matchpoint.utils.notifications import GAME_CANCELED, notify

logger = logging.getLogger(__name__)

VALID_TRANSITIONS: dict[GameStatus, set[GameStatus]] = {
    GameStatus.UPCOMING: {GameStatus.IN_PROGRESS, GameStatus.CANCELED},
    GameStatus.IN_PROGRESS: {GameStatus.COMPLETED, GameStatus.CANCELED},
    GameStatus.COMPLETED: set(),  # Terminal state
    GameStatus.CANCELED: set(),  # Terminal state
}


def validate_transition(current_status: GameStatus, new_status: GameStatus) -> None:
    """
    Valid transitions:
    - Upcoming -> In Progress, Canceled
    - In Progress -> Completed, Canceled
    - Completed, Canceled -> (terminal)

    Raises:
        InvalidTransition: for anything else, including a no-op request
    """
    allowed = VALID_TRANSITIONS[current_status]
    if new_status not in allowed:
        raise InvalidTransition(
            f"Cannot move game from {current_status.value} to {new_status.value}"
        )


def transition_game(
    db: Session,
    *,
    game_id: str,
    new_status: GameStatus,
    notifier: Callable[..., bool] = notify,
) -> Game:
    """Apply a lifecycle change, notifying registered players on cancellation."""

    def _transition() -> Game:
        game = (
            db.query(Game)
            .filter(Game.id == game_id)
            .with_for_update()
            .populate_existing()
            .first()
        )
        if not game:
            raise GameNotFound()
        validate_transition(game.status, new_status)
        game.status = new_status
        game.updated_at = datetime.now(timezone.utc)
        return game

    game = run_with_retry(db, _transition, description=f"status change of game {game_id}")
    logger.info(f"Game {game_id} moved to {new_status.value}")

    if new_status == GameStatus.CANCELED:
        affected = [
            e.user_id
            for e in registry.list_by_game(db, game_id=game_id)
            if e.status in (ParticipantStatus.CONFIRMED, ParticipantStatus.WAITLIST)
        ]
        for user_id in affected:
            notifier(user_id, GAME_CANCELED, {"gameId": game_id, "title": game.title})

    return game
