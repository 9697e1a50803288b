# matchpoint/services/waitlist_promoter.py
"""
Waitlist promotion.

When confirmed slots free up, waitlisted players are ranked by priority
score (highest first, earliest registration on ties) and promoted into the
free slots one at a time. Each promotion is its own capacity-gate
transaction; a promotion that fails is logged and skipped so the rest of
the batch still goes through.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from matchpoint.constants.statuses import ParticipantStatus
from matchpoint.core.exceptions import GameNotFound, MatchPointError
from matchpoint.crud.crud_game import game as crud_game
from matchpoint.crud.crud_game_participant import CRUDGameParticipant, game_participant
from matchpoint.models.game import Game
from matchpoint.models.game_participant import GameParticipant
from matchpoint.services.priority_scorer import PriorityScorer, priority_scorer
from matchpoint.utils.notifications import WAITLIST_PROMOTED, notify

logger = logging.getLogger(__name__)


@dataclass
class RankedEntry:
    entry: GameParticipant
    score: float


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is stored in UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class WaitlistPromoter:
    def __init__(
        self,
        registry: CRUDGameParticipant = game_participant,
        scorer: PriorityScorer = priority_scorer,
        notifier: Callable[..., bool] = notify,
    ):
        self.registry = registry
        self.scorer = scorer
        self.notifier = notifier

    def rank_waitlist(self, db: Session, game: Game) -> list[RankedEntry]:
        """Waitlisted entries ordered by score desc, then registered_at asc."""
        waitlisted = self.registry.list_by_status(
            db, game_id=game.id, status=ParticipantStatus.WAITLIST
        )
        ranked = [
            RankedEntry(
                entry=entry,
                score=self.scorer.score(db, user_id=entry.user_id, group_id=game.group_id),
            )
            for entry in waitlisted
        ]
        ranked.sort(key=lambda r: (-r.score, _as_utc(r.entry.registered_at), r.entry.id))
        return ranked

    def process_waitlist(self, db: Session, game_id: str) -> int:
        """
        Promote waitlisted players into free slots. Returns how many were promoted.
        """
        game = crud_game.get(db, id=game_id)
        if not game:
            raise GameNotFound()

        # Uncapped games never waitlist anyone
        if not game.is_capped:
            return 0
        if not game.status.is_open:
            return 0

        game = self.registry.gate.reconcile(db, game_id=game_id)
        max_participants = game.max_participants
        group_id = game.group_id

        entries = self.registry.list_by_game(db, game_id=game_id)
        confirmed_count = sum(1 for e in entries if e.status == ParticipantStatus.CONFIRMED)
        if confirmed_count >= max_participants:
            return 0

        available_spots = max_participants - confirmed_count
        if not any(e.status == ParticipantStatus.WAITLIST for e in entries):
            return 0

        ranked = self.rank_waitlist(db, game)
        candidates = [(r.entry.user_id, r.score) for r in ranked[:available_spots]]

        promoted: list[str] = []
        for user_id, score in candidates:
            try:
                self.registry.set_status(
                    db,
                    game_id=game_id,
                    user_id=user_id,
                    new_status=ParticipantStatus.CONFIRMED,
                    expected_status=ParticipantStatus.WAITLIST,
                )
            except (MatchPointError, SQLAlchemyError) as e:
                logger.warning(
                    f"Skipping promotion of user {user_id} in game {game_id}: {e}",
                    exc_info=True,
                )
                continue
            promoted.append(user_id)
            logger.info(
                f"Promoted user {user_id} from waitlist in game {game_id} (score {score:.2f})"
            )

        for user_id in promoted:
            self.notifier(
                user_id,
                WAITLIST_PROMOTED,
                {"gameId": game_id, "groupId": group_id},
            )

        logger.info(
            f"Processed waitlist for game {game_id}: promoted {len(promoted)} of "
            f"{len(candidates)} candidates ({available_spots} spots free)"
        )
        return len(promoted)

    def get_user_priority_status(self, db: Session, *, game_id: str, user_id: str) -> dict:
        """
        Where `user_id` stands on the waitlist of `game_id`.

        Returns:
            dict with priority_score, estimated_position (1-based, 0 when not
            waitlisted), total_waitlisted and chance_of_promotion.
        """
        game = crud_game.get(db, id=game_id)
        if not game:
            raise GameNotFound()

        ranked = self.rank_waitlist(db, game)
        position: Optional[int] = next(
            (idx for idx, r in enumerate(ranked) if r.entry.user_id == user_id), None
        )
        if position is None:
            return {
                "priority_score": 0.0,
                "estimated_position": 0,
                "total_waitlisted": len(ranked),
                "chance_of_promotion": "low",
            }

        available_spots = 0
        if game.is_capped:
            available_spots = max(game.max_participants - game.current_participants, 0)

        chance = "low"
        if available_spots > 0:
            if position < available_spots:
                chance = "high"
            elif position < available_spots * 2:
                chance = "medium"

        return {
            "priority_score": ranked[position].score,
            "estimated_position": position + 1,
            "total_waitlisted": len(ranked),
            "chance_of_promotion": chance,
        }


waitlist_promoter = WaitlistPromoter()
