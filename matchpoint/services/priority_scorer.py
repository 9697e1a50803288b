# matchpoint/services/priority_scorer.py
"""
Priority scoring for waitlisted players.

A player's score in a group is built from their last games there:

- attendance (0-40): share of those games they were confirmed for
- regularity (0-30): longest run of consecutive confirmed games, newest first
- waitlist history (0-30): share of those games they were stuck on the waitlist

Players with no games in the group get the neutral score of 50. A player
who simply never showed up scores 0.
"""
import logging
from datetime import datetime, timezone
from typing import Optional, Sequence

from sqlalchemy.orm import Session

from matchpoint.constants.statuses import ParticipantStatus
from matchpoint.core.config import settings
from matchpoint.crud.crud_game import game as crud_game
from matchpoint.crud.crud_game_participant import game_participant as registry

logger = logging.getLogger(__name__)

COLD_START_SCORE = 50.0
MAX_SCORE = 100.0

ATTENDANCE_WEIGHT = 40
REGULARITY_WEIGHT = 30
WAITLIST_WEIGHT = 30


def compute_priority_score(history: Sequence[Optional[ParticipantStatus]]) -> float:
    """
    Score a history of statuses ordered newest game first. `None` marks a
    game the player had no entry for.
    """
    game_count = len(history)
    if game_count == 0:
        return COLD_START_SCORE

    participated = 0
    waitlisted = 0
    consecutive = 0
    max_consecutive = 0

    for status in history:
        if status == ParticipantStatus.CONFIRMED:
            participated += 1
            consecutive += 1
            max_consecutive = max(max_consecutive, consecutive)
        elif status == ParticipantStatus.WAITLIST:
            waitlisted += 1
            consecutive = 0
        else:
            # Invited, Declined or absent all break the streak
            consecutive = 0

    attendance_rate = (participated / game_count) * ATTENDANCE_WEIGHT
    regularity_score = (max_consecutive / game_count) * REGULARITY_WEIGHT
    waitlist_history = (waitlisted / game_count) * WAITLIST_WEIGHT

    return min(MAX_SCORE, attendance_rate + regularity_score + waitlist_history)


class PriorityScorer:
    def __init__(self, history_window: Optional[int] = None):
        self.history_window = history_window or settings.PRIORITY_HISTORY_WINDOW

    def get_history(
        self,
        db: Session,
        *,
        user_id: str,
        group_id: str,
        now: Optional[datetime] = None,
    ) -> list[Optional[ParticipantStatus]]:
        """The user's status in each recent past game of the group, newest first."""
        now = now or datetime.now(timezone.utc)
        past_games = crud_game.get_recent_past_games(
            db, group_id=group_id, before=now, limit=self.history_window
        )
        if not past_games:
            return []

        statuses = registry.get_statuses_for_user(
            db, user_id=user_id, game_ids=[g.id for g in past_games]
        )
        return [statuses.get(g.id) for g in past_games]

    def score(
        self,
        db: Session,
        *,
        user_id: str,
        group_id: Optional[str],
        now: Optional[datetime] = None,
    ) -> float:
        """Priority score in [0, 100] for `user_id` within `group_id`."""
        if not group_id:
            # Games outside a group have no shared history to rank by
            return COLD_START_SCORE

        history = self.get_history(db, user_id=user_id, group_id=group_id, now=now)
        score = compute_priority_score(history)
        logger.debug(
            f"Priority score for user {user_id} in group {group_id}: "
            f"{score:.2f} over {len(history)} games"
        )
        return score


priority_scorer = PriorityScorer()
