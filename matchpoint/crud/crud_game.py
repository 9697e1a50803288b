# matchpoint/crud/crud_game.py
from datetime import datetime

from sqlalchemy.orm import Session

from .base import CRUDBase
from matchpoint.constants.statuses import GameStatus
from matchpoint.models.game import Game
from matchpoint.schemas.game import GameCreate, GameStatusUpdate


class CRUDGame(CRUDBase[Game, GameCreate, GameStatusUpdate]):
    def create_with_host(self, db: Session, *, obj_in: GameCreate, host_id: str) -> Game:
        """
        Creates an Upcoming game with an empty registry. Capacity fields start
        at zero and are only moved by the capacity gate afterwards.
        """
        db_obj = self.model(
            **obj_in.model_dump(),
            host_id=host_id,
            created_by=host_id,
            status=GameStatus.UPCOMING,
            current_participants=0,
            participant_ids=[],
            waitlist_ids=[],
        )
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def get_recent_past_games(
        self, db: Session, *, group_id: str, before: datetime, limit: int
    ) -> list[Game]:
        """
        Most recent games of a group scheduled before `before`, newest first.
        """
        return (
            db.query(self.model)
            .filter(self.model.group_id == group_id, self.model.scheduled_time < before)
            .order_by(self.model.scheduled_time.desc(), self.model.id.desc())
            .limit(limit)
            .all()
        )


game = CRUDGame(Game)
