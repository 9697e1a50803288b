# matchpoint/crud/crud_game_participant.py
from typing import Optional

from sqlalchemy import and_
from sqlalchemy.orm import Session

from matchpoint.constants.statuses import (
    PARTICIPANT_STATUS_ORDER,
    ParticipantRole,
    ParticipantStatus,
)
from matchpoint.models.game_participant import GameParticipant
from matchpoint.services.capacity_gate import CapacityGate, capacity_gate


class CRUDGameParticipant:
    """
    Participant registry: one entry per (game, user).

    Reads go straight to the table. Every write is delegated to the capacity
    gate so the game's confirmed count moves in the same transaction as the
    entry it describes.
    """

    def __init__(self, gate: CapacityGate):
        self.gate = gate

    # ------------------------------------------------------------------ #
    # Reads
    # ------------------------------------------------------------------ #

    def get_entry(self, db: Session, *, game_id: str, user_id: str) -> Optional[GameParticipant]:
        return (
            db.query(GameParticipant)
            .filter(
                and_(GameParticipant.game_id == game_id, GameParticipant.user_id == user_id)
            )
            .first()
        )

    def list_by_game(self, db: Session, *, game_id: str) -> list[GameParticipant]:
        """
        Entries grouped by status (Confirmed, Waitlist, Invited, Declined),
        oldest registration first within each group.
        """
        entries = (
            db.query(GameParticipant)
            .filter(GameParticipant.game_id == game_id)
            .order_by(GameParticipant.registered_at.asc(), GameParticipant.id.asc())
            .all()
        )
        rank = {status: idx for idx, status in enumerate(PARTICIPANT_STATUS_ORDER)}
        # sorted() is stable, so registration order survives within a status
        return sorted(entries, key=lambda e: rank[e.status])

    def list_by_status(
        self, db: Session, *, game_id: str, status: ParticipantStatus
    ) -> list[GameParticipant]:
        return (
            db.query(GameParticipant)
            .filter(and_(GameParticipant.game_id == game_id, GameParticipant.status == status))
            .order_by(GameParticipant.registered_at.asc(), GameParticipant.id.asc())
            .all()
        )

    def get_statuses_for_user(
        self, db: Session, *, user_id: str, game_ids: list[str]
    ) -> dict[str, ParticipantStatus]:
        """Map of game_id -> the user's status, for games where they have an entry."""
        if not game_ids:
            return {}
        rows = (
            db.query(GameParticipant.game_id, GameParticipant.status)
            .filter(
                and_(GameParticipant.user_id == user_id, GameParticipant.game_id.in_(game_ids))
            )
            .all()
        )
        return {game_id: status for game_id, status in rows}

    # ------------------------------------------------------------------ #
    # Writes
    # ------------------------------------------------------------------ #

    def join(
        self,
        db: Session,
        *,
        game_id: str,
        user_id: str,
        display_name: Optional[str] = None,
    ) -> GameParticipant:
        """Self-registration: Confirmed while there is room, Waitlist after."""
        return self.gate.admit(
            db, game_id=game_id, user_id=user_id, display_name=display_name
        )

    def add_entry(
        self,
        db: Session,
        *,
        game_id: str,
        user_id: str,
        initial_status: ParticipantStatus,
        role: ParticipantRole = ParticipantRole.PLAYER,
        display_name: Optional[str] = None,
    ) -> GameParticipant:
        return self.gate.admit(
            db,
            game_id=game_id,
            user_id=user_id,
            requested_status=initial_status,
            role=role,
            display_name=display_name,
        )

    def set_status(
        self,
        db: Session,
        *,
        game_id: str,
        user_id: str,
        new_status: ParticipantStatus,
        expected_status: Optional[ParticipantStatus] = None,
    ) -> ParticipantStatus:
        """Returns the status the entry had before the change."""
        return self.gate.change_status(
            db,
            game_id=game_id,
            user_id=user_id,
            new_status=new_status,
            expected_status=expected_status,
        )

    def remove_entry(self, db: Session, *, game_id: str, user_id: str) -> ParticipantStatus:
        """Returns the status the removed entry had."""
        return self.gate.release(db, game_id=game_id, user_id=user_id)


game_participant = CRUDGameParticipant(capacity_gate)
