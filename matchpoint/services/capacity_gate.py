# matchpoint/services/capacity_gate.py
"""
Capacity gate: the only writer of a game's confirmed count.

Every change to a registry entry that can move a user across the Confirmed
boundary runs here, inside one transaction that locks the game row, so
`current_participants`, `participant_ids` and `waitlist_ids` always agree
with the entries.
"""
import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.orm import Session

from matchpoint.constants.statuses import ParticipantStatus, ParticipantRole
from matchpoint.core.exceptions import (
    AlreadyRegistered,
    EntryNotFound,
    GameClosed,
    GameFull,
    GameNotFound,
    StaleEntry,
)
from matchpoint.models.game import Game
from matchpoint.models.game_participant import GameParticipant
from matchpoint.services.transactions import run_with_retry

logger = logging.getLogger(__name__)


class CapacityGate:
    def __init__(self, max_attempts: Optional[int] = None):
        self.max_attempts = max_attempts

    # ------------------------------------------------------------------ #
    # Public operations
    # ------------------------------------------------------------------ #

    def try_confirm(self, db: Session, *, game_id: str, user_id: str) -> ParticipantStatus:
        """Register a user, confirming if a slot is free and waitlisting otherwise."""
        entry = self.admit(db, game_id=game_id, user_id=user_id)
        return entry.status

    def admit(
        self,
        db: Session,
        *,
        game_id: str,
        user_id: str,
        requested_status: Optional[ParticipantStatus] = None,
        role: ParticipantRole = ParticipantRole.PLAYER,
        display_name: Optional[str] = None,
    ) -> GameParticipant:
        """
        Create the registry entry for (game, user).

        With no requested status, capacity decides between Confirmed and
        Waitlist. An explicit Confirmed request on a full game raises GameFull.
        """

        def _admit() -> GameParticipant:
            game = self._lock_game(db, game_id)
            if not game.status.is_open:
                raise GameClosed()
            if self._find_entry(db, game_id, user_id) is not None:
                raise AlreadyRegistered()

            has_room = self._has_room(game)
            if requested_status is None:
                status = ParticipantStatus.CONFIRMED if has_room else ParticipantStatus.WAITLIST
            else:
                status = requested_status
                if status == ParticipantStatus.CONFIRMED and not has_room:
                    raise GameFull()

            now = datetime.now(timezone.utc)
            entry = GameParticipant(
                game_id=game_id,
                user_id=user_id,
                status=status,
                role=role,
                display_name=display_name,
                joined_at=now,
                registered_at=now,
            )
            db.add(entry)
            self._apply_membership(game, user_id, old_status=None, new_status=status)
            return entry

        entry = run_with_retry(
            db, _admit, description=f"admit {user_id} to game {game_id}", max_attempts=self.max_attempts
        )
        logger.info(f"User {user_id} registered for game {game_id} as {entry.status.value}")
        return entry

    def change_status(
        self,
        db: Session,
        *,
        game_id: str,
        user_id: str,
        new_status: ParticipantStatus,
        expected_status: Optional[ParticipantStatus] = None,
    ) -> ParticipantStatus:
        """
        Move an existing entry to `new_status`, adjusting the confirmed count
        when the Confirmed boundary is crossed. Returns the previous status.

        With `expected_status` set, the change only applies if the entry still
        has that status; otherwise StaleEntry is raised and nothing is written.
        """

        def _change() -> ParticipantStatus:
            game = self._lock_game(db, game_id)
            entry = self._find_entry(db, game_id, user_id)
            if entry is None:
                raise EntryNotFound()

            old_status = entry.status
            if expected_status is not None and old_status != expected_status:
                raise StaleEntry(
                    f"Expected {expected_status.value} but participant is {old_status.value}"
                )
            if old_status == new_status:
                return old_status

            if new_status == ParticipantStatus.CONFIRMED:
                if not game.status.is_open:
                    raise GameClosed()
                if not self._has_room(game):
                    raise GameFull()

            entry.status = new_status
            self._apply_membership(game, user_id, old_status=old_status, new_status=new_status)
            return old_status

        old_status = run_with_retry(
            db,
            _change,
            description=f"status change for {user_id} in game {game_id}",
            max_attempts=self.max_attempts,
        )
        if old_status != new_status:
            logger.info(
                f"User {user_id} in game {game_id}: {old_status.value} -> {new_status.value}"
            )
        return old_status

    def release(self, db: Session, *, game_id: str, user_id: str) -> ParticipantStatus:
        """Delete the entry for (game, user). Returns the status it had."""

        def _release() -> ParticipantStatus:
            game = self._lock_game(db, game_id)
            entry = self._find_entry(db, game_id, user_id)
            if entry is None:
                raise EntryNotFound()

            old_status = entry.status
            db.delete(entry)
            self._apply_membership(game, user_id, old_status=old_status, new_status=None)
            return old_status

        old_status = run_with_retry(
            db,
            _release,
            description=f"removal of {user_id} from game {game_id}",
            max_attempts=self.max_attempts,
        )
        logger.info(f"User {user_id} removed from game {game_id} (was {old_status.value})")
        return old_status

    def reconcile(self, db: Session, *, game_id: str) -> Game:
        """
        Recompute the confirmed count and denormalized id lists from the
        entries. Writes only when they have drifted.
        """

        def _reconcile() -> Game:
            game = self._lock_game(db, game_id)
            entries = (
                db.query(GameParticipant)
                .filter(GameParticipant.game_id == game_id)
                .order_by(GameParticipant.registered_at.asc(), GameParticipant.id.asc())
                .all()
            )
            confirmed_ids = [e.user_id for e in entries if e.status == ParticipantStatus.CONFIRMED]
            waitlist_ids = [e.user_id for e in entries if e.status == ParticipantStatus.WAITLIST]

            drifted = (
                game.current_participants != len(confirmed_ids)
                or sorted(game.participant_ids or []) != sorted(confirmed_ids)
                or sorted(game.waitlist_ids or []) != sorted(waitlist_ids)
            )
            if drifted:
                logger.warning(
                    f"Reconciling game {game_id}: counter {game.current_participants} "
                    f"-> {len(confirmed_ids)}, waitlist {len(game.waitlist_ids or [])} "
                    f"-> {len(waitlist_ids)}"
                )
                game.current_participants = len(confirmed_ids)
                game.participant_ids = confirmed_ids
                game.waitlist_ids = waitlist_ids
                game.updated_at = datetime.now(timezone.utc)
            return game

        return run_with_retry(
            db, _reconcile, description=f"reconcile game {game_id}", max_attempts=self.max_attempts
        )

    # ------------------------------------------------------------------ #
    # Helpers (run inside the transaction)
    # ------------------------------------------------------------------ #

    @staticmethod
    def _lock_game(db: Session, game_id: str) -> Game:
        # populate_existing so an instance cached earlier in the request is
        # overwritten with the locked row's current values.
        game = (
            db.query(Game)
            .filter(Game.id == game_id)
            .with_for_update()
            .populate_existing()
            .first()
        )
        if not game:
            raise GameNotFound()
        return game

    @staticmethod
    def _find_entry(db: Session, game_id: str, user_id: str) -> Optional[GameParticipant]:
        return (
            db.query(GameParticipant)
            .filter(GameParticipant.game_id == game_id, GameParticipant.user_id == user_id)
            .populate_existing()
            .first()
        )

    @staticmethod
    def _has_room(game: Game) -> bool:
        if not game.is_capped:
            return True
        return game.current_participants < game.max_participants

    @staticmethod
    def _apply_membership(
        game: Game,
        user_id: str,
        *,
        old_status: Optional[ParticipantStatus],
        new_status: Optional[ParticipantStatus],
    ) -> None:
        participant_ids = [uid for uid in (game.participant_ids or []) if uid != user_id]
        waitlist_ids = [uid for uid in (game.waitlist_ids or []) if uid != user_id]

        if new_status == ParticipantStatus.CONFIRMED:
            participant_ids.append(user_id)
        elif new_status == ParticipantStatus.WAITLIST:
            waitlist_ids.append(user_id)
        elif new_status in (ParticipantStatus.INVITED, ParticipantStatus.DECLINED, None):
            pass
        else:
            raise ValueError(f"Unhandled participant status: {new_status!r}")

        was_confirmed = old_status == ParticipantStatus.CONFIRMED
        is_confirmed = new_status == ParticipantStatus.CONFIRMED
        if is_confirmed and not was_confirmed:
            game.current_participants = (game.current_participants or 0) + 1
        elif was_confirmed and not is_confirmed:
            game.current_participants = max((game.current_participants or 0) - 1, 0)

        game.participant_ids = participant_ids
        game.waitlist_ids = waitlist_ids
        # Always touch the row so the version check serializes every entry change.
        game.updated_at = datetime.now(timezone.utc)


# Singleton instance
capacity_gate = CapacityGate()
