# matchpoint/api/v1/endpoints/participants.py
import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from matchpoint.api import deps
from matchpoint.constants.statuses import ParticipantStatus
from matchpoint.core.exceptions import Forbidden, GameNotFound
from matchpoint.crud import crud_game, crud_game_participant
from matchpoint.db.session import get_db
from matchpoint.models.game import Game
from matchpoint.schemas.participant import (
    Participant,
    ParticipantCreate,
    ParticipantList,
    ParticipantMutationResponse,
    ParticipantStatusUpdate,
)
from matchpoint.schemas.token import TokenPayload
from matchpoint.services.waitlist_promoter import waitlist_promoter
from matchpoint.utils.permissions import require_game_manager, require_group_member

router = APIRouter(tags=["Participants"])
logger = logging.getLogger(__name__)


def _get_game_or_404(db: Session, game_id: str) -> Game:
    game = crud_game.game.get(db, id=game_id)
    if not game:
        raise GameNotFound()
    return game


def _promote_after_release(db: Session, game_id: str, old_status: ParticipantStatus) -> int:
    """A freed confirmed slot is offered to the waitlist straight away."""
    if old_status != ParticipantStatus.CONFIRMED:
        return 0
    return waitlist_promoter.process_waitlist(db, game_id)


@router.get("/games/{gameId}/participants", response_model=ParticipantList)
def list_participants(
    gameId: str,
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    """
    Participants grouped by status, earliest registration first in each group.
    """
    game = _get_game_or_404(db, gameId)
    require_group_member(
        db,
        game.group_id,
        current_user.sub,
        "You do not have permission to view participants for this game",
    )

    entries = crud_game_participant.game_participant.list_by_game(db, game_id=gameId)
    return ParticipantList(
        participants=[Participant.model_validate(e) for e in entries],
        confirmed=sum(1 for e in entries if e.status == ParticipantStatus.CONFIRMED),
        waitlisted=sum(1 for e in entries if e.status == ParticipantStatus.WAITLIST),
    )


@router.post(
    "/games/{gameId}/participants",
    response_model=Participant,
    status_code=status.HTTP_201_CREATED,
)
def add_participant(
    gameId: str,
    participant_in: ParticipantCreate,
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    """
    Register for a game, or add another player as a game manager.

    **Business Logic**:
    1. Players joining themselves are confirmed while there is room and
       waitlisted once the game is full.
    2. Managers adding someone else may ask for an explicit status; asking
       for Confirmed on a full game is rejected.

    **Errors**:
    - 403: Not a group member, or adding someone else without manage rights
    - 404: Game not found
    - 409: Already registered, game full, or game no longer open
    """
    game = _get_game_or_404(db, gameId)
    target_user_id = participant_in.user_id or current_user.sub
    adding_other = target_user_id != current_user.sub

    if adding_other:
        require_game_manager(
            db, game, current_user.sub, "You do not have permission to add participants to this game"
        )
    require_group_member(
        db,
        game.group_id,
        current_user.sub,
        "You must be a member of the group to register for games",
    )

    registry = crud_game_participant.game_participant
    if adding_other and participant_in.status is not None:
        return registry.add_entry(
            db,
            game_id=gameId,
            user_id=target_user_id,
            initial_status=participant_in.status,
            display_name=participant_in.display_name,
        )
    return registry.join(
        db, game_id=gameId, user_id=target_user_id, display_name=participant_in.display_name
    )


@router.put("/games/{gameId}/participants", response_model=ParticipantMutationResponse)
def update_participant_status(
    gameId: str,
    update_in: ParticipantStatusUpdate,
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    """
    Change a participant's status. Freeing a confirmed slot promotes from the
    waitlist in the same request.
    """
    game = _get_game_or_404(db, gameId)
    registry = crud_game_participant.game_participant

    if update_in.participant_id != current_user.sub:
        require_game_manager(
            db, game, current_user.sub, "You do not have permission to update participant status"
        )
    elif update_in.status == ParticipantStatus.CONFIRMED:
        entry = registry.get_entry(db, game_id=gameId, user_id=current_user.sub)
        if entry is not None and entry.status == ParticipantStatus.WAITLIST:
            raise Forbidden("Waitlisted players are promoted automatically when a spot opens")

    old_status = registry.set_status(
        db, game_id=gameId, user_id=update_in.participant_id, new_status=update_in.status
    )
    promoted = _promote_after_release(db, gameId, old_status) if update_in.status != old_status else 0

    return ParticipantMutationResponse(
        message="Participant status updated successfully", promoted_count=promoted
    )


@router.delete("/games/{gameId}/participants", response_model=ParticipantMutationResponse)
def remove_participant(
    gameId: str,
    participantId: str = Query(...),
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    """
    Remove a participant. Removing a confirmed player promotes from the
    waitlist in the same request.
    """
    game = _get_game_or_404(db, gameId)
    if participantId != current_user.sub:
        require_game_manager(
            db, game, current_user.sub, "You do not have permission to remove participants from this game"
        )

    old_status = crud_game_participant.game_participant.remove_entry(
        db, game_id=gameId, user_id=participantId
    )
    promoted = _promote_after_release(db, gameId, old_status)

    return ParticipantMutationResponse(
        message="Participant removed successfully", promoted_count=promoted
    )
