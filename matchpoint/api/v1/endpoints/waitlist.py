# matchpoint/api/v1/endpoints/waitlist.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from matchpoint.api import deps
from matchpoint.core.exceptions import GameNotFound
from matchpoint.crud import crud_game
from matchpoint.db.session import get_db
from matchpoint.schemas.token import TokenPayload
from matchpoint.schemas.waitlist import PriorityStatus, WaitlistProcessResponse
from matchpoint.services.waitlist_promoter import waitlist_promoter
from matchpoint.utils.permissions import require_game_manager

router = APIRouter(tags=["Waitlist"])


@router.post("/games/{gameId}/waitlist/process", response_model=WaitlistProcessResponse)
def process_waitlist(
    gameId: str,
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    """
    Promote waitlisted players into any free slots, highest priority first.
    """
    game = crud_game.game.get(db, id=gameId)
    if not game:
        raise GameNotFound()
    require_game_manager(
        db, game, current_user.sub, "You don't have permission to process the waitlist for this game"
    )

    promoted_count = waitlist_promoter.process_waitlist(db, gameId)
    return WaitlistProcessResponse(
        message=f"{promoted_count} participants promoted from the waitlist",
        promoted_count=promoted_count,
    )


@router.get("/games/{gameId}/waitlist/status", response_model=PriorityStatus)
def get_priority_status(
    gameId: str,
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    """The caller's score, queue position and chance of promotion."""
    return PriorityStatus(
        **waitlist_promoter.get_user_priority_status(db, game_id=gameId, user_id=current_user.sub)
    )
