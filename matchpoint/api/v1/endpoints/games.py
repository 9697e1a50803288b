# matchpoint/api/v1/endpoints/games.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from matchpoint.api import deps
from matchpoint.core.exceptions import GameNotFound
from matchpoint.crud import crud_game
from matchpoint.db.session import get_db
from matchpoint.schemas.game import Game, GameCreate, GameStatusUpdate
from matchpoint.schemas.token import TokenPayload
from matchpoint.services import game_lifecycle
from matchpoint.utils.permissions import require_game_manager, require_group_member

router = APIRouter(tags=["Games"])


@router.post("/games", response_model=Game, status_code=status.HTTP_201_CREATED)
def create_game(
    game_in: GameCreate,
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    """
    Schedule a new game hosted by the caller.

    Games created inside a group require the caller to be a member of it.
    """
    require_group_member(
        db,
        game_in.group_id,
        current_user.sub,
        "You must be a member of the group to create games",
    )
    return crud_game.game.create_with_host(db, obj_in=game_in, host_id=current_user.sub)


@router.get("/games/{gameId}", response_model=Game)
def get_game(
    gameId: str,
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    game = crud_game.game.get(db, id=gameId)
    if not game:
        raise GameNotFound()
    return game


@router.patch("/games/{gameId}/status", response_model=Game)
def update_game_status(
    gameId: str,
    status_in: GameStatusUpdate,
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    """
    Move a game through its lifecycle.

    **Errors**:
    - 400: Transition not allowed from the current status
    - 403: Caller cannot manage this game
    - 404: Game not found
    """
    game = crud_game.game.get(db, id=gameId)
    if not game:
        raise GameNotFound()
    require_game_manager(
        db, game, current_user.sub, "You do not have permission to change this game's status"
    )
    return game_lifecycle.transition_game(db, game_id=gameId, new_status=status_in.status)
