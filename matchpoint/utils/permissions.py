# matchpoint/utils/permissions.py
"""
Authorization checks against group membership.
"""
from typing import Optional

from sqlalchemy.orm import Session

from matchpoint.constants.statuses import GroupRole
from matchpoint.core.exceptions import Forbidden
from matchpoint.crud.crud_group_member import group_member
from matchpoint.models.game import Game

MANAGER_ROLES = {GroupRole.OWNER, GroupRole.ADMIN}


def is_group_member(db: Session, user_id: str, group_id: Optional[str]) -> bool:
    # Games without a group are open to everyone
    if not group_id:
        return True
    return group_member.get_membership(db, group_id=group_id, user_id=user_id) is not None


def can_manage_game(db: Session, group_id: Optional[str], user_id: str) -> bool:
    """Owners and admins of the owning group may manage its games."""
    if not group_id:
        return False
    membership = group_member.get_membership(db, group_id=group_id, user_id=user_id)
    return membership is not None and membership.role in MANAGER_ROLES


def require_game_manager(db: Session, game: Game, user_id: str, detail: str) -> None:
    """The game's host always counts as a manager."""
    if game.host_id == user_id:
        return
    if not can_manage_game(db, game.group_id, user_id):
        raise Forbidden(detail)


def require_group_member(db: Session, group_id: Optional[str], user_id: str, detail: str) -> None:
    if not is_group_member(db, user_id, group_id):
        raise Forbidden(detail)
