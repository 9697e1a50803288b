# matchpoint/crud/crud_group_member.py
from typing import Optional

from sqlalchemy import and_
from sqlalchemy.orm import Session

from matchpoint.constants.statuses import GroupRole
from matchpoint.models.group_member import GroupMember


class CRUDGroupMember:
    """Read/write access to group memberships used for authorization."""

    def get_membership(self, db: Session, *, group_id: str, user_id: str) -> Optional[GroupMember]:
        return (
            db.query(GroupMember)
            .filter(and_(GroupMember.group_id == group_id, GroupMember.user_id == user_id))
            .first()
        )

    def add_member(
        self, db: Session, *, group_id: str, user_id: str, role: GroupRole = GroupRole.MEMBER
    ) -> GroupMember:
        member = GroupMember(group_id=group_id, user_id=user_id, role=role)
        db.add(member)
        db.commit()
        db.refresh(member)
        return member


group_member = CRUDGroupMember()
