# matchpoint/models/group_member.py
import uuid
from sqlalchemy import Column, String, DateTime, Enum, UniqueConstraint, func

from matchpoint.constants.statuses import GroupRole
from matchpoint.db.base_class import Base


class GroupMember(Base):
    __tablename__ = "group_members"

    id = Column(String, primary_key=True, default=lambda: f"gmb_{uuid.uuid4().hex[:12]}")
    group_id = Column(String, nullable=False, index=True)
    user_id = Column(String, nullable=False, index=True)
    role = Column(
        Enum(
            GroupRole,
            name="group_role_enum",
            native_enum=False,
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
        default=GroupRole.MEMBER,
    )
    joined_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        UniqueConstraint("group_id", "user_id", name="unique_group_member_user"),
    )
