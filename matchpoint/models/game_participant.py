# matchpoint/models/game_participant.py
import uuid
from sqlalchemy import (
    Column,
    String,
    ForeignKey,
    DateTime,
    Boolean,
    Enum,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from matchpoint.constants.statuses import ParticipantStatus, ParticipantRole
from matchpoint.db.base_class import Base


class GameParticipant(Base):
    """
    One registry entry per (game, user).

    Features:
    - Status tracking (Confirmed, Waitlist, Invited, Declined)
    - joined_at / registered_at fixed at creation; registered_at orders the
      waitlist when priority scores tie
    """
    __tablename__ = "game_participants"

    id = Column(String, primary_key=True, default=lambda: f"gpt_{uuid.uuid4().hex[:12]}")
    game_id = Column(String, ForeignKey("games.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String, nullable=False, index=True)  # No FK - users live in the identity provider

    status = Column(
        Enum(
            ParticipantStatus,
            name="participant_status_enum",
            native_enum=False,
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
    )
    role = Column(
        Enum(
            ParticipantRole,
            name="participant_role_enum",
            native_enum=False,
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
        default=ParticipantRole.PLAYER,
    )
    is_guest = Column(Boolean, nullable=False, default=False)
    display_name = Column(String, nullable=True)

    joined_at = Column(DateTime(timezone=True), nullable=False)
    registered_at = Column(DateTime(timezone=True), nullable=False, index=True)

    game = relationship("Game", back_populates="participants")

    __table_args__ = (
        UniqueConstraint("game_id", "user_id", name="unique_game_participant_user"),
    )
