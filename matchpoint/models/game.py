# matchpoint/models/game.py
import uuid
from sqlalchemy import (
    Column,
    String,
    DateTime,
    Integer,
    JSON,
    Enum,
    CheckConstraint,
    func,
)
from sqlalchemy.orm import relationship

from matchpoint.constants.statuses import GameStatus
from matchpoint.db.base_class import Base


class Game(Base):
    """
    A scheduled game with an optional participant cap.

    `current_participants`, `participant_ids` and `waitlist_ids` mirror the
    game's registry entries and are only written by the capacity gate.
    `version` is bumped on every update so concurrent writers that read the
    same row cannot both commit.
    """
    __tablename__ = "games"

    id = Column(String, primary_key=True, default=lambda: f"gam_{uuid.uuid4().hex[:12]}")
    group_id = Column(String, nullable=True, index=True)
    title = Column(String(100), nullable=False)
    description = Column(String, nullable=True)
    sport = Column(String(50), nullable=True)
    location = Column(String, nullable=True)

    host_id = Column(String, nullable=False)
    created_by = Column(String, nullable=False)

    scheduled_time = Column(DateTime(timezone=True), nullable=False, index=True)
    end_time = Column(DateTime(timezone=True), nullable=True)
    status = Column(
        Enum(
            GameStatus,
            name="game_status_enum",
            native_enum=False,
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
        default=GameStatus.UPCOMING,
    )

    # Capacity
    max_participants = Column(Integer, nullable=True)
    min_participants = Column(Integer, nullable=False, default=0, server_default="0")
    current_participants = Column(Integer, nullable=False, default=0, server_default="0")
    participant_ids = Column(JSON, nullable=False, default=list)
    waitlist_ids = Column(JSON, nullable=False, default=list)

    version = Column(Integer, nullable=False)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    participants = relationship(
        "GameParticipant",
        back_populates="game",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __mapper_args__ = {"version_id_col": version}

    __table_args__ = (
        CheckConstraint("current_participants >= 0", name="check_current_participants_positive"),
        CheckConstraint(
            "max_participants IS NULL OR current_participants <= max_participants",
            name="check_participants_lte_max",
        ),
    )

    @property
    def is_capped(self) -> bool:
        return self.max_participants is not None
