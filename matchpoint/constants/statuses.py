# matchpoint/constants/statuses.py
"""
Status values for games and game participants.

Stored by value, so the strings here are what the database and the API see.
"""
import enum


class GameStatus(str, enum.Enum):
    UPCOMING = "Upcoming"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"
    CANCELED = "Canceled"

    @property
    def is_open(self) -> bool:
        """Games that still accept joins and waitlist promotions."""
        return self in (GameStatus.UPCOMING, GameStatus.IN_PROGRESS)


class ParticipantStatus(str, enum.Enum):
    CONFIRMED = "Confirmed"
    WAITLIST = "Waitlist"
    INVITED = "Invited"
    DECLINED = "Declined"


class ParticipantRole(str, enum.Enum):
    HOST = "host"
    PLAYER = "player"
    ORGANIZER = "organizer"


class GroupRole(str, enum.Enum):
    OWNER = "owner"
    ADMIN = "admin"
    MEMBER = "member"


# Display order for participant lists
PARTICIPANT_STATUS_ORDER = (
    ParticipantStatus.CONFIRMED,
    ParticipantStatus.WAITLIST,
    ParticipantStatus.INVITED,
    ParticipantStatus.DECLINED,
)
