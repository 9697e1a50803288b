# matchpoint/db/base.py
# Import every model so Base.metadata is complete for create_all and Alembic.

from matchpoint.db.base_class import Base  # noqa: F401
from matchpoint.models.game import Game  # noqa: F401
from matchpoint.models.game_participant import GameParticipant  # noqa: F401
from matchpoint.models.group_member import GroupMember  # noqa: F401
