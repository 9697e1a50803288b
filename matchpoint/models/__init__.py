# matchpoint/models/__init__.py
from .game import Game
from .game_participant import GameParticipant
from .group_member import GroupMember
