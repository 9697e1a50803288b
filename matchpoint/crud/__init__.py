# matchpoint/crud/__init__.py

from .crud_game import game
from .crud_game_participant import game_participant
from .crud_group_member import group_member
