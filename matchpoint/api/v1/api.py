# matchpoint/api/v1/api.py

from fastapi import APIRouter
from matchpoint.api.v1.endpoints import games, health, participants, waitlist

# Main router for the v1 API.
api_router = APIRouter()

api_router.include_router(health.router)
api_router.include_router(games.router)
api_router.include_router(participants.router)
api_router.include_router(waitlist.router)
