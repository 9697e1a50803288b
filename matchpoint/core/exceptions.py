# matchpoint/core/exceptions.py
"""
Domain errors raised by the registration services.

Each error carries the HTTP status the API layer answers with, so services
stay free of FastAPI imports and the mapping lives in one place.
"""
from fastapi import status


class MatchPointError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Internal error"

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class Unauthorized(MatchPointError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Could not validate credentials"


class Forbidden(MatchPointError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Not authorized"


class NotFound(MatchPointError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class GameNotFound(NotFound):
    default_detail = "Game not found"


class EntryNotFound(NotFound):
    default_detail = "Participant not found"


class AlreadyRegistered(MatchPointError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "User is already a participant in this game"


class GameFull(MatchPointError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "This game has reached its maximum number of participants"


class GameClosed(MatchPointError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "This game is no longer accepting participants"


class StaleEntry(MatchPointError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Participant status changed concurrently, please retry"


class InvalidTransition(MatchPointError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid status transition"


class TransientStoreError(MatchPointError):
    default_detail = "The database is busy, please retry"
