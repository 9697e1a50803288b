# matchpoint/schemas/participant.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from matchpoint.constants.statuses import ParticipantStatus, ParticipantRole


class ParticipantCreate(BaseModel):
    # Omitted user_id means the caller joins themselves
    user_id: Optional[str] = Field(None, alias="userId")
    # Only honoured for managers adding someone else
    status: Optional[ParticipantStatus] = None
    display_name: Optional[str] = Field(None, alias="displayName")

    model_config = {"populate_by_name": True}


class ParticipantStatusUpdate(BaseModel):
    participant_id: str = Field(..., alias="participantId")
    status: ParticipantStatus

    model_config = {"populate_by_name": True}


class Participant(BaseModel):
    id: str
    game_id: str = Field(..., serialization_alias="gameId")
    user_id: str = Field(..., serialization_alias="userId")
    status: ParticipantStatus
    role: ParticipantRole
    is_guest: bool = Field(False, serialization_alias="isGuest")
    display_name: Optional[str] = Field(None, serialization_alias="displayName")
    joined_at: datetime = Field(..., serialization_alias="joinedAt")
    registered_at: datetime = Field(..., serialization_alias="registeredAt")

    model_config = {"from_attributes": True}


class ParticipantList(BaseModel):
    participants: list[Participant]
    confirmed: int
    waitlisted: int


class ParticipantMutationResponse(BaseModel):
    message: str
    promoted_count: int = Field(0, serialization_alias="promotedCount")
