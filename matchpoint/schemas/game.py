# matchpoint/schemas/game.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from matchpoint.constants.statuses import GameStatus


class GameCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    sport: Optional[str] = Field(None, max_length=50)
    location: Optional[str] = None
    group_id: Optional[str] = Field(None, alias="groupId")
    scheduled_time: datetime = Field(..., alias="scheduledTime")
    end_time: Optional[datetime] = Field(None, alias="endTime")
    max_participants: Optional[int] = Field(None, ge=1, alias="maxParticipants")
    min_participants: int = Field(0, ge=0, alias="minParticipants")

    model_config = {"populate_by_name": True}

    @model_validator(mode="after")
    def check_bounds(self):
        if self.max_participants is not None and self.min_participants > self.max_participants:
            raise ValueError("minParticipants cannot exceed maxParticipants")
        if self.end_time is not None and self.end_time <= self.scheduled_time:
            raise ValueError("endTime must be after scheduledTime")
        return self


class GameStatusUpdate(BaseModel):
    status: GameStatus


class Game(BaseModel):
    id: str
    group_id: Optional[str] = Field(None, serialization_alias="groupId")
    title: str
    description: Optional[str] = None
    sport: Optional[str] = None
    location: Optional[str] = None
    host_id: str = Field(..., serialization_alias="hostId")
    scheduled_time: datetime = Field(..., serialization_alias="scheduledTime")
    end_time: Optional[datetime] = Field(None, serialization_alias="endTime")
    status: GameStatus
    max_participants: Optional[int] = Field(None, serialization_alias="maxParticipants")
    min_participants: int = Field(0, serialization_alias="minParticipants")
    current_participants: int = Field(0, serialization_alias="currentParticipants")
    participant_ids: list[str] = Field(default_factory=list, serialization_alias="participantIds")
    waitlist_ids: list[str] = Field(default_factory=list, serialization_alias="waitlistIds")

    model_config = {"from_attributes": True}
