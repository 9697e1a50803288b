# matchpoint/schemas/waitlist.py
from typing import Literal

from pydantic import BaseModel, Field


class WaitlistProcessResponse(BaseModel):
    message: str
    promoted_count: int = Field(..., serialization_alias="promotedCount")


class PriorityStatus(BaseModel):
    priority_score: float = Field(..., serialization_alias="priorityScore")
    estimated_position: int = Field(..., serialization_alias="estimatedPosition")
    total_waitlisted: int = Field(..., serialization_alias="totalWaitlisted")
    chance_of_promotion: Literal["high", "medium", "low"] = Field(
        ..., serialization_alias="chanceOfPromotion"
    )
