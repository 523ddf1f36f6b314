from pydantic import BaseModel
from datetime import date, datetime
from typing import Optional

from shiftboard.schemas.selections import ShiftSelectionSchema
from shiftboard.services.rules.types import RequestStatus


class WeekRequestSubmit(BaseModel):
    selections: list[ShiftSelectionSchema]


class WeekRequestReview(BaseModel):
    manager_note: Optional[str] = None
    expected_version: Optional[int] = None  # compare-and-swap token from the last read
    force: bool = False  # approve even if the selections fail validation


class WeekRequestResponse(BaseModel):
    id: int
    user_id: int
    user_name: Optional[str] = None
    week_start: date
    selections: list[ShiftSelectionSchema]
    status: RequestStatus
    manager_note: Optional[str]
    reviewed_by_user_id: Optional[int]
    version: int
    submitted_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
