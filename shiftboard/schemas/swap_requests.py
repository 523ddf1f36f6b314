from pydantic import BaseModel
from datetime import date, datetime
from typing import Optional

from shiftboard.schemas.selections import ShiftSelectionSchema
from shiftboard.services.rules.types import SwapStatus


class SwapShiftSchema(ShiftSelectionSchema):
    week_start: date


class SwapRequestCreate(BaseModel):
    target_id: int
    requester_shift: SwapShiftSchema
    target_shift: SwapShiftSchema
    note: Optional[str] = None


class SwapResponseAction(BaseModel):
    accept: bool
    note: Optional[str] = None
    expected_version: Optional[int] = None


class SwapFinalizeAction(BaseModel):
    approve: bool
    note: Optional[str] = None
    expected_version: Optional[int] = None


class SwapRequestResponse(BaseModel):
    id: int
    requester_id: int
    target_id: int
    requester_shift: SwapShiftSchema
    target_shift: SwapShiftSchema
    note: Optional[str]
    response_note: Optional[str]
    status: SwapStatus
    last_actioned_by: Optional[int]
    version: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
