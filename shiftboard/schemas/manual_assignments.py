from pydantic import BaseModel, Field
from datetime import date


class CellAssignment(BaseModel):
    day_index: int = Field(ge=0, le=6)
    shift_id: str = Field(min_length=1, max_length=50)
    user_ids: list[int]


class CellChange(BaseModel):
    day_index: int = Field(ge=0, le=6)
    shift_id: str = Field(min_length=1, max_length=50)
    user_id: int


class ScheduleGridUpdate(BaseModel):
    cells: list[CellAssignment]


class ScheduleGridResponse(BaseModel):
    week_start: date
    cells: list[CellAssignment]


class SaveReportResponse(BaseModel):
    week_start: date
    saved: list[int]
    failed: list[int]
    complete: bool
    cells: list[CellAssignment]
