from pydantic import BaseModel

from shiftboard.schemas.selections import ShiftSelectionSchema
from shiftboard.services.rules.types import Shift, ShiftCategory, ShiftType


class ShiftResponse(BaseModel):
    id: str
    label: str
    time_range: str
    type: ShiftType
    category: ShiftCategory
    days: list[int]
    employee_selectable: bool

    @classmethod
    def from_shift(cls, shift: Shift) -> "ShiftResponse":
        return cls(
            id=shift.id,
            label=shift.label,
            time_range=shift.time_range,
            type=shift.type,
            category=shift.category,
            days=sorted(shift.days),
            employee_selectable=shift.employee_selectable,
        )


class ValidateSelectionsRequest(BaseModel):
    selections: list[ShiftSelectionSchema]
