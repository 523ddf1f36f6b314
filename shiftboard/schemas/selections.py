from pydantic import BaseModel, Field
from typing import Optional

from shiftboard.services.rules.types import CategoryCounts, IssueKind, ShiftSelection


class ShiftSelectionSchema(BaseModel):
    day_index: int = Field(ge=0, le=6)  # 0=Sunday
    shift_id: str = Field(min_length=1, max_length=50)
    note: Optional[str] = None

    def to_selection(self) -> ShiftSelection:
        return ShiftSelection(self.day_index, self.shift_id, self.note)


class IssueSchema(BaseModel):
    kind: IssueKind
    code: str
    params: dict = {}
    message: str


class CategoryCountsSchema(BaseModel):
    morning: int
    noon: int
    evening: int
    night: int
    rotation: int
    premium: int
    manager_only: int

    @classmethod
    def from_counts(cls, counts: CategoryCounts) -> "CategoryCountsSchema":
        return cls(**vars(counts))


class ValidationReport(BaseModel):
    valid: bool
    errors: list[IssueSchema]
    warnings: list[IssueSchema]
    counts: CategoryCountsSchema
