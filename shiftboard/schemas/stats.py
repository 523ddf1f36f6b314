from pydantic import BaseModel
from datetime import date
from typing import Optional

from shiftboard.schemas.selections import CategoryCountsSchema


class UserStatsResponse(BaseModel):
    user_id: int
    user_name: Optional[str]
    counts: CategoryCountsSchema
    total: int


class StatsResponse(BaseModel):
    since: date
    users: list[UserStatsResponse]
