from pydantic import BaseModel
from datetime import date, datetime
from typing import Optional


class DeadlineSet(BaseModel):
    deadline: datetime


class DeadlineResponse(BaseModel):
    week_start: date
    mode: str
    deadline: Optional[datetime]
    is_open: bool
