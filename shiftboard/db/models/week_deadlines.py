from sqlalchemy import Date, DateTime, ForeignKey, Integer, func
from datetime import date, datetime
from sqlalchemy.orm import Mapped, mapped_column
from typing import Optional

from shiftboard.db.database import Base


class WeekDeadlines(Base):
    __tablename__ = "week_deadlines"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    week_start: Mapped[date] = mapped_column(Date, nullable=False, unique=True, index=True)
    deadline: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    created_by: Mapped[Optional[int]] = mapped_column(Integer, ForeignKey("profiles.id"), nullable=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
