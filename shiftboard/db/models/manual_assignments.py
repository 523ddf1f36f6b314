from sqlalchemy import Date, Integer, DateTime, ForeignKey, JSON, UniqueConstraint, func
from datetime import date, datetime
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column
from typing import Optional

from shiftboard.db.database import Base


class ManualAssignments(Base):
    """Hand-built roster row for one user in one week. Last write wins, no history."""
    __tablename__ = "manual_assignments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    week_start: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("profiles.id"), nullable=False, index=True)
    selections: Mapped[list] = mapped_column(JSON().with_variant(JSONB, "postgresql"), nullable=False, default=list)
    updated_by_user_id: Mapped[Optional[int]] = mapped_column(Integer, ForeignKey("profiles.id"), nullable=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    __table_args__ = (
        UniqueConstraint("week_start", "user_id", name="uq_manual_assignments_week_user"),
    )
