from typing import Optional
from datetime import date, datetime
from sqlalchemy import Date, DateTime, Enum as SQLEnum, ForeignKey, Integer, JSON, Text, UniqueConstraint, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from shiftboard.db.database import Base
from shiftboard.services.rules.types import RequestStatus


class WeekRequests(Base):
    __tablename__ = "week_requests"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("profiles.id"), nullable=False, index=True)
    week_start: Mapped[date] = mapped_column(Date, nullable=False, index=True)  # Sunday
    selections: Mapped[list] = mapped_column(JSON().with_variant(JSONB, "postgresql"), nullable=False, default=list)
    status: Mapped[RequestStatus] = mapped_column(SQLEnum(RequestStatus, name="week_request_status_enum"), nullable=False, default=RequestStatus.PENDING, index=True)
    manager_note: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    reviewed_by_user_id: Mapped[Optional[int]] = mapped_column(Integer, ForeignKey("profiles.id"), nullable=True)
    version: Mapped[int] = mapped_column(Integer, nullable=False)
    submitted_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", "week_start", name="uq_week_requests_user_week"),
    )
    __mapper_args__ = {"version_id_col": version}
