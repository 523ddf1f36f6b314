from typing import Optional
from datetime import datetime
from sqlalchemy import DateTime, ForeignKey, Integer, JSON, Text, Enum as SQLEnum, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from shiftboard.db.database import Base
from shiftboard.services.rules.types import SwapStatus


class SwapRequests(Base):
    __tablename__ = "swap_requests"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    requester_id: Mapped[int] = mapped_column(Integer, ForeignKey("profiles.id"), nullable=False, index=True)
    target_id: Mapped[int] = mapped_column(Integer, ForeignKey("profiles.id"), nullable=False, index=True)
    # {"week_start": "YYYY-MM-DD", "day_index": n, "shift_id": "sX", "note": ...}
    requester_shift: Mapped[dict] = mapped_column(JSON().with_variant(JSONB, "postgresql"), nullable=False)
    target_shift: Mapped[dict] = mapped_column(JSON().with_variant(JSONB, "postgresql"), nullable=False)
    note: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    response_note: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    status: Mapped[SwapStatus] = mapped_column(SQLEnum(SwapStatus, name="swap_status_enum"), nullable=False, default=SwapStatus.PENDING, index=True)
    last_actioned_by: Mapped[Optional[int]] = mapped_column(Integer, ForeignKey("profiles.id"), nullable=True)
    version: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    __mapper_args__ = {"version_id_col": version}
