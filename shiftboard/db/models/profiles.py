from sqlalchemy import Boolean, String, Integer, DateTime, func, Enum as SQLEnum
from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column

from shiftboard.db.database import Base
from shiftboard.services.rules.types import Role


class Profiles(Base):
    __tablename__ = "profiles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)  # same id as the linked credential
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    role: Mapped[Role] = mapped_column(SQLEnum(Role, name="role_enum"), nullable=False, default=Role.EMPLOYEE)
    must_change_password: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
