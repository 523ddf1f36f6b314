from sqlalchemy import String, Integer, DateTime, func
from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column

from shiftboard.db.database import Base


class Credentials(Base):
    """Login credential. Written separately from the profile, never in the same transaction."""
    __tablename__ = "credentials"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
