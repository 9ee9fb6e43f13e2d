"""Installation model - OAuth credentials for one tenant location."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from cadence.models.base import Base


class Installation(Base):
    """A marketplace install of the app into one CRM location."""

    __tablename__ = "cadence_installations"

    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    location_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    company_id: Mapped[str | None] = mapped_column(String(64), nullable=True)

    access_token: Mapped[str] = mapped_column(Text, nullable=False)
    refresh_token: Mapped[str] = mapped_column(Text, nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    scopes: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
        doc="Space separated OAuth scopes",
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    __table_args__ = (
        Index("ix_installations_user_location", "user_id", "location_id", unique=True),
    )

    def __repr__(self) -> str:
        state = "active" if self.is_active else "inactive"
        return f"<Installation {self.location_id} ({state})>"
