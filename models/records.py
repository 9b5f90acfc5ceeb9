"""SQLAlchemy models for accounts and their settings documents."""

from datetime import UTC, datetime
from uuid import uuid4

from sqlalchemy import DateTime, Float, ForeignKey, Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from models.schemas import GeneralSettings, PastTrailSettings, SettingsDocument


def new_id() -> str:
    return str(uuid4())


def utcnow() -> datetime:
    return datetime.now(UTC)


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


class Account(Base):
    """Registered username/password identity."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    username: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password: Mapped[str] = mapped_column(String(255), nullable=False)

    def __repr__(self) -> str:
        return f"Account(id={self.id!r}, username={self.username!r})"


class AccountSettings(Base):
    """Per-account display preferences. At most one row per account."""

    __tablename__ = "settings"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id"), unique=True, nullable=False
    )

    # general
    past_data_hours: Mapped[int] = mapped_column(Integer, default=24, nullable=False)
    data_refresh: Mapped[int] = mapped_column(Integer, default=5, nullable=False)
    timezone: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)

    # pastTrail
    trail_hours: Mapped[int] = mapped_column(Integer, default=24, nullable=False)
    plot_size: Mapped[str] = mapped_column(String(50), default="Small", nullable=False)

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )

    def to_document(self) -> SettingsDocument:
        updated_at = self.updated_at
        if updated_at.tzinfo is None:
            # SQLite hands back naive values; they were written as UTC.
            updated_at = updated_at.replace(tzinfo=UTC)
        return SettingsDocument(
            id=self.id,
            user_id=self.user_id,
            general=GeneralSettings(
                past_data_hours=self.past_data_hours,
                data_refresh=self.data_refresh,
                timezone=self.timezone,
            ),
            past_trail=PastTrailSettings(hours=self.trail_hours, plot_size=self.plot_size),
            updated_at=updated_at,
        )
