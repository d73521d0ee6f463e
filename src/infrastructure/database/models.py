"""SQLAlchemy ORM models."""

from sqlalchemy import (
    BigInteger,
    Boolean,
    CheckConstraint,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class UserProfileModel(Base):
    """User profile model, one row per identity (``users/{uid}``)."""

    __tablename__ = "users"

    user_id: Mapped[str] = mapped_column(String(128), primary_key=True)
    display_name: Mapped[str] = mapped_column(String(100), nullable=False)
    birthdate: Mapped[str] = mapped_column(String(32), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    profile_complete: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    # Epoch milliseconds, assigned by the store on first write
    joined_date: Mapped[int | None] = mapped_column(BigInteger)

    # Relationships
    activities: Mapped[list["ActivityModel"]] = relationship(
        "ActivityModel",
        back_populates="user",
        cascade="all, delete-orphan",
    )


class ActivityModel(Base):
    """Activity model (``activities/{uid}/{id}``). Rows are never updated."""

    __tablename__ = "activities"
    __table_args__ = (
        CheckConstraint("duration > 0", name="ck_activities_duration_positive"),
        Index("ix_activities_user_timestamp", "user_id", "timestamp"),
    )

    user_id: Mapped[str] = mapped_column(
        String(128),
        ForeignKey("users.user_id", ondelete="CASCADE"),
        primary_key=True,
    )
    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    duration: Mapped[int] = mapped_column(Integer, nullable=False)
    timestamp: Mapped[int] = mapped_column(BigInteger, nullable=False)
    date: Mapped[str] = mapped_column(String(32), nullable=False)
    time: Mapped[str] = mapped_column(String(16), nullable=False)

    # Relationships
    user: Mapped["UserProfileModel"] = relationship(
        "UserProfileModel",
        back_populates="activities",
    )
