"""ORM models for the relations the local user views are composed from."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PersonModel(Base):
    __tablename__ = "person"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    display_name: Mapped[str | None] = mapped_column(String(255))
    avatar: Mapped[str | None] = mapped_column(Text)
    banner: Mapped[str | None] = mapped_column(Text)
    bio: Mapped[str | None] = mapped_column(Text)
    actor_id: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    inbox_url: Mapped[str] = mapped_column(String(255), nullable=False)
    shared_inbox_url: Mapped[str | None] = mapped_column(String(255))
    matrix_user_id: Mapped[str | None] = mapped_column(Text)
    local: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    admin: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    bot_account: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    banned: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    ban_expires: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    deleted: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    published: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    last_refreshed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, nullable=False
    )
    public_key: Mapped[str | None] = mapped_column(Text)
    private_key: Mapped[str | None] = mapped_column(Text)


class LocalUserModel(Base):
    __tablename__ = "local_user"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    person_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("person.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    password_encrypted: Mapped[str] = mapped_column(Text, nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), unique=True)
    show_nsfw: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    theme: Mapped[str] = mapped_column(String(64), default="browser", nullable=False)
    default_sort_type: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    default_listing_type: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    lang: Mapped[str] = mapped_column(String(20), default="browser", nullable=False)
    show_avatars: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    show_scores: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    show_bot_accounts: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    show_read_posts: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    show_new_post_notifs: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    send_notifications_to_email: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    email_verified: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    accepted_application: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    validator_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, nullable=False)


class PersonAggregatesModel(Base):
    __tablename__ = "person_aggregates"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    person_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("person.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    post_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    post_score: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    comment_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    comment_score: Mapped[int] = mapped_column(Integer, default=0, nullable=False)


class LocalUserLanguageModel(Base):
    __tablename__ = "local_user_language"
    __table_args__ = (UniqueConstraint("local_user_id", "language", name="uq_local_user_language"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    local_user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("local_user.id", ondelete="CASCADE"), nullable=False, index=True
    )
    language: Mapped[str] = mapped_column(String(35), nullable=False)


__all__ = [
    "LocalUserLanguageModel",
    "LocalUserModel",
    "PersonAggregatesModel",
    "PersonModel",
]
