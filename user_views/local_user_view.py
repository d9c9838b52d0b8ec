"""Read models for a local user: the full view and the redacted settings view.

Every model is frozen. A view is a point-in-time snapshot of the rows it was
built from; callers look the user up again to observe later writes.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class LocalUserSettings(_Record):
    """Account fields a user may see and edit about themselves."""

    id: int
    person_id: int
    email: Optional[str]
    show_nsfw: bool
    theme: str
    default_sort_type: int
    default_listing_type: int
    lang: str
    show_avatars: bool
    show_scores: bool
    show_bot_accounts: bool
    show_read_posts: bool
    show_new_post_notifs: bool
    send_notifications_to_email: bool
    email_verified: bool
    accepted_application: bool
    validator_time: datetime


class LocalUser(LocalUserSettings):
    """Complete account row, including credentials."""

    password_encrypted: str


class PersonSafe(_Record):
    """Public profile fields."""

    id: int
    name: str
    display_name: Optional[str]
    avatar: Optional[str]
    banner: Optional[str]
    bio: Optional[str]
    actor_id: str
    inbox_url: str
    shared_inbox_url: Optional[str]
    matrix_user_id: Optional[str]
    local: bool
    admin: bool
    bot_account: bool
    banned: bool
    ban_expires: Optional[datetime]
    deleted: bool
    published: datetime
    updated: Optional[datetime]


class Person(PersonSafe):
    """Complete profile row, including federation keys."""

    last_refreshed_at: datetime
    public_key: Optional[str]
    private_key: Optional[str]


class PersonAggregates(_Record):
    id: int
    person_id: int
    post_count: int
    post_score: int
    comment_count: int
    comment_score: int


class LocalUserView(_Record):
    """Privileged view of a local user for internal callers."""

    local_user: LocalUser
    person: Person
    counts: PersonAggregates
    languages: Tuple[str, ...]


class LocalUserSettingsView(_Record):
    """View of a local user that omits credentials and private keys."""

    local_user: LocalUserSettings
    person: PersonSafe
    counts: PersonAggregates
    languages: Tuple[str, ...]


__all__ = [
    "LocalUser",
    "LocalUserSettings",
    "LocalUserSettingsView",
    "LocalUserView",
    "Person",
    "PersonAggregates",
    "PersonSafe",
]
