"""Tests for the redacted settings view."""

from __future__ import annotations

import pytest

from user_views.errors import LocalUserIntegrityError, LocalUserNotFoundError
from user_views.local_user_view import LocalUserSettings, PersonSafe
from user_views.repositories.local_user_views import local_user_settings_views, local_user_views

PRIVATE_LOCAL_USER_FIELDS = {"password_encrypted"}
PRIVATE_PERSON_FIELDS = {"private_key", "public_key", "last_refreshed_at"}


def test_settings_view_exposes_only_redacted_fields(session, make_user) -> None:
    user = make_user("alice", email="alice@example.test", languages=["en", "de"])

    view = local_user_settings_views.read(session, user.id)
    payload = view.model_dump(mode="json")

    assert type(view.local_user) is LocalUserSettings
    assert type(view.person) is PersonSafe
    assert set(payload["local_user"]) == set(LocalUserSettings.model_fields)
    assert set(payload["person"]) == set(PersonSafe.model_fields)
    assert not PRIVATE_LOCAL_USER_FIELDS & set(payload["local_user"])
    assert not PRIVATE_PERSON_FIELDS & set(payload["person"])
    assert "hash-alice" not in str(payload)
    assert "PRIVATE" not in str(payload)


def test_full_view_carries_fields_the_settings_view_drops(session, make_user) -> None:
    user = make_user("bob")

    full = local_user_views.read(session, user.id).model_dump()

    assert PRIVATE_LOCAL_USER_FIELDS <= set(full["local_user"])
    assert PRIVATE_PERSON_FIELDS <= set(full["person"])


def test_settings_view_shares_content_with_full_view(session, make_user) -> None:
    user = make_user("carol", email="carol@example.test", languages=["en", "ja", "ko"], post_count=3)

    full = local_user_views.read(session, user.id)
    settings = local_user_settings_views.read(session, user.id)

    assert settings.languages == full.languages == ("en", "ja", "ko")
    assert settings.counts == full.counts
    assert settings.local_user.model_dump() == full.local_user.model_dump(exclude=PRIVATE_LOCAL_USER_FIELDS)
    assert settings.person.model_dump() == full.person.model_dump(exclude=PRIVATE_PERSON_FIELDS)


def test_settings_view_without_languages(session, make_user) -> None:
    user = make_user("dave")

    assert local_user_settings_views.read(session, user.id).languages == ()


def test_settings_view_failures_match_full_view(session, make_user) -> None:
    broken = make_user("erin", with_aggregates=False)

    with pytest.raises(LocalUserIntegrityError):
        local_user_settings_views.read(session, broken.id)
    with pytest.raises(LocalUserNotFoundError):
        local_user_settings_views.read(session, broken.id + 100)
