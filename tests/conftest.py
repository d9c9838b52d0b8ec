"""Shared fixtures: a throwaway SQLite database and a local user factory."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Iterable, Iterator, Optional

import pytest
from sqlalchemy.orm import Session

from user_views.config import get_settings
from user_views.db import Base, dispose_engine, get_engine, session_scope
from user_views.db.models import (
    LocalUserLanguageModel,
    LocalUserModel,
    PersonAggregatesModel,
    PersonModel,
)


@pytest.fixture()
def session(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Session]:
    monkeypatch.setenv("USER_VIEWS_DATABASE_URL", f"sqlite:///{tmp_path / 'views.db'}")
    get_settings.cache_clear()
    dispose_engine()
    engine = get_engine()
    Base.metadata.create_all(engine)
    try:
        with session_scope(commit=False) as db_session:
            yield db_session
    finally:
        dispose_engine()
        get_settings.cache_clear()


UserFactory = Callable[..., LocalUserModel]


@pytest.fixture()
def make_user(session: Session) -> UserFactory:
    def _make(
        name: str,
        *,
        email: Optional[str] = None,
        languages: Iterable[str] = (),
        with_aggregates: bool = True,
        post_count: int = 0,
    ) -> LocalUserModel:
        person = PersonModel(
            name=name,
            display_name=name.title(),
            actor_id=f"https://example.test/u/{name}",
            inbox_url=f"https://example.test/u/{name}/inbox",
            public_key=f"-----PUBLIC {name}-----",
            private_key=f"-----PRIVATE {name}-----",
        )
        session.add(person)
        session.flush()
        if with_aggregates:
            session.add(PersonAggregatesModel(person_id=person.id, post_count=post_count, comment_count=1))
        local_user = LocalUserModel(
            person_id=person.id,
            password_encrypted=f"hash-{name}",
            email=email,
        )
        session.add(local_user)
        session.flush()
        for language in languages:
            session.add(LocalUserLanguageModel(local_user_id=local_user.id, language=language))
        session.flush()
        return local_user

    return _make
