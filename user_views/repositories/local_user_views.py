"""Database-backed local user view repositories.

Both view shapes are read through :func:`compose_view_query`, so the full view
and the settings view always share one join topology:

* ``local_user`` INNER JOIN ``person``
* ``local_user`` LEFT OUTER JOIN ``local_user_language``
* ``person`` INNER JOIN ``person_aggregates``

Only the selected columns differ, and those come from the fields declared on
the target pydantic models.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, Iterable, Mapping, NoReturn, Type, TypeVar

from pydantic import BaseModel
from sqlalchemy import ColumnElement, Select, or_, select
from sqlalchemy.engine import Row
from sqlalchemy.orm import Session

from ..db.models import (
    LocalUserLanguageModel,
    LocalUserModel,
    PersonAggregatesModel,
    PersonModel,
)
from ..errors import LocalUserIntegrityError, LocalUserNotFoundError
from ..local_user_view import (
    LocalUser,
    LocalUserSettings,
    LocalUserSettingsView,
    LocalUserView,
    Person,
    PersonAggregates,
    PersonSafe,
)

ViewT = TypeVar("ViewT", bound=BaseModel)

LIKE_ESCAPE = "\\"
LANGUAGE_COLUMN = "language"


@dataclass(frozen=True)
class ViewProjection(Generic[ViewT]):
    """Which columns of ``local_user`` and ``person`` a view exposes."""

    view_type: Type[ViewT]
    local_user_type: Type[BaseModel]
    person_type: Type[BaseModel]

    def columns(self) -> list[ColumnElement[Any]]:
        return [
            *_labelled(LocalUserModel, self.local_user_type, "local_user"),
            *_labelled(PersonModel, self.person_type, "person"),
            *_labelled(PersonAggregatesModel, PersonAggregates, "counts"),
        ]

    def build(self, mapping: Mapping[str, Any], languages: Iterable[str]) -> ViewT:
        return self.view_type(
            local_user=_section(mapping, "local_user", self.local_user_type),
            person=_section(mapping, "person", self.person_type),
            counts=_section(mapping, "counts", PersonAggregates),
            languages=tuple(languages),
        )


FULL_PROJECTION: ViewProjection[LocalUserView] = ViewProjection(LocalUserView, LocalUser, Person)
SETTINGS_PROJECTION: ViewProjection[LocalUserSettingsView] = ViewProjection(
    LocalUserSettingsView, LocalUserSettings, PersonSafe
)


def _labelled(orm_model: type, record_type: Type[BaseModel], prefix: str) -> list[ColumnElement[Any]]:
    return [getattr(orm_model, name).label(f"{prefix}__{name}") for name in record_type.model_fields]


def _section(mapping: Mapping[str, Any], prefix: str, record_type: Type[BaseModel]) -> BaseModel:
    return record_type.model_validate({name: mapping[f"{prefix}__{name}"] for name in record_type.model_fields})


def _join_person(stmt: Select) -> Select:
    return stmt.join(PersonModel, LocalUserModel.person_id == PersonModel.id)


def _join_aggregates(stmt: Select) -> Select:
    return stmt.join(PersonAggregatesModel, PersonAggregatesModel.person_id == PersonModel.id)


def compose_view_query(projection: ViewProjection[Any], predicate: ColumnElement[bool]) -> Select:
    """Build the single statement that reads one local user's view rows.

    The anchor subquery applies the predicate across the inner joins and picks
    the lowest matching ``local_user.id``. The outer statement returns that
    account's rows, one per language preference (or one row with a NULL
    language when there are none).
    """
    anchor = (
        _join_aggregates(_join_person(select(LocalUserModel.id)))
        .where(predicate)
        .order_by(LocalUserModel.id.asc())
        .limit(1)
        .correlate(None)
        .scalar_subquery()
    )
    stmt = _join_person(
        select(*projection.columns(), LocalUserLanguageModel.language.label(LANGUAGE_COLUMN)).select_from(
            LocalUserModel
        )
    )
    stmt = stmt.outerjoin(LocalUserLanguageModel, LocalUserLanguageModel.local_user_id == LocalUserModel.id)
    return (
        _join_aggregates(stmt)
        .where(LocalUserModel.id == anchor)
        .order_by(LocalUserModel.id.asc(), LocalUserLanguageModel.id.asc())
    )


def coalesce_rows(projection: ViewProjection[ViewT], rows: Iterable[Row[Any]]) -> list[ViewT]:
    """Fold the language fan-out into one view per local user, in row order."""
    groups: dict[Any, tuple[Mapping[str, Any], list[str]]] = {}
    for row in rows:
        mapping = row._mapping
        _, languages = groups.setdefault(mapping["local_user__id"], (mapping, []))
        language = mapping[LANGUAGE_COLUMN]
        if language is not None:
            languages.append(language)
    return [projection.build(mapping, languages) for mapping, languages in groups.values()]


def _escape_like(value: str) -> str:
    return (
        value.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


class _ViewRepository(Generic[ViewT]):
    projection: ViewProjection[ViewT]

    def _fetch(self, session: Session, predicate: ColumnElement[bool], lookup: str, value: object) -> ViewT:
        rows = session.execute(compose_view_query(self.projection, predicate)).all()
        views = coalesce_rows(self.projection, rows)
        if not views:
            self._raise_missing(session, predicate, lookup, value)
        return views[0]

    def _raise_missing(self, session: Session, predicate: ColumnElement[bool], lookup: str, value: object) -> NoReturn:
        """Tell a missing account apart from one whose person lacks aggregates.

        Only reached when the view query returned no rows. This is a second
        statement, so a write committed between the two (an account or
        aggregates row appearing or vanishing) can misclassify the failure
        under read-committed isolation. Callers that need the two statements
        to agree should run them inside a repeatable-read transaction.
        """
        probe = _join_person(select(LocalUserModel.id)).where(predicate).limit(1)
        if session.execute(probe).first() is None:
            raise LocalUserNotFoundError(lookup, value)
        raise LocalUserIntegrityError(lookup, value)


class LocalUserViewRepository(_ViewRepository[LocalUserView]):
    """Composes the full :class:`LocalUserView` for privileged callers."""

    projection = FULL_PROJECTION

    def read(self, session: Session, local_user_id: int) -> LocalUserView:
        return self._fetch(session, LocalUserModel.id == local_user_id, "local_user_id", local_user_id)

    def read_person(self, session: Session, person_id: int) -> LocalUserView:
        return self._fetch(session, PersonModel.id == person_id, "person_id", person_id)

    def read_from_name(self, session: Session, name: str) -> LocalUserView:
        return self._fetch(session, PersonModel.name == name, "name", name)

    def find_by_email_or_name(self, session: Session, name_or_email: str) -> LocalUserView:
        """Match either field case-insensitively; wildcards in the input are literal.

        When several accounts match, the lowest ``local_user.id`` among those
        whose person has an aggregates row is returned. A lower-id match that
        lacks aggregates is skipped rather than reported; the integrity error
        is raised only when no matching account has aggregates.
        """
        pattern = _escape_like(name_or_email)
        predicate = or_(
            PersonModel.name.ilike(pattern, escape=LIKE_ESCAPE),
            LocalUserModel.email.ilike(pattern, escape=LIKE_ESCAPE),
        )
        return self._fetch(session, predicate, "name_or_email", name_or_email)

    def find_by_email(self, session: Session, email: str) -> LocalUserView:
        return self._fetch(session, LocalUserModel.email == email, "email", email)


class LocalUserSettingsViewRepository(_ViewRepository[LocalUserSettingsView]):
    """Reads the redacted :class:`LocalUserSettingsView`."""

    projection = SETTINGS_PROJECTION

    def read(self, session: Session, local_user_id: int) -> LocalUserSettingsView:
        return self._fetch(session, LocalUserModel.id == local_user_id, "local_user_id", local_user_id)


local_user_views = LocalUserViewRepository()
local_user_settings_views = LocalUserSettingsViewRepository()

__all__ = [
    "FULL_PROJECTION",
    "LocalUserSettingsViewRepository",
    "LocalUserViewRepository",
    "SETTINGS_PROJECTION",
    "ViewProjection",
    "coalesce_rows",
    "compose_view_query",
    "local_user_settings_views",
    "local_user_views",
]
