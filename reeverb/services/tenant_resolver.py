"""Mapping of external (public) identifiers to internal records."""

from __future__ import annotations

import uuid
from typing import Literal, Optional, Union

from reeverb.core.errors import NotFoundError, UnauthenticatedError
from reeverb.core.tokens import Subject
from reeverb.db.models import Project, Tag, Testimonial, User
from reeverb.repositories.sql_repository import SQLRepository

EntityKind = Literal["project", "testimonial", "tag"]
Record = Union[Project, Testimonial, Tag]


def parse_external_id(value: str | uuid.UUID | None) -> Optional[uuid.UUID]:
    """Return the UUID behind a public identifier, or None when malformed."""
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value or "").strip())
    except ValueError:
        return None


class TenantResolver:
    """
    Resolves callers and path entities.

    Resolving only proves existence; authorization is OwnershipGuard's job.
    """

    def __init__(self, repository: SQLRepository) -> None:
        self.repository = repository
        self._lookups = {
            "project": (repository.get_project_by_pid, "project not found"),
            "testimonial": (repository.get_testimonial_by_pid, "testimonial not found"),
            "tag": (repository.get_tag_by_pid, "tag not found"),
        }

    def resolve_caller(self, subject: Subject) -> User:
        pid = parse_external_id(subject.external_id)
        user = self.repository.get_user_by_pid(pid) if pid else None
        if not user:
            # Structurally valid token for an account that no longer exists.
            raise UnauthenticatedError()
        return user

    def resolve_entity(self, external_id: str | uuid.UUID | None, kind: EntityKind) -> Record:
        try:
            lookup, message = self._lookups[kind]
        except KeyError:
            raise ValueError(f"unknown entity kind: {kind}") from None
        pid = parse_external_id(external_id)
        record = lookup(pid) if pid else None
        if record is None:
            raise NotFoundError(message)
        return record

    def resolve_project(self, external_id: str | uuid.UUID | None) -> Project:
        return self.resolve_entity(external_id, "project")  # type: ignore[return-value]

    def resolve_testimonial(self, external_id: str | uuid.UUID | None) -> Testimonial:
        return self.resolve_entity(external_id, "testimonial")  # type: ignore[return-value]

    def resolve_tag(self, external_id: str | uuid.UUID | None) -> Tag:
        return self.resolve_entity(external_id, "tag")  # type: ignore[return-value]
