"""Ownership chain checks (Tag/Testimonial -> Project -> User)."""

from __future__ import annotations

import logging
import uuid
from typing import Optional

from reeverb.core.errors import ForbiddenError, NotFoundError
from reeverb.db.models import Project, Tag, Testimonial
from reeverb.repositories.sql_repository import SQLRepository
from reeverb.services.tenant_resolver import TenantResolver

logger = logging.getLogger(__name__)


class OwnershipGuard:
    """
    Confirms that a resolved record belongs to the caller.

    Existence is checked before ownership, so a missing record is a 404 and
    someone else's record is a 403.
    """

    def __init__(self, repository: SQLRepository, resolver: TenantResolver) -> None:
        self.repository = repository
        self.resolver = resolver

    def _check(self, user_id: int, project: Optional[Project], missing: str) -> Project:
        if project is None:
            raise NotFoundError(missing)
        if project.user_id != user_id:
            logger.info("Ownership check failed: user_id=%s project_id=%s", user_id, project.id)
            raise ForbiddenError()
        return project

    def authorize_project(self, user_id: int, project: Optional[Project]) -> Project:
        return self._check(user_id, project, "project not found")

    def authorize_testimonial(self, user_id: int, testimonial: Optional[Testimonial]) -> Project:
        """Return the owning project once the caller is confirmed as its owner."""
        if testimonial is None:
            raise NotFoundError("testimonial not found")
        project = self.repository.get_project(testimonial.project_id)
        return self._check(user_id, project, "testimonial not found")

    def authorize_tag(self, user_id: int, tag: Optional[Tag]) -> Project:
        if tag is None:
            raise NotFoundError("tag not found")
        project = self.repository.get_project(tag.project_id)
        return self._check(user_id, project, "tag not found")

    # resolve + authorize in one call, for handlers working from path ids
    def owned_project(self, user_id: int, external_id: str | uuid.UUID) -> Project:
        return self.authorize_project(user_id, self.resolver.resolve_project(external_id))

    def owned_testimonial(self, user_id: int, external_id: str | uuid.UUID) -> tuple[Testimonial, Project]:
        testimonial = self.resolver.resolve_testimonial(external_id)
        return testimonial, self.authorize_testimonial(user_id, testimonial)

    def owned_tag(self, user_id: int, external_id: str | uuid.UUID) -> tuple[Tag, Project]:
        tag = self.resolver.resolve_tag(external_id)
        return tag, self.authorize_tag(user_id, tag)
