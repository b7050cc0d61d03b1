"""Project (tenant) use cases."""

from __future__ import annotations

import logging
from typing import Any

from reeverb.core.errors import NotFoundError
from reeverb.db.models import Project, User
from reeverb.repositories.sql_repository import SQLRepository
from reeverb.services.ownership import OwnershipGuard
from reeverb.services.uniqueness import UniquenessGuard

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("name", "slug", "logo_url", "website_url")


class ProjectService:
    def __init__(self, repository: SQLRepository, guard: OwnershipGuard, uniqueness: UniquenessGuard) -> None:
        self.repository = repository
        self.guard = guard
        self.uniqueness = uniqueness

    def list_projects(self, caller: User) -> list[Project]:
        return self.repository.get_projects_by_owner(caller.id)

    def create_project(
        self,
        caller: User,
        name: str,
        slug: str,
        logo_url: str | None = None,
        website_url: str | None = None,
    ) -> Project:
        self.uniqueness.ensure_slug_available(slug)
        project = self.repository.create_project(caller.id, name, slug, logo_url=logo_url, website_url=website_url)
        logger.info("Created project id=%s for user_id=%s", project.id, caller.id)
        return project

    def get_project(self, caller: User, project_id: str) -> Project:
        return self.guard.owned_project(caller.id, project_id)

    def update_project(self, caller: User, project_id: str, changes: dict[str, Any]) -> Project:
        project = self.guard.owned_project(caller.id, project_id)
        values = {key: value for key, value in changes.items() if key in UPDATABLE_FIELDS and value is not None}
        slug = values.get("slug")
        if slug is not None and slug != project.slug:
            self.uniqueness.ensure_slug_available(slug, exclude_project_id=project.id)
        updated = self.repository.update_project(project.id, values)
        if updated is None:
            raise NotFoundError("project not found")
        return updated

    def delete_project(self, caller: User, project_id: str) -> None:
        project = self.guard.owned_project(caller.id, project_id)
        # testimonials, tags and their links go with it (ON DELETE CASCADE)
        self.repository.delete_project(project.id)
        logger.info("Deleted project id=%s", project.id)
