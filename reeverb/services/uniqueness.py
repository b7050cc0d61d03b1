"""Pre-write uniqueness checks for project slugs and tag names."""

from __future__ import annotations

import logging

from reeverb.core.errors import ConflictError
from reeverb.repositories.sql_repository import SQLRepository

logger = logging.getLogger(__name__)


class UniquenessGuard:
    """
    Optimistic checks run before inserts and renames.

    A concurrent writer can still win the race between the check and the
    write; SQLRepository maps the resulting constraint violation to the same
    ConflictError.
    """

    def __init__(self, repository: SQLRepository) -> None:
        self.repository = repository

    def ensure_slug_available(self, slug: str, exclude_project_id: int | None = None) -> None:
        # Slugs are global across tenants and compared case-sensitively.
        if self.repository.slug_exists(slug, exclude_project_id=exclude_project_id):
            logger.info("Slug already taken: %s", slug)
            raise ConflictError("slug already taken")

    def ensure_tag_name_available(self, project_id: int, name: str, exclude_tag_id: int | None = None) -> None:
        if self.repository.tag_name_exists(project_id, name, exclude_tag_id=exclude_tag_id):
            logger.info("Tag name already taken in project_id=%s", project_id)
            raise ConflictError("a tag with this name already exists in this project")
