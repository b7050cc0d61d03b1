"""Tag use cases, including setting the tags of a testimonial."""

from __future__ import annotations

from typing import Any, Iterable

from reeverb.core.errors import NotFoundError
from reeverb.db.models import Project, Tag, User
from reeverb.repositories.sql_repository import SQLRepository
from reeverb.services.ownership import OwnershipGuard
from reeverb.services.tag_reconciler import TagReconciler
from reeverb.services.uniqueness import UniquenessGuard

UPDATABLE_FIELDS = ("name", "color")


class TagService:
    def __init__(
        self,
        repository: SQLRepository,
        guard: OwnershipGuard,
        uniqueness: UniquenessGuard,
        reconciler: TagReconciler,
    ) -> None:
        self.repository = repository
        self.guard = guard
        self.uniqueness = uniqueness
        self.reconciler = reconciler

    def list_tags(self, caller: User, project_id: str) -> tuple[Project, list[Tag]]:
        project = self.guard.owned_project(caller.id, project_id)
        return project, self.repository.list_tags(project.id)

    def create_tag(self, caller: User, project_id: str, name: str, color: str | None = None) -> tuple[Project, Tag]:
        project = self.guard.owned_project(caller.id, project_id)
        self.uniqueness.ensure_tag_name_available(project.id, name)
        return project, self.repository.create_tag(project.id, name, color=color)

    def update_tag(self, caller: User, tag_id: str, changes: dict[str, Any]) -> tuple[Project, Tag]:
        tag, project = self.guard.owned_tag(caller.id, tag_id)
        values = {key: value for key, value in changes.items() if key in UPDATABLE_FIELDS and value is not None}
        name = values.get("name")
        if name is not None and name != tag.name:
            self.uniqueness.ensure_tag_name_available(project.id, name, exclude_tag_id=tag.id)
        updated = self.repository.update_tag(tag.id, values)
        if updated is None:
            raise NotFoundError("tag not found")
        return project, updated

    def delete_tag(self, caller: User, tag_id: str) -> None:
        tag, _ = self.guard.owned_tag(caller.id, tag_id)
        self.repository.delete_tag(tag.id)

    def set_testimonial_tags(self, caller: User, testimonial_id: str, tag_ids: Iterable[str]) -> tuple[Project, list[Tag]]:
        testimonial, project = self.guard.owned_testimonial(caller.id, testimonial_id)
        return project, self.reconciler.set_tags(testimonial, tag_ids)
