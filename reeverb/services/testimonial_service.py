"""Testimonial use cases (CRUD, approval and featuring)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from reeverb.core.errors import NotFoundError
from reeverb.db.models import Project, Tag, Testimonial, User
from reeverb.repositories.sql_repository import SQLRepository
from reeverb.services.ownership import OwnershipGuard

DEFAULT_TYPE = "text"
DEFAULT_SOURCE = "form"

CONTENT_FIELDS = (
    "testimonial_type",
    "content",
    "rating",
    "author_name",
    "author_email",
    "author_title",
    "author_avatar_url",
    "author_company",
    "author_url",
    "video_url",
    "video_thumbnail_url",
    "video_duration_seconds",
    "transcription",
    "source",
    "source_platform",
    "source_url",
    "source_id",
    "sentiment",
    "sentiment_score",
    "language",
)


@dataclass
class TestimonialView:
    """A testimonial together with what is needed to present it."""

    testimonial: Testimonial
    project: Project
    tags: list[Tag] = field(default_factory=list)


class TestimonialService:
    def __init__(self, repository: SQLRepository, guard: OwnershipGuard) -> None:
        self.repository = repository
        self.guard = guard

    def _view(self, testimonial: Testimonial | None, project: Project) -> TestimonialView:
        if testimonial is None:
            raise NotFoundError("testimonial not found")
        return TestimonialView(testimonial, project, self.repository.get_tags_for_testimonial(testimonial.id))

    def list_testimonials(
        self,
        caller: User,
        project_id: str,
        *,
        is_approved: bool | None = None,
        is_featured: bool | None = None,
    ) -> list[TestimonialView]:
        project = self.guard.owned_project(caller.id, project_id)
        testimonials = self.repository.list_testimonials(project.id, is_approved=is_approved, is_featured=is_featured)
        tags_by_testimonial = self.repository.get_tags_for_testimonials(t.id for t in testimonials)
        return [TestimonialView(t, project, tags_by_testimonial.get(t.id, [])) for t in testimonials]

    def create_testimonial(self, caller: User, project_id: str, payload: dict[str, Any]) -> TestimonialView:
        project = self.guard.owned_project(caller.id, project_id)
        values = {key: value for key, value in payload.items() if key in CONTENT_FIELDS}
        values["testimonial_type"] = values.get("testimonial_type") or DEFAULT_TYPE
        values["source"] = values.get("source") or DEFAULT_SOURCE
        testimonial = self.repository.create_testimonial(project.id, values)
        return TestimonialView(testimonial, project, [])

    def get_testimonial(self, caller: User, testimonial_id: str) -> TestimonialView:
        testimonial, project = self.guard.owned_testimonial(caller.id, testimonial_id)
        return self._view(testimonial, project)

    def update_testimonial(self, caller: User, testimonial_id: str, changes: dict[str, Any]) -> TestimonialView:
        testimonial, project = self.guard.owned_testimonial(caller.id, testimonial_id)
        values = {key: value for key, value in changes.items() if key in CONTENT_FIELDS and value is not None}
        return self._view(self.repository.update_testimonial(testimonial.id, values), project)

    def delete_testimonial(self, caller: User, testimonial_id: str) -> None:
        testimonial, _ = self.guard.owned_testimonial(caller.id, testimonial_id)
        self.repository.delete_testimonial(testimonial.id)

    def toggle_approved(self, caller: User, testimonial_id: str) -> TestimonialView:
        return self._toggle(caller, testimonial_id, "is_approved")

    def toggle_featured(self, caller: User, testimonial_id: str) -> TestimonialView:
        return self._toggle(caller, testimonial_id, "is_featured")

    def _toggle(self, caller: User, testimonial_id: str, flag: str) -> TestimonialView:
        testimonial, project = self.guard.owned_testimonial(caller.id, testimonial_id)
        return self._view(self.repository.toggle_testimonial_flag(testimonial.id, flag), project)
