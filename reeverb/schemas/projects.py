from __future__ import annotations

from typing import Optional

from pydantic import BaseModel

from reeverb.db.models import Project
from reeverb.schemas import isoformat


class CreateProjectRequest(BaseModel):
    name: str
    slug: str
    logo_url: Optional[str] = None
    website_url: Optional[str] = None


class UpdateProjectRequest(BaseModel):
    """Partial update; fields left out (or null) keep their current value."""

    name: Optional[str] = None
    slug: Optional[str] = None
    logo_url: Optional[str] = None
    website_url: Optional[str] = None


class ProjectResponse(BaseModel):
    id: str
    name: str
    slug: str
    logo_url: Optional[str] = None
    website_url: Optional[str] = None
    created_at: str
    updated_at: str

    @classmethod
    def from_entity(cls, project: Project) -> "ProjectResponse":
        return cls(
            id=str(project.pid),
            name=project.name,
            slug=project.slug,
            logo_url=project.logo_url,
            website_url=project.website_url,
            created_at=isoformat(project.created_at),
            updated_at=isoformat(project.updated_at),
        )
