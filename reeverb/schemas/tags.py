from __future__ import annotations

import uuid
from typing import Iterable, Optional

from pydantic import BaseModel, Field

from reeverb.db.models import Tag


class CreateTagRequest(BaseModel):
    name: str = Field(max_length=100)
    color: Optional[str] = Field(default=None, max_length=7)


class UpdateTagRequest(BaseModel):
    name: Optional[str] = Field(default=None, max_length=100)
    color: Optional[str] = Field(default=None, max_length=7)


class TagResponse(BaseModel):
    id: str
    project_id: str
    name: str
    color: Optional[str] = None

    @classmethod
    def from_entity(cls, tag: Tag, project_pid: uuid.UUID) -> "TagResponse":
        return cls(id=str(tag.pid), project_id=str(project_pid), name=tag.name, color=tag.color)


def tag_responses(tags: Iterable[Tag], project_pid: uuid.UUID) -> list[TagResponse]:
    return [TagResponse.from_entity(tag, project_pid) for tag in tags]


class SetTestimonialTagsRequest(BaseModel):
    tag_ids: list[str] = Field(default_factory=list)


class TestimonialTagsResponse(BaseModel):
    tags: list[TagResponse]
