from __future__ import annotations

import uuid
from typing import Iterable, Optional

from pydantic import BaseModel, ConfigDict, Field

from reeverb.db.models import Tag, Testimonial
from reeverb.schemas import isoformat
from reeverb.schemas.tags import TagResponse, tag_responses


# Bounds of the SMALLINT and INTEGER columns behind rating and video duration
SMALLINT_MAX = 32767
INT_MAX = 2147483647


class _TestimonialPayload(BaseModel):
    """Opaque testimonial content shared by create and update bodies."""

    model_config = ConfigDict(populate_by_name=True)

    testimonial_type: Optional[str] = Field(default=None, alias="type")
    content: Optional[str] = None
    rating: Optional[int] = Field(default=None, ge=-SMALLINT_MAX - 1, le=SMALLINT_MAX)
    author_email: Optional[str] = None
    author_title: Optional[str] = None
    author_avatar_url: Optional[str] = None
    author_company: Optional[str] = None
    author_url: Optional[str] = None
    video_url: Optional[str] = None
    video_thumbnail_url: Optional[str] = None
    video_duration_seconds: Optional[int] = Field(default=None, ge=-INT_MAX - 1, le=INT_MAX)
    transcription: Optional[str] = None
    source: Optional[str] = None
    source_platform: Optional[str] = None
    source_url: Optional[str] = None
    source_id: Optional[str] = None
    sentiment: Optional[str] = None
    sentiment_score: Optional[float] = None
    language: Optional[str] = None


class CreateTestimonialRequest(_TestimonialPayload):
    author_name: str


class UpdateTestimonialRequest(_TestimonialPayload):
    """Partial update. The approval/featured flags only change through their toggle endpoints."""

    author_name: Optional[str] = None


class TestimonialResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    project_id: str
    testimonial_type: str = Field(alias="type")
    content: Optional[str] = None
    rating: Optional[int] = None
    author_name: str
    author_email: Optional[str] = None
    author_title: Optional[str] = None
    author_avatar_url: Optional[str] = None
    author_company: Optional[str] = None
    author_url: Optional[str] = None
    video_url: Optional[str] = None
    video_thumbnail_url: Optional[str] = None
    video_duration_seconds: Optional[int] = None
    transcription: Optional[str] = None
    source: Optional[str] = None
    source_platform: Optional[str] = None
    source_url: Optional[str] = None
    source_id: Optional[str] = None
    sentiment: Optional[str] = None
    sentiment_score: Optional[float] = None
    language: Optional[str] = None
    is_approved: bool
    is_featured: bool
    tags: list[TagResponse] = Field(default_factory=list)
    created_at: str
    updated_at: str

    @classmethod
    def from_entity(
        cls,
        testimonial: Testimonial,
        project_pid: uuid.UUID,
        tags: Iterable[Tag] = (),
    ) -> "TestimonialResponse":
        return cls(
            id=str(testimonial.pid),
            project_id=str(project_pid),
            testimonial_type=testimonial.testimonial_type or "text",
            content=testimonial.content,
            rating=testimonial.rating,
            author_name=testimonial.author_name,
            author_email=testimonial.author_email,
            author_title=testimonial.author_title,
            author_avatar_url=testimonial.author_avatar_url,
            author_company=testimonial.author_company,
            author_url=testimonial.author_url,
            video_url=testimonial.video_url,
            video_thumbnail_url=testimonial.video_thumbnail_url,
            video_duration_seconds=testimonial.video_duration_seconds,
            transcription=testimonial.transcription,
            source=testimonial.source,
            source_platform=testimonial.source_platform,
            source_url=testimonial.source_url,
            source_id=testimonial.source_id,
            sentiment=testimonial.sentiment,
            sentiment_score=testimonial.sentiment_score,
            language=testimonial.language,
            is_approved=bool(testimonial.is_approved),
            is_featured=bool(testimonial.is_featured),
            tags=tag_responses(tags, project_pid),
            created_at=isoformat(testimonial.created_at),
            updated_at=isoformat(testimonial.updated_at),
        )
