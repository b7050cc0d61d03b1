"""SQLAlchemy models for users, projects, testimonials and tags."""
from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    SmallInteger,
    String,
    Text,
    UniqueConstraint,
    Uuid,
    func,
)
from sqlalchemy.orm import relationship

from .session import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    pid = Column(Uuid, unique=True, nullable=False, default=uuid.uuid4)
    email = Column(String(255), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=True)
    name = Column(String(255), nullable=True)
    avatar_url = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, server_default=func.now(), onupdate=_utcnow, nullable=False)

    projects = relationship("Project", back_populates="owner", passive_deletes=True)


class Project(Base):
    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, autoincrement=True)
    pid = Column(Uuid, unique=True, nullable=False, default=uuid.uuid4)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    slug = Column(String(255), nullable=False)
    logo_url = Column(Text, nullable=True)
    website_url = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, server_default=func.now(), onupdate=_utcnow, nullable=False)

    __table_args__ = (UniqueConstraint("slug", name="uq_projects_slug"),)

    owner = relationship("User", back_populates="projects")
    testimonials = relationship("Testimonial", back_populates="project", passive_deletes=True)
    tags = relationship("Tag", back_populates="project", passive_deletes=True)


class Testimonial(Base):
    __tablename__ = "testimonials"

    id = Column(Integer, primary_key=True, autoincrement=True)
    pid = Column(Uuid, unique=True, nullable=False, default=uuid.uuid4)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False)
    testimonial_type = Column("type", String(20), nullable=False, default="text", server_default="text")
    content = Column(Text, nullable=True)
    rating = Column(SmallInteger, nullable=True)
    # author
    author_name = Column(String(255), nullable=False)
    author_email = Column(String(255), nullable=True)
    author_title = Column(String(255), nullable=True)
    author_avatar_url = Column(Text, nullable=True)
    author_company = Column(String(255), nullable=True)
    author_url = Column(Text, nullable=True)
    # media
    video_url = Column(Text, nullable=True)
    video_thumbnail_url = Column(Text, nullable=True)
    video_duration_seconds = Column(Integer, nullable=True)
    transcription = Column(Text, nullable=True)
    # source
    source = Column(String(50), nullable=True, default="form")
    source_platform = Column(String(50), nullable=True)
    source_url = Column(Text, nullable=True)
    source_id = Column(String(255), nullable=True)
    # metadata
    sentiment = Column(String(20), nullable=True)
    sentiment_score = Column(Float, nullable=True)
    language = Column(String(10), nullable=True)
    is_approved = Column(Boolean, nullable=False, default=False, server_default="0")
    is_featured = Column(Boolean, nullable=False, default=False, server_default="0")
    created_at = Column(DateTime(timezone=True), default=_utcnow, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, server_default=func.now(), onupdate=_utcnow, nullable=False)

    __table_args__ = (
        Index("idx_testimonials_project", "project_id"),
        Index("idx_testimonials_approved", "project_id", "is_approved"),
        Index("idx_testimonials_featured", "project_id", "is_featured"),
    )

    project = relationship("Project", back_populates="testimonials")


class Tag(Base):
    __tablename__ = "tags"

    id = Column(Integer, primary_key=True, autoincrement=True)
    pid = Column(Uuid, unique=True, nullable=False, default=uuid.uuid4)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(100), nullable=False)
    color = Column(String(7), nullable=True)

    __table_args__ = (UniqueConstraint("project_id", "name", name="uq_tags_project_name"),)

    project = relationship("Project", back_populates="tags")


class TestimonialTag(Base):
    __tablename__ = "testimonial_tags"

    testimonial_id = Column(Integer, ForeignKey("testimonials.id", ondelete="CASCADE"), primary_key=True)
    tag_id = Column(Integer, ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True, index=True)
