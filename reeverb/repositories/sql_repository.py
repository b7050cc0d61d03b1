"""High-level data access helpers backed by SQLAlchemy."""
from __future__ import annotations

import logging
import uuid
from collections import defaultdict
from datetime import datetime, timezone
from typing import Any, Iterable, Optional

from sqlalchemy import delete, not_, select, update
from sqlalchemy.exc import IntegrityError

from reeverb.core.errors import ConflictError
from reeverb.db.models import Project, Tag, Testimonial, TestimonialTag, User
from reeverb.db.session import Database

logger = logging.getLogger(__name__)

TOGGLEABLE_FLAGS = ("is_approved", "is_featured")


def _now() -> datetime:
    return datetime.now(timezone.utc)


class SQLRepository:
    """CRUD helpers wrapping the SQLAlchemy session.

    Uniqueness is pre-checked by the services, but the store constraints are
    the final word: an IntegrityError raised by a write that touches a unique
    column is turned into ConflictError here.
    """

    def __init__(self, db: Database) -> None:
        self.db = db

    # -------------------------- users --------------------------
    def get_user(self, user_id: int) -> Optional[User]:
        with self.db.session() as session:
            return session.get(User, user_id)

    def get_user_by_pid(self, pid: uuid.UUID) -> Optional[User]:
        with self.db.session() as session:
            stmt = select(User).where(User.pid == pid)
            return session.execute(stmt).scalar_one_or_none()

    def get_user_by_email(self, email: str) -> Optional[User]:
        with self.db.session() as session:
            stmt = select(User).where(User.email == email)
            return session.execute(stmt).scalar_one_or_none()

    def create_user(self, email: str, password_hash: str, name: str | None = None) -> User:
        now = _now()
        entity = User(
            pid=uuid.uuid4(),
            email=email,
            password_hash=password_hash,
            name=name,
            avatar_url=None,
            created_at=now,
            updated_at=now,
        )
        with self.db.session() as session:
            session.add(entity)
            try:
                session.commit()
            except IntegrityError:
                session.rollback()
                logger.info("Email uniqueness constraint rejected registration")
                raise ConflictError("email already registered") from None
            session.refresh(entity)
            return entity

    def update_user_password(self, user_id: int, password_hash: str) -> None:
        with self.db.session() as session:
            stmt = update(User).where(User.id == user_id).values(password_hash=password_hash, updated_at=_now())
            session.execute(stmt)
            session.commit()

    # -------------------------- projects --------------------------
    def get_project(self, project_id: int) -> Optional[Project]:
        with self.db.session() as session:
            return session.get(Project, project_id)

    def get_project_by_pid(self, pid: uuid.UUID) -> Optional[Project]:
        with self.db.session() as session:
            stmt = select(Project).where(Project.pid == pid)
            return session.execute(stmt).scalar_one_or_none()

    def get_projects_by_owner(self, user_id: int) -> list[Project]:
        with self.db.session() as session:
            stmt = select(Project).where(Project.user_id == user_id).order_by(Project.created_at, Project.id)
            return list(session.execute(stmt).scalars().all())

    def slug_exists(self, slug: str, exclude_project_id: int | None = None) -> bool:
        with self.db.session() as session:
            stmt = select(Project.id).where(Project.slug == slug)
            if exclude_project_id is not None:
                stmt = stmt.where(Project.id != exclude_project_id)
            return session.execute(stmt.limit(1)).first() is not None

    def create_project(
        self,
        user_id: int,
        name: str,
        slug: str,
        logo_url: str | None = None,
        website_url: str | None = None,
    ) -> Project:
        now = _now()
        entity = Project(
            pid=uuid.uuid4(),
            user_id=user_id,
            name=name,
            slug=slug,
            logo_url=logo_url,
            website_url=website_url,
            created_at=now,
            updated_at=now,
        )
        with self.db.session() as session:
            session.add(entity)
            try:
                session.commit()
            except IntegrityError:
                session.rollback()
                logger.info("Slug constraint rejected project insert (slug=%s)", slug)
                raise ConflictError("slug already taken") from None
            session.refresh(entity)
            return entity

    def update_project(self, project_id: int, values: dict[str, Any]) -> Optional[Project]:
        with self.db.session() as session:
            if values:
                stmt = update(Project).where(Project.id == project_id).values(**values, updated_at=_now())
                try:
                    session.execute(stmt)
                    session.commit()
                except IntegrityError:
                    session.rollback()
                    logger.info("Slug constraint rejected project update (id=%s)", project_id)
                    raise ConflictError("slug already taken") from None
            return session.get(Project, project_id, populate_existing=True)

    def delete_project(self, project_id: int) -> None:
        with self.db.session() as session:
            session.execute(delete(Project).where(Project.id == project_id))
            session.commit()

    # -------------------------- testimonials --------------------------
    def get_testimonial(self, testimonial_id: int) -> Optional[Testimonial]:
        with self.db.session() as session:
            return session.get(Testimonial, testimonial_id)

    def get_testimonial_by_pid(self, pid: uuid.UUID) -> Optional[Testimonial]:
        with self.db.session() as session:
            stmt = select(Testimonial).where(Testimonial.pid == pid)
            return session.execute(stmt).scalar_one_or_none()

    def list_testimonials(
        self,
        project_id: int,
        *,
        is_approved: bool | None = None,
        is_featured: bool | None = None,
    ) -> list[Testimonial]:
        with self.db.session() as session:
            stmt = select(Testimonial).where(Testimonial.project_id == project_id)
            if is_approved is not None:
                stmt = stmt.where(Testimonial.is_approved == is_approved)
            if is_featured is not None:
                stmt = stmt.where(Testimonial.is_featured == is_featured)
            stmt = stmt.order_by(Testimonial.created_at, Testimonial.id)
            return list(session.execute(stmt).scalars().all())

    def create_testimonial(self, project_id: int, values: dict[str, Any]) -> Testimonial:
        now = _now()
        entity = Testimonial(pid=uuid.uuid4(), project_id=project_id, created_at=now, updated_at=now, **values)
        with self.db.session() as session:
            session.add(entity)
            session.commit()
            session.refresh(entity)
            return entity

    def update_testimonial(self, testimonial_id: int, values: dict[str, Any]) -> Optional[Testimonial]:
        with self.db.session() as session:
            if values:
                stmt = update(Testimonial).where(Testimonial.id == testimonial_id).values(**values, updated_at=_now())
                session.execute(stmt)
                session.commit()
            return session.get(Testimonial, testimonial_id, populate_existing=True)

    def toggle_testimonial_flag(self, testimonial_id: int, flag: str) -> Optional[Testimonial]:
        """Invert one boolean flag in a single UPDATE so concurrent toggles never lose a flip."""
        if flag not in TOGGLEABLE_FLAGS:
            raise ValueError(f"unknown testimonial flag: {flag}")
        column = getattr(Testimonial, flag)
        with self.db.session() as session:
            stmt = (
                update(Testimonial)
                .where(Testimonial.id == testimonial_id)
                .values({column: not_(column), Testimonial.updated_at: _now()})
            )
            session.execute(stmt)
            session.commit()
            return session.get(Testimonial, testimonial_id, populate_existing=True)

    def delete_testimonial(self, testimonial_id: int) -> None:
        with self.db.session() as session:
            session.execute(delete(Testimonial).where(Testimonial.id == testimonial_id))
            session.commit()

    # -------------------------- tags --------------------------
    def get_tag(self, tag_id: int) -> Optional[Tag]:
        with self.db.session() as session:
            return session.get(Tag, tag_id)

    def get_tag_by_pid(self, pid: uuid.UUID) -> Optional[Tag]:
        with self.db.session() as session:
            stmt = select(Tag).where(Tag.pid == pid)
            return session.execute(stmt).scalar_one_or_none()

    def get_tags_by_pids(self, pids: Iterable[uuid.UUID]) -> dict[uuid.UUID, Tag]:
        wanted = list(pids)
        if not wanted:
            return {}
        with self.db.session() as session:
            stmt = select(Tag).where(Tag.pid.in_(wanted))
            return {tag.pid: tag for tag in session.execute(stmt).scalars().all()}

    def list_tags(self, project_id: int) -> list[Tag]:
        with self.db.session() as session:
            stmt = select(Tag).where(Tag.project_id == project_id).order_by(Tag.name)
            return list(session.execute(stmt).scalars().all())

    def tag_name_exists(self, project_id: int, name: str, exclude_tag_id: int | None = None) -> bool:
        with self.db.session() as session:
            stmt = select(Tag.id).where(Tag.project_id == project_id, Tag.name == name)
            if exclude_tag_id is not None:
                stmt = stmt.where(Tag.id != exclude_tag_id)
            return session.execute(stmt.limit(1)).first() is not None

    def create_tag(self, project_id: int, name: str, color: str | None = None) -> Tag:
        entity = Tag(pid=uuid.uuid4(), project_id=project_id, name=name, color=color)
        with self.db.session() as session:
            session.add(entity)
            try:
                session.commit()
            except IntegrityError:
                session.rollback()
                logger.info("Tag name constraint rejected insert (project_id=%s)", project_id)
                raise ConflictError("a tag with this name already exists in this project") from None
            session.refresh(entity)
            return entity

    def update_tag(self, tag_id: int, values: dict[str, Any]) -> Optional[Tag]:
        with self.db.session() as session:
            if values:
                try:
                    session.execute(update(Tag).where(Tag.id == tag_id).values(**values))
                    session.commit()
                except IntegrityError:
                    session.rollback()
                    logger.info("Tag name constraint rejected update (id=%s)", tag_id)
                    raise ConflictError("a tag with this name already exists in this project") from None
            return session.get(Tag, tag_id, populate_existing=True)

    def delete_tag(self, tag_id: int) -> None:
        with self.db.session() as session:
            session.execute(delete(Tag).where(Tag.id == tag_id))
            session.commit()

    # -------------------------- testimonial tags --------------------------
    def get_tags_for_testimonial(self, testimonial_id: int) -> list[Tag]:
        with self.db.session() as session:
            stmt = (
                select(Tag)
                .join(TestimonialTag, TestimonialTag.tag_id == Tag.id)
                .where(TestimonialTag.testimonial_id == testimonial_id)
                .order_by(Tag.name)
            )
            return list(session.execute(stmt).scalars().all())

    def get_tags_for_testimonials(self, testimonial_ids: Iterable[int]) -> dict[int, list[Tag]]:
        ids = list(testimonial_ids)
        result: dict[int, list[Tag]] = defaultdict(list)
        if not ids:
            return result
        with self.db.session() as session:
            stmt = (
                select(TestimonialTag.testimonial_id, Tag)
                .join(Tag, TestimonialTag.tag_id == Tag.id)
                .where(TestimonialTag.testimonial_id.in_(ids))
                .order_by(Tag.name)
            )
            for testimonial_id, tag in session.execute(stmt).all():
                result[testimonial_id].append(tag)
        return result

    def replace_testimonial_tags(self, testimonial_id: int, tag_ids: Iterable[int]) -> bool:
        """
        Swap the whole association set of a testimonial in one transaction.

        The testimonial row is locked first (FOR UPDATE, ignored by SQLite) so
        two replacements for the same testimonial run one after the other.
        Returns False when the testimonial no longer exists. Any failure rolls
        the delete back together with the inserts.
        """
        with self.db.transaction() as session:
            stmt = select(Testimonial.id).where(Testimonial.id == testimonial_id).with_for_update()
            if session.execute(stmt).scalar_one_or_none() is None:
                return False
            session.execute(delete(TestimonialTag).where(TestimonialTag.testimonial_id == testimonial_id))
            session.add_all([TestimonialTag(testimonial_id=testimonial_id, tag_id=tag_id) for tag_id in tag_ids])
            session.flush()
        return True
