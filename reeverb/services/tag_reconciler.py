"""Replace-the-whole-set reconciliation of testimonial tags."""

from __future__ import annotations

import logging
from typing import Iterable

from sqlalchemy.exc import IntegrityError

from reeverb.core.errors import ForbiddenError, NotFoundError
from reeverb.db.models import Tag, Testimonial
from reeverb.repositories.sql_repository import SQLRepository
from reeverb.services.tenant_resolver import parse_external_id

logger = logging.getLogger(__name__)


class TagReconciler:
    """
    Sets the exact tag set of a testimonial.

    Every requested tag is validated before anything is written; the
    delete + insert then runs as one transaction, so callers either see the
    old set or the new one, never a mix.
    """

    def __init__(self, repository: SQLRepository) -> None:
        self.repository = repository

    def _validate(self, testimonial: Testimonial, requested: list[str]) -> list[Tag]:
        pids = [parse_external_id(value) for value in requested]
        found = self.repository.get_tags_by_pids(pid for pid in pids if pid is not None)
        tags: list[Tag] = []
        seen: set[int] = set()
        for pid in pids:
            tag = found.get(pid) if pid is not None else None
            if tag is None:
                raise NotFoundError("tag not found")
            if tag.project_id != testimonial.project_id:
                # Cross-project reuse is refused even if the caller owns both projects.
                logger.info(
                    "Refused tag from project_id=%s for testimonial in project_id=%s",
                    tag.project_id,
                    testimonial.project_id,
                )
                raise ForbiddenError("tag belongs to a different project")
            if tag.id in seen:
                continue
            seen.add(tag.id)
            tags.append(tag)
        return tags

    def set_tags(self, testimonial: Testimonial, requested_tag_ids: Iterable[str]) -> list[Tag]:
        tags = self._validate(testimonial, list(requested_tag_ids))
        try:
            replaced = self.repository.replace_testimonial_tags(testimonial.id, [tag.id for tag in tags])
        except IntegrityError:
            # A tag vanished between validation and insert; nothing was committed.
            logger.info("Tag removed concurrently while tagging testimonial_id=%s", testimonial.id)
            raise NotFoundError("tag not found") from None
        if not replaced:
            raise NotFoundError("testimonial not found")
        return tags
