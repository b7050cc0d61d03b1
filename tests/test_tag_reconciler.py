from __future__ import annotations

import uuid

import pytest
from sqlalchemy.exc import IntegrityError

from reeverb.core.errors import ForbiddenError, NotFoundError
from reeverb.services.tag_reconciler import TagReconciler


@pytest.fixture()
def reconciler(repo):
    return TagReconciler(repo)


@pytest.fixture()
def setup(repo, make_user):
    user = make_user()
    project = repo.create_project(user.id, "P", "p")
    testimonial = repo.create_testimonial(project.id, {"author_name": "Jane", "testimonial_type": "text"})
    tags = {name: repo.create_tag(project.id, name) for name in ("bug", "feature", "vip")}
    return user, project, testimonial, tags


def _linked(repo, testimonial) -> list[str]:
    return [tag.name for tag in repo.get_tags_for_testimonial(testimonial.id)]


def test_set_tags_returns_requested_order(reconciler, repo, setup):
    _, _, testimonial, tags = setup
    result = reconciler.set_tags(testimonial, [str(tags["vip"].pid), str(tags["bug"].pid)])
    assert [tag.name for tag in result] == ["vip", "bug"]
    assert _linked(repo, testimonial) == ["bug", "vip"]


def test_set_tags_is_idempotent(reconciler, repo, setup):
    _, _, testimonial, tags = setup
    ids = [str(tags["bug"].pid), str(tags["feature"].pid)]
    reconciler.set_tags(testimonial, ids)
    reconciler.set_tags(testimonial, ids)
    assert _linked(repo, testimonial) == ["bug", "feature"]


def test_empty_request_clears_all_tags(reconciler, repo, setup):
    _, _, testimonial, tags = setup
    reconciler.set_tags(testimonial, [str(tags["bug"].pid)])
    assert reconciler.set_tags(testimonial, []) == []
    assert _linked(repo, testimonial) == []


def test_duplicates_collapse_to_one_link(reconciler, repo, setup):
    _, _, testimonial, tags = setup
    bug = str(tags["bug"].pid)
    result = reconciler.set_tags(testimonial, [bug, str(tags["vip"].pid), bug])
    assert [tag.name for tag in result] == ["bug", "vip"]
    assert _linked(repo, testimonial) == ["bug", "vip"]


@pytest.mark.parametrize("bad_id", ["not-a-uuid", str(uuid.uuid4())])
def test_unknown_tag_leaves_links_untouched(reconciler, repo, setup, bad_id):
    _, _, testimonial, tags = setup
    reconciler.set_tags(testimonial, [str(tags["bug"].pid)])

    with pytest.raises(NotFoundError) as excinfo:
        reconciler.set_tags(testimonial, [str(tags["vip"].pid), bad_id])
    assert excinfo.value.message == "tag not found"
    assert _linked(repo, testimonial) == ["bug"]


def test_tag_from_another_project_is_forbidden(reconciler, repo, setup):
    user, _, testimonial, tags = setup
    other = repo.create_project(user.id, "Other", "other")
    foreign = repo.create_tag(other.id, "bug")
    reconciler.set_tags(testimonial, [str(tags["feature"].pid)])

    with pytest.raises(ForbiddenError):
        reconciler.set_tags(testimonial, [str(tags["bug"].pid), str(foreign.pid)])
    assert _linked(repo, testimonial) == ["feature"]


def test_tag_deleted_during_write_is_reported_as_not_found(reconciler, repo, setup, monkeypatch):
    _, _, testimonial, tags = setup
    reconciler.set_tags(testimonial, [str(tags["bug"].pid)])

    def _vanished(testimonial_id, tag_ids):
        raise IntegrityError("INSERT INTO testimonial_tags", {}, Exception("FOREIGN KEY constraint failed"))

    monkeypatch.setattr(repo, "replace_testimonial_tags", _vanished)
    with pytest.raises(NotFoundError) as excinfo:
        reconciler.set_tags(testimonial, [str(tags["vip"].pid)])
    assert excinfo.value.message == "tag not found"


def test_testimonial_deleted_during_write_is_not_found(reconciler, repo, setup, monkeypatch):
    _, _, testimonial, tags = setup
    monkeypatch.setattr(repo, "replace_testimonial_tags", lambda *args: False)
    with pytest.raises(NotFoundError) as excinfo:
        reconciler.set_tags(testimonial, [str(tags["vip"].pid)])
    assert excinfo.value.message == "testimonial not found"
