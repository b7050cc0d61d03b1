from __future__ import annotations

from fastapi import APIRouter, Request, Response

from reeverb.schemas.tags import (
    CreateTagRequest,
    SetTestimonialTagsRequest,
    TagResponse,
    TestimonialTagsResponse,
    UpdateTagRequest,
    tag_responses,
)
from reeverb.services.session_service import current_user
from reeverb.services.tag_service import TagService

router = APIRouter(tags=["tags"])


def _get_tag_service(request: Request) -> TagService:
    svc = getattr(getattr(request.app, "state", None), "tag_service", None)
    if not svc:
        raise RuntimeError("TagService not configured")
    return svc


@router.get("/projects/{project_id}/tags", response_model=list[TagResponse])
def list_tags(project_id: str, request: Request):
    caller = current_user(request)
    project, tags = _get_tag_service(request).list_tags(caller, project_id)
    return tag_responses(tags, project.pid)


@router.post("/projects/{project_id}/tags", response_model=TagResponse, status_code=201)
def create_tag(project_id: str, body: CreateTagRequest, request: Request):
    caller = current_user(request)
    project, tag = _get_tag_service(request).create_tag(caller, project_id, body.name, color=body.color)
    return TagResponse.from_entity(tag, project.pid)


@router.put("/tags/{tag_id}", response_model=TagResponse)
def update_tag(tag_id: str, body: UpdateTagRequest, request: Request):
    caller = current_user(request)
    project, tag = _get_tag_service(request).update_tag(caller, tag_id, body.model_dump(exclude_none=True))
    return TagResponse.from_entity(tag, project.pid)


@router.delete("/tags/{tag_id}", status_code=204)
def delete_tag(tag_id: str, request: Request):
    caller = current_user(request)
    _get_tag_service(request).delete_tag(caller, tag_id)
    return Response(status_code=204)


@router.put("/testimonials/{testimonial_id}/tags", response_model=TestimonialTagsResponse)
def set_testimonial_tags(testimonial_id: str, body: SetTestimonialTagsRequest, request: Request):
    caller = current_user(request)
    project, tags = _get_tag_service(request).set_testimonial_tags(caller, testimonial_id, body.tag_ids)
    return TestimonialTagsResponse(tags=tag_responses(tags, project.pid))
