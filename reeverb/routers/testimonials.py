from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Request, Response

from reeverb.schemas.testimonials import (
    CreateTestimonialRequest,
    TestimonialResponse,
    UpdateTestimonialRequest,
)
from reeverb.services.session_service import current_user
from reeverb.services.testimonial_service import TestimonialService, TestimonialView

router = APIRouter(tags=["testimonials"])


def _get_testimonial_service(request: Request) -> TestimonialService:
    svc = getattr(getattr(request.app, "state", None), "testimonial_service", None)
    if not svc:
        raise RuntimeError("TestimonialService not configured")
    return svc


def _response(view: TestimonialView) -> TestimonialResponse:
    return TestimonialResponse.from_entity(view.testimonial, view.project.pid, view.tags)


@router.get("/projects/{project_id}/testimonials", response_model=list[TestimonialResponse])
def list_testimonials(
    project_id: str,
    request: Request,
    is_approved: Optional[bool] = None,
    is_featured: Optional[bool] = None,
):
    caller = current_user(request)
    views = _get_testimonial_service(request).list_testimonials(
        caller, project_id, is_approved=is_approved, is_featured=is_featured
    )
    return [_response(view) for view in views]


@router.post("/projects/{project_id}/testimonials", response_model=TestimonialResponse, status_code=201)
def create_testimonial(project_id: str, body: CreateTestimonialRequest, request: Request):
    caller = current_user(request)
    view = _get_testimonial_service(request).create_testimonial(caller, project_id, body.model_dump())
    return _response(view)


@router.get("/testimonials/{testimonial_id}", response_model=TestimonialResponse)
def get_testimonial(testimonial_id: str, request: Request):
    caller = current_user(request)
    return _response(_get_testimonial_service(request).get_testimonial(caller, testimonial_id))


@router.put("/testimonials/{testimonial_id}", response_model=TestimonialResponse)
def update_testimonial(testimonial_id: str, body: UpdateTestimonialRequest, request: Request):
    caller = current_user(request)
    view = _get_testimonial_service(request).update_testimonial(
        caller, testimonial_id, body.model_dump(exclude_none=True)
    )
    return _response(view)


@router.delete("/testimonials/{testimonial_id}", status_code=204)
def delete_testimonial(testimonial_id: str, request: Request):
    caller = current_user(request)
    _get_testimonial_service(request).delete_testimonial(caller, testimonial_id)
    return Response(status_code=204)


@router.post("/testimonials/{testimonial_id}/approve", response_model=TestimonialResponse)
def approve_testimonial(testimonial_id: str, request: Request):
    caller = current_user(request)
    return _response(_get_testimonial_service(request).toggle_approved(caller, testimonial_id))


@router.post("/testimonials/{testimonial_id}/feature", response_model=TestimonialResponse)
def feature_testimonial(testimonial_id: str, request: Request):
    caller = current_user(request)
    return _response(_get_testimonial_service(request).toggle_featured(caller, testimonial_id))
