from __future__ import annotations

from fastapi import APIRouter, Request, Response

from reeverb.schemas.projects import CreateProjectRequest, ProjectResponse, UpdateProjectRequest
from reeverb.services.project_service import ProjectService
from reeverb.services.session_service import current_user

router = APIRouter(prefix="/projects", tags=["projects"])


def _get_project_service(request: Request) -> ProjectService:
    svc = getattr(getattr(request.app, "state", None), "project_service", None)
    if not svc:
        raise RuntimeError("ProjectService not configured")
    return svc


@router.get("", response_model=list[ProjectResponse])
def list_projects(request: Request):
    caller = current_user(request)
    projects = _get_project_service(request).list_projects(caller)
    return [ProjectResponse.from_entity(p) for p in projects]


@router.post("", response_model=ProjectResponse, status_code=201)
def create_project(body: CreateProjectRequest, request: Request):
    caller = current_user(request)
    project = _get_project_service(request).create_project(
        caller,
        body.name,
        body.slug,
        logo_url=body.logo_url,
        website_url=body.website_url,
    )
    return ProjectResponse.from_entity(project)


@router.get("/{project_id}", response_model=ProjectResponse)
def get_project(project_id: str, request: Request):
    caller = current_user(request)
    return ProjectResponse.from_entity(_get_project_service(request).get_project(caller, project_id))


@router.put("/{project_id}", response_model=ProjectResponse)
def update_project(project_id: str, body: UpdateProjectRequest, request: Request):
    caller = current_user(request)
    project = _get_project_service(request).update_project(caller, project_id, body.model_dump(exclude_none=True))
    return ProjectResponse.from_entity(project)


@router.delete("/{project_id}", status_code=204)
def delete_project(project_id: str, request: Request):
    caller = current_user(request)
    _get_project_service(request).delete_project(caller, project_id)
    return Response(status_code=204)
