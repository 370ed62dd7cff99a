"""Project routes."""

import uuid

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.api.errors import fail, raise_for_failure
from taskhub.auth.dependencies import get_current_identity
from taskhub.auth.identity import IdentityContext
from taskhub.db.engine import get_db
from taskhub.schemas.project import ProjectCreate, ProjectRead, ProjectUpdate
from taskhub.services.project_service import ProjectService

router = APIRouter(prefix="/projects")


def _project_svc(db: AsyncSession = Depends(get_db)) -> ProjectService:
    return ProjectService(db)


@router.post("", response_model=ProjectRead, status_code=201)
async def create_project(
    body: ProjectCreate,
    identity: IdentityContext = Depends(get_current_identity),
    svc: ProjectService = Depends(_project_svc),
):
    """Create a project in the caller's organization."""
    return await svc.create_project(identity, body.name, body.description)


@router.get("", response_model=list[ProjectRead])
async def list_projects(
    identity: IdentityContext = Depends(get_current_identity),
    svc: ProjectService = Depends(_project_svc),
):
    return await svc.list_projects(identity)


@router.get("/{project_id}", response_model=ProjectRead)
async def get_project(
    project_id: uuid.UUID,
    identity: IdentityContext = Depends(get_current_identity),
    svc: ProjectService = Depends(_project_svc),
):
    return raise_for_failure(await svc.get_project(identity, project_id))


@router.put("/{project_id}", response_model=ProjectRead)
async def update_project(
    project_id: uuid.UUID,
    body: ProjectUpdate,
    identity: IdentityContext = Depends(get_current_identity),
    svc: ProjectService = Depends(_project_svc),
):
    return raise_for_failure(
        await svc.update_project(identity, project_id, body.name, body.description)
    )


@router.delete("/{project_id}", status_code=204)
async def delete_project(
    project_id: uuid.UUID,
    identity: IdentityContext = Depends(get_current_identity),
    svc: ProjectService = Depends(_project_svc),
):
    """Delete a project and its tasks. ADMIN or MANAGER only."""
    failure = await svc.delete_project(identity, project_id)
    if failure:
        fail(failure)
    return Response(status_code=204)
