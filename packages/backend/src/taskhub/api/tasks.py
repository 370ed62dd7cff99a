"""Task and comment API routes.

Routes translate HTTP to service calls; every service result goes through
raise_for_failure so tenant misses surface as 404 and role misses as 403.

Static paths (/tasks/my-tasks, /tasks/project/...) are declared before
/tasks/{task_id} so they are not captured by it.
"""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.api.errors import fail, raise_for_failure
from taskhub.auth.dependencies import get_current_identity
from taskhub.auth.identity import IdentityContext
from taskhub.db.engine import get_db
from taskhub.schemas.task import (
    CommentCreate,
    CommentRead,
    TaskCreate,
    TaskPriority,
    TaskRead,
    TaskStatus,
    TaskUpdate,
)
from taskhub.services.comment_service import CommentService
from taskhub.services.task_service import TaskService

router = APIRouter(prefix="/tasks")


def _task_svc(db: AsyncSession = Depends(get_db)) -> TaskService:
    return TaskService(db)


def _comment_svc(db: AsyncSession = Depends(get_db)) -> CommentService:
    return CommentService(db)


def _value(enum_member):
    return enum_member.value if enum_member is not None else None


# ═══════════════════════════════════════════════════════════
# Tasks
# ═══════════════════════════════════════════════════════════


@router.post("", response_model=TaskRead, status_code=201)
async def create_task(
    body: TaskCreate,
    identity: IdentityContext = Depends(get_current_identity),
    svc: TaskService = Depends(_task_svc),
):
    """Create a task in a project. ADMIN or MANAGER only."""
    return raise_for_failure(
        await svc.create_task(
            identity,
            project_id=body.project_id,
            title=body.title,
            description=body.description,
            status=body.status.value,
            priority=body.priority.value,
            assigned_to=body.assigned_to,
            due_date=body.due_date,
        )
    )


@router.get("", response_model=list[TaskRead])
async def list_tasks(
    status: Optional[TaskStatus] = Query(None, description="Filter by status"),
    priority: Optional[TaskPriority] = Query(None, description="Filter by priority"),
    project_id: Optional[uuid.UUID] = Query(None, alias="projectId"),
    assignee_id: Optional[uuid.UUID] = Query(None, alias="assigneeId"),
    identity: IdentityContext = Depends(get_current_identity),
    svc: TaskService = Depends(_task_svc),
):
    """List the organization's tasks with optional filters."""
    return await svc.list_tasks(
        identity,
        status=_value(status),
        priority=_value(priority),
        project_id=project_id,
        assignee_id=assignee_id,
    )


@router.get("/my-tasks", response_model=list[TaskRead])
async def my_tasks(
    identity: IdentityContext = Depends(get_current_identity),
    svc: TaskService = Depends(_task_svc),
):
    """Tasks assigned to the caller."""
    return await svc.my_tasks(identity)


@router.get("/project/{project_id}", response_model=list[TaskRead])
async def list_project_tasks(
    project_id: uuid.UUID,
    identity: IdentityContext = Depends(get_current_identity),
    svc: TaskService = Depends(_task_svc),
):
    return raise_for_failure(await svc.list_project_tasks(identity, project_id))


@router.get("/{task_id}", response_model=TaskRead)
async def get_task(
    task_id: uuid.UUID,
    identity: IdentityContext = Depends(get_current_identity),
    svc: TaskService = Depends(_task_svc),
):
    return raise_for_failure(await svc.get_task(identity, task_id))


@router.put("/{task_id}", response_model=TaskRead)
async def update_task(
    task_id: uuid.UUID,
    body: TaskUpdate,
    identity: IdentityContext = Depends(get_current_identity),
    svc: TaskService = Depends(_task_svc),
):
    """Partially update a task. Managers, or the task's creator/assignee."""
    return raise_for_failure(
        await svc.update_task(
            identity,
            task_id,
            title=body.title,
            description=body.description,
            status=_value(body.status),
            priority=_value(body.priority),
            assigned_to=body.assigned_to,
            due_date=body.due_date,
        )
    )


@router.delete("/{task_id}", status_code=204)
async def delete_task(
    task_id: uuid.UUID,
    identity: IdentityContext = Depends(get_current_identity),
    svc: TaskService = Depends(_task_svc),
):
    """Delete a task and its comments. ADMIN or MANAGER only."""
    failure = await svc.delete_task(identity, task_id)
    if failure:
        fail(failure)
    return Response(status_code=204)


# ═══════════════════════════════════════════════════════════
# Comments
# ═══════════════════════════════════════════════════════════


@router.post("/{task_id}/comments", response_model=CommentRead, status_code=201)
async def add_comment(
    task_id: uuid.UUID,
    body: CommentCreate,
    identity: IdentityContext = Depends(get_current_identity),
    svc: CommentService = Depends(_comment_svc),
):
    return raise_for_failure(await svc.add_comment(identity, task_id, body.content))


@router.get("/{task_id}/comments", response_model=list[CommentRead])
async def list_comments(
    task_id: uuid.UUID,
    identity: IdentityContext = Depends(get_current_identity),
    svc: CommentService = Depends(_comment_svc),
):
    """Comments of a task, newest first."""
    return raise_for_failure(await svc.list_comments(identity, task_id))


@router.delete("/{task_id}/comments/{comment_id}", status_code=204)
async def delete_comment(
    task_id: uuid.UUID,
    comment_id: uuid.UUID,
    identity: IdentityContext = Depends(get_current_identity),
    svc: CommentService = Depends(_comment_svc),
):
    """Delete a comment. Its author or an ADMIN only."""
    failure = await svc.delete_comment(identity, task_id, comment_id)
    if failure:
        fail(failure)
    return Response(status_code=204)
