"""Task service — tenant-scoped task management.

Access rules, always evaluated after the tenant check:
- create / delete → ADMIN or MANAGER
- update          → ADMIN or MANAGER, or the task's creator or assignee
- read            → anyone in the tenant

Assignees must be users of the caller's tenant; an assignee id from any
other tenant is reported exactly like an unknown id.
"""

import uuid
from datetime import datetime
from typing import Optional

import structlog
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.auth.guard import Decision, authorize, deny, has_any_role
from taskhub.auth.identity import MANAGERS, IdentityContext
from taskhub.db.models import Comment, Project, Task, User
from taskhub.errors import Failure, Result
from taskhub.services.base import get_scoped

logger = structlog.get_logger()

_MANAGER_REQUIRED = "ADMIN or MANAGER role required"


def can_edit(identity: IdentityContext, task: Task) -> bool:
    """Managers edit any task; others only tasks they created or hold."""
    return has_any_role(identity, MANAGERS) or identity.user_id in (
        task.created_by,
        task.assigned_to,
    )


class TaskService:
    """Business logic for task CRUD."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ─── Create ──────────────────────────────────────────

    async def create_task(
        self,
        identity: IdentityContext,
        project_id: uuid.UUID,
        title: str,
        description: Optional[str] = None,
        status: str = "TODO",
        priority: str = "MEDIUM",
        assigned_to: Optional[uuid.UUID] = None,
        due_date: Optional[datetime] = None,
    ) -> Result[Task]:
        project = await get_scoped(
            self.db, Project, project_id, identity, "Project",
            roles=MANAGERS, forbidden_message=_MANAGER_REQUIRED,
        )
        if isinstance(project, Failure):
            return project

        if assigned_to is not None:
            assignee = await get_scoped(self.db, User, assigned_to, identity, "Assignee")
            if isinstance(assignee, Failure):
                return assignee

        task = Task(
            tenant_id=identity.tenant_id,
            project_id=project.id,
            title=title,
            description=description,
            status=status,
            priority=priority,
            assigned_to=assigned_to,
            created_by=identity.user_id,
            due_date=due_date,
        )
        self.db.add(task)
        await self.db.commit()

        logger.info("task.created", task_id=str(task.id), project_id=str(project.id))
        return task

    # ─── Read ────────────────────────────────────────────

    async def get_task(
        self, identity: IdentityContext, task_id: uuid.UUID
    ) -> Result[Task]:
        return await get_scoped(self.db, Task, task_id, identity, "Task")

    async def list_tasks(
        self,
        identity: IdentityContext,
        status: Optional[str] = None,
        priority: Optional[str] = None,
        project_id: Optional[uuid.UUID] = None,
        assignee_id: Optional[uuid.UUID] = None,
    ) -> list[Task]:
        """List the tenant's tasks with optional filters.

        Filters only narrow the tenant query, so a foreign project or
        assignee id simply matches nothing.
        """
        query = (
            select(Task)
            .where(Task.tenant_id == identity.tenant_id)
            .order_by(Task.created_at.desc())
        )
        if status:
            query = query.where(Task.status == status)
        if priority:
            query = query.where(Task.priority == priority)
        if project_id:
            query = query.where(Task.project_id == project_id)
        if assignee_id:
            query = query.where(Task.assigned_to == assignee_id)

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def list_project_tasks(
        self, identity: IdentityContext, project_id: uuid.UUID
    ) -> Result[list[Task]]:
        project = await get_scoped(self.db, Project, project_id, identity, "Project")
        if isinstance(project, Failure):
            return project
        return await self.list_tasks(identity, project_id=project.id)

    async def my_tasks(self, identity: IdentityContext) -> list[Task]:
        return await self.list_tasks(identity, assignee_id=identity.user_id)

    # ─── Update ──────────────────────────────────────────

    async def update_task(
        self,
        identity: IdentityContext,
        task_id: uuid.UUID,
        title: Optional[str] = None,
        description: Optional[str] = None,
        status: Optional[str] = None,
        priority: Optional[str] = None,
        assigned_to: Optional[uuid.UUID] = None,
        due_date: Optional[datetime] = None,
    ) -> Result[Task]:
        """Update task fields; only non-None arguments are applied."""
        task = await self.db.get(Task, task_id)
        if task is None:
            return Failure.not_found("Task")

        decision = authorize(identity, task.tenant_id)
        if decision is Decision.ALLOW and not can_edit(identity, task):
            decision = Decision.FORBIDDEN
        failure = deny(decision, "Task", "You cannot edit this task")
        if failure:
            return failure

        if assigned_to is not None:
            assignee = await get_scoped(self.db, User, assigned_to, identity, "Assignee")
            if isinstance(assignee, Failure):
                return assignee
            task.assigned_to = assigned_to

        if title is not None:
            task.title = title
        if description is not None:
            task.description = description
        if status is not None:
            task.status = status
        if priority is not None:
            task.priority = priority
        if due_date is not None:
            task.due_date = due_date

        await self.db.commit()
        return task

    # ─── Delete ──────────────────────────────────────────

    async def delete_task(
        self, identity: IdentityContext, task_id: uuid.UUID
    ) -> Optional[Failure]:
        task = await get_scoped(
            self.db, Task, task_id, identity, "Task",
            roles=MANAGERS, forbidden_message=_MANAGER_REQUIRED,
        )
        if isinstance(task, Failure):
            return task

        await self.db.execute(delete(Comment).where(Comment.task_id == task.id))
        await self.db.delete(task)
        await self.db.commit()

        logger.info("task.deleted", task_id=str(task_id))
        return None
