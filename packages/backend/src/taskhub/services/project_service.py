"""Project service — tenant-scoped project CRUD.

Any role may create, read and update projects in its own tenant;
deleting one (together with its tasks and their comments) needs ADMIN
or MANAGER.
"""

import uuid
from typing import Optional

import structlog
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.auth.identity import MANAGERS, IdentityContext
from taskhub.db.models import Comment, Project, Task
from taskhub.errors import Failure, Result
from taskhub.services.base import get_scoped

logger = structlog.get_logger()


class ProjectService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_project(
        self,
        identity: IdentityContext,
        name: str,
        description: Optional[str] = None,
    ) -> Project:
        project = Project(
            tenant_id=identity.tenant_id,
            name=name,
            description=description,
            created_by=identity.user_id,
        )
        self.db.add(project)
        await self.db.commit()
        logger.info("project.created", project_id=str(project.id))
        return project

    async def list_projects(self, identity: IdentityContext) -> list[Project]:
        result = await self.db.execute(
            select(Project)
            .where(Project.tenant_id == identity.tenant_id)
            .order_by(Project.created_at.desc())
        )
        return list(result.scalars().all())

    async def get_project(
        self, identity: IdentityContext, project_id: uuid.UUID
    ) -> Result[Project]:
        return await get_scoped(self.db, Project, project_id, identity, "Project")

    async def update_project(
        self,
        identity: IdentityContext,
        project_id: uuid.UUID,
        name: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Result[Project]:
        project = await self.get_project(identity, project_id)
        if isinstance(project, Failure):
            return project

        if name is not None:
            project.name = name
        if description is not None:
            project.description = description

        await self.db.commit()
        return project

    async def delete_project(
        self, identity: IdentityContext, project_id: uuid.UUID
    ) -> Optional[Failure]:
        """Delete a project with all of its tasks and their comments."""
        project = await get_scoped(
            self.db, Project, project_id, identity, "Project",
            roles=MANAGERS, forbidden_message="ADMIN or MANAGER role required",
        )
        if isinstance(project, Failure):
            return project

        task_ids = select(Task.id).where(Task.project_id == project.id)
        await self.db.execute(delete(Comment).where(Comment.task_id.in_(task_ids)))
        await self.db.execute(delete(Task).where(Task.project_id == project.id))
        await self.db.delete(project)
        await self.db.commit()

        logger.info("project.deleted", project_id=str(project_id))
        return None
