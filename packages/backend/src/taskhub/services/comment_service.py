"""Comment service — comments on tasks.

Anyone in the tenant may comment on a task and read its comments.
Deleting a comment is owner-gated: its author, or any ADMIN.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.auth.guard import authorize, deny
from taskhub.auth.identity import IdentityContext
from taskhub.db.models import Comment, Task, User
from taskhub.errors import Failure, Result
from taskhub.services.base import get_scoped

logger = structlog.get_logger()


@dataclass(frozen=True, slots=True)
class CommentView:
    """A comment joined with its author's display fields."""

    id: uuid.UUID
    task_id: uuid.UUID
    user_id: uuid.UUID
    user_email: str
    user_name: str
    content: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def build(cls, comment: Comment, author: Optional[User]) -> "CommentView":
        return cls(
            id=comment.id,
            task_id=comment.task_id,
            user_id=comment.user_id,
            user_email=author.email if author else "Unknown",
            user_name=author.full_name if author else "Unknown",
            content=comment.content,
            created_at=comment.created_at,
            updated_at=comment.updated_at,
        )


class CommentService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def add_comment(
        self,
        identity: IdentityContext,
        task_id: uuid.UUID,
        content: str,
    ) -> Result[CommentView]:
        task = await get_scoped(self.db, Task, task_id, identity, "Task")
        if isinstance(task, Failure):
            return task

        comment = Comment(
            tenant_id=identity.tenant_id,
            task_id=task.id,
            user_id=identity.user_id,
            content=content,
        )
        self.db.add(comment)
        await self.db.commit()

        author = await self.db.get(User, identity.user_id)
        logger.info("comment.created", comment_id=str(comment.id), task_id=str(task.id))
        return CommentView.build(comment, author)

    async def list_comments(
        self, identity: IdentityContext, task_id: uuid.UUID
    ) -> Result[list[CommentView]]:
        """Comments of one task, newest first."""
        task = await get_scoped(self.db, Task, task_id, identity, "Task")
        if isinstance(task, Failure):
            return task

        result = await self.db.execute(
            select(Comment, User)
            .outerjoin(User, User.id == Comment.user_id)
            .where(Comment.task_id == task.id, Comment.tenant_id == identity.tenant_id)
            .order_by(Comment.created_at.desc())
        )
        return [CommentView.build(comment, author) for comment, author in result.all()]

    async def delete_comment(
        self,
        identity: IdentityContext,
        task_id: uuid.UUID,
        comment_id: uuid.UUID,
    ) -> Optional[Failure]:
        comment = await self.db.get(Comment, comment_id)
        # A comment addressed through the wrong task does not exist there.
        if comment is None or comment.task_id != task_id:
            return Failure.not_found("Comment")

        decision = authorize(
            identity, comment.tenant_id, owner_id=comment.user_id, owner_check=True
        )
        failure = deny(decision, "Comment", "You can only delete your own comments")
        if failure:
            return failure

        await self.db.delete(comment)
        await self.db.commit()
        logger.info("comment.deleted", comment_id=str(comment_id))
        return None
