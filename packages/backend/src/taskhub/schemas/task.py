"""Schemas for tasks and comments.

- TaskCreate: what you POST to create a task
- TaskUpdate: what you PUT to modify a task (all optional)
- TaskRead: what the API returns
"""

import uuid
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import Field

from taskhub.schemas.base import CamelModel


class TaskStatus(str, Enum):
    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"


class TaskPriority(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


# ─── Tasks ───────────────────────────────────────────────

class TaskCreate(CamelModel):
    project_id: uuid.UUID
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=5000)
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM
    assigned_to: Optional[uuid.UUID] = None
    due_date: Optional[datetime] = None


class TaskUpdate(CamelModel):
    """Partial update — only non-None fields are applied."""
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=5000)
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    assigned_to: Optional[uuid.UUID] = None
    due_date: Optional[datetime] = None


class TaskRead(CamelModel):
    id: uuid.UUID
    project_id: uuid.UUID
    title: str
    description: Optional[str]
    status: TaskStatus
    priority: TaskPriority
    assigned_to: Optional[uuid.UUID]
    created_by: uuid.UUID
    due_date: Optional[datetime]
    created_at: datetime
    updated_at: datetime


# ─── Comments ────────────────────────────────────────────

class CommentCreate(CamelModel):
    content: str = Field(..., min_length=1, max_length=5000)


class CommentRead(CamelModel):
    id: uuid.UUID
    task_id: uuid.UUID
    user_id: uuid.UUID
    user_email: str
    user_name: str
    content: str
    created_at: datetime
    updated_at: datetime
