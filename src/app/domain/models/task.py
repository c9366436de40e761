from datetime import datetime

from pydantic import BaseModel, Field

from src.app.domain.models.task_status import TaskStatus


class Task(BaseModel):
    id: int = Field(description="Backend-generated task identifier.")
    title: str = Field(description="Short title of the task.")
    description: str | None = Field(default=None, description="Optional details.")
    status: TaskStatus = Field(
        default=TaskStatus.PENDING, description="Current workflow status."
    )
    created_at: datetime = Field(description="Insertion timestamp.")
    updated_at: datetime = Field(description="Last modification timestamp.")
