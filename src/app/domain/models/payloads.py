from pydantic import BaseModel, Field


class CreateTaskPayload(BaseModel):
    """Body accepted by the create endpoint; rules are enforced by the service."""

    title: str | None = Field(default=None, description="Task title (required).")
    description: str | None = Field(default=None, description="Optional details.")
    status: str | None = Field(
        default=None, description="One of pending, in_progress, completed."
    )


class UpdateTaskPayload(BaseModel):
    """Body accepted by the update endpoint. Any subset of fields may be sent."""

    title: str | None = Field(default=None, description="New title.")
    description: str | None = Field(default=None, description="New description.")
    status: str | None = Field(default=None, description="New status.")
