"""Base DTO class."""

from pydantic import BaseModel, ConfigDict


class DTO(BaseModel):
    """Immutable result returned by the group session use cases. Unknown fields are rejected."""

    model_config = ConfigDict(frozen=True, extra="forbid")
