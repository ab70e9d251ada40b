from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator


class UserRead(BaseModel):
    id: UUID
    email: str
    display_name: str
    avatar_url: str | None = None
    role: str
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class UserUpdate(BaseModel):
    display_name: str | None = Field(None, min_length=1, max_length=255)
    avatar_url: str | None = Field(None, max_length=2048)

    @field_validator("display_name")
    @classmethod
    def reject_null_display_name(cls, v: str | None) -> str:
        if v is None:
            raise ValueError("may be omitted but not null")
        return v
