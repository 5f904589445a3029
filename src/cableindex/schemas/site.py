"""Site schemas for validation and responses."""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator


class SiteCreate(BaseModel):
    """Site creation data."""

    name: str = Field(..., min_length=1, max_length=255)
    code: str = Field(..., min_length=1, max_length=20, pattern=r"^[A-Za-z0-9_-]+$")
    description: str | None = None

    @field_validator("code")
    @classmethod
    def upper_code(cls, value: str) -> str:
        return value.upper()


class SiteUpdate(BaseModel):
    """Site update data."""

    name: str | None = Field(None, min_length=1, max_length=255)
    code: str | None = Field(None, min_length=1, max_length=20, pattern=r"^[A-Za-z0-9_-]+$")
    description: str | None = None

    @field_validator("code")
    @classmethod
    def upper_code(cls, value: str | None) -> str | None:
        return value.upper() if value is not None else None


class SiteResponse(BaseModel):
    """Site response data."""

    id: int
    name: str
    code: str
    description: str | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
