from typing import List, Optional
from pydantic import BaseModel, ConfigDict, field_validator
from datetime import datetime

FORBIDDEN_NAME_CHARS = set('<>:"/\\|?*\x00')


def contains_forbidden_chars(value: str) -> bool:
    return any(c in FORBIDDEN_NAME_CHARS for c in value)


class ApplicationCreate(BaseModel):
    name: str

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Application name is required")
        if len(v) < 3:
            raise ValueError("Application name must be at least 3 characters long")
        if len(v) > 50:
            raise ValueError("Application name must be less than 50 characters")
        if contains_forbidden_chars(v):
            raise ValueError("Application name contains invalid characters")
        return v


class Application(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    api_key: str
    folder_path: str
    created_at: Optional[datetime] = None


class ApplicationList(BaseModel):
    applications: List[Application]


class ApiKeyResponse(BaseModel):
    api_key: str
