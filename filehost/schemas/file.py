from typing import List, Optional
from pydantic import BaseModel, ConfigDict, field_validator
from datetime import datetime

from filehost.schemas.application import contains_forbidden_chars


class File(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    application_id: str
    original_name: str
    current_name: str
    file_type: str
    size: int
    is_public: bool
    created_at: Optional[datetime] = None
    public_url: Optional[str] = None


class FileList(BaseModel):
    files: List[File]


class FileRename(BaseModel):
    new_name: str

    @field_validator("new_name")
    @classmethod
    def validate_new_name(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("New name is required")
        if contains_forbidden_chars(v):
            raise ValueError("Filename contains invalid characters")
        return v


class FileRenameResponse(BaseModel):
    success: bool = True
    new_name: str
    file: File


class VisibilityUpdate(BaseModel):
    is_public: bool


class VisibilityResponse(BaseModel):
    success: bool = True
    is_public: bool
    public_url: Optional[str] = None


class PublicFileInfo(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    original_name: str
    current_name: str
    file_type: str
    size: int
    created_at: Optional[datetime] = None
    is_public: bool = True


class SuccessResponse(BaseModel):
    success: bool = True
