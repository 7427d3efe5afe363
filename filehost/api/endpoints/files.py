from typing import Optional
from fastapi import APIRouter, Depends, UploadFile, File as FastAPIFile, Form
from fastapi.responses import FileResponse
from sqlalchemy.ext.asyncio import AsyncSession

from filehost.api.deps import get_cache, get_current_application, get_db, get_settings, get_storage
from filehost.core.config import Settings
from filehost.core.redis import RedisClient
from filehost.core.storage import FileStorage
from filehost.models.application import Application
from filehost.schemas.file import (
    File,
    FileList,
    FileRename,
    FileRenameResponse,
    SuccessResponse,
    VisibilityResponse,
    VisibilityUpdate,
)
from filehost.services.file import FileService

router = APIRouter()


def get_file_service(
    db: AsyncSession = Depends(get_db),
    storage: FileStorage = Depends(get_storage),
    settings: Settings = Depends(get_settings),
    cache: RedisClient = Depends(get_cache)
) -> FileService:
    return FileService(db, storage, settings, cache)


@router.post("/upload", response_model=File)
async def upload_file(
    file: Optional[UploadFile] = FastAPIFile(None),
    is_public: bool = Form(False),
    application: Application = Depends(get_current_application),
    file_service: FileService = Depends(get_file_service)
):
    """Upload a new file into the tenant folder"""
    db_file = await file_service.upload_file(application, file, is_public)
    return file_service.to_schema(db_file)


@router.get("", response_model=FileList)
async def list_files(
    application: Application = Depends(get_current_application),
    file_service: FileService = Depends(get_file_service)
):
    """List the tenant's files"""
    files = await file_service.list_files(application)
    return FileList(files=[file_service.to_schema(f) for f in files])


@router.put("/{file_id}/rename", response_model=FileRenameResponse)
async def rename_file(
    file_id: str,
    rename_data: FileRename,
    application: Application = Depends(get_current_application),
    file_service: FileService = Depends(get_file_service)
):
    """Rename a file, keeping its extension"""
    db_file = await file_service.rename_file(application, file_id, rename_data.new_name)
    return FileRenameResponse(new_name=db_file.current_name, file=file_service.to_schema(db_file))


@router.post("/{file_id}/convert-to-webp", response_model=File)
async def convert_to_webp(
    file_id: str,
    application: Application = Depends(get_current_application),
    file_service: FileService = Depends(get_file_service)
):
    """Create a WebP copy of an image as a new file"""
    webp_file = await file_service.convert_to_webp(application, file_id)
    return file_service.to_schema(webp_file)


@router.patch("/{file_id}/visibility", response_model=VisibilityResponse, response_model_exclude_none=True)
async def set_visibility(
    file_id: str,
    visibility: VisibilityUpdate,
    application: Application = Depends(get_current_application),
    file_service: FileService = Depends(get_file_service)
):
    """Publish or unpublish a file on the public gateway"""
    public_url = await file_service.set_visibility(application, file_id, visibility.is_public)
    return VisibilityResponse(is_public=visibility.is_public, public_url=public_url)


@router.delete("/{file_id}", response_model=SuccessResponse)
async def delete_file(
    file_id: str,
    application: Application = Depends(get_current_application),
    file_service: FileService = Depends(get_file_service)
):
    """Delete a file and its record"""
    await file_service.delete_file(application, file_id)
    return SuccessResponse()


@router.get("/{file_id}/download")
async def download_file(
    file_id: str,
    application: Application = Depends(get_current_application),
    file_service: FileService = Depends(get_file_service)
):
    """Download file content as an attachment"""
    db_file = await file_service.get_download(application, file_id)
    return FileResponse(
        db_file.file_path,
        media_type=db_file.file_type,
        filename=db_file.current_name
    )
