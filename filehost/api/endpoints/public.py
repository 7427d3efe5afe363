from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse
from sqlalchemy.ext.asyncio import AsyncSession

from filehost.api.deps import get_cache, get_db, get_settings, get_storage
from filehost.core.config import Settings
from filehost.core.redis import RedisClient
from filehost.core.storage import FileStorage
from filehost.schemas.file import PublicFileInfo
from filehost.services.public import PublicFileService

router = APIRouter()


def get_public_service(
    db: AsyncSession = Depends(get_db),
    storage: FileStorage = Depends(get_storage),
    cache: RedisClient = Depends(get_cache)
) -> PublicFileService:
    return PublicFileService(db, storage, cache)


@router.get("/{file_id}")
async def get_public_file(
    file_id: str,
    public_service: PublicFileService = Depends(get_public_service),
    settings: Settings = Depends(get_settings)
):
    """Serve a public file without authentication"""
    db_file = await public_service.get_public_file(file_id)
    return FileResponse(
        db_file.file_path,
        media_type=db_file.file_type,
        headers={"Cache-Control": f"public, max-age={settings.PUBLIC_CACHE_MAX_AGE}"}
    )


@router.get("/{file_id}/info", response_model=PublicFileInfo)
async def get_public_file_info(
    file_id: str,
    public_service: PublicFileService = Depends(get_public_service)
):
    """Describe a public file without serving its bytes"""
    return await public_service.get_public_info(file_id)
