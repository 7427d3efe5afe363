from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from filehost.api.deps import get_cache, get_db, get_settings, get_storage, require_admin
from filehost.core.config import Settings
from filehost.core.redis import RedisClient
from filehost.core.storage import FileStorage
from filehost.schemas.application import ApiKeyResponse, Application, ApplicationCreate
from filehost.schemas.file import SuccessResponse
from filehost.schemas.user import UserCreate, UserList, UserPublic
from filehost.services.application import ApplicationService
from filehost.services.user import UserService

router = APIRouter(dependencies=[Depends(require_admin)])


@router.get("/users", response_model=UserList)
async def list_users(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings)
):
    """List all console users"""
    users = await UserService(db, settings).list_users()
    return {"users": users}


@router.post("/users", response_model=UserPublic)
async def create_user(
    user_data: UserCreate,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings)
):
    """Create a console user"""
    return await UserService(db, settings).create_user(user_data)


@router.delete("/users/{user_id}", response_model=SuccessResponse)
async def delete_user(
    user_id: str,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings)
):
    """Delete a console user"""
    await UserService(db, settings).delete_user(user_id)
    return SuccessResponse()


@router.post("/applications", response_model=Application)
async def create_application(
    app_data: ApplicationCreate,
    db: AsyncSession = Depends(get_db),
    storage: FileStorage = Depends(get_storage),
    cache: RedisClient = Depends(get_cache)
):
    """Create a tenant with a fresh API key and storage folder"""
    return await ApplicationService(db, storage, cache).create_application(app_data)


@router.delete("/applications/{application_id}", response_model=SuccessResponse)
async def delete_application(
    application_id: str,
    db: AsyncSession = Depends(get_db),
    storage: FileStorage = Depends(get_storage),
    cache: RedisClient = Depends(get_cache)
):
    """Delete a tenant together with its files"""
    await ApplicationService(db, storage, cache).delete_application(application_id)
    return SuccessResponse()


@router.put("/applications/{application_id}/regenerate-key", response_model=ApiKeyResponse)
async def regenerate_api_key(
    application_id: str,
    db: AsyncSession = Depends(get_db),
    storage: FileStorage = Depends(get_storage),
    cache: RedisClient = Depends(get_cache)
):
    """Replace a tenant's API key"""
    api_key = await ApplicationService(db, storage, cache).regenerate_api_key(application_id)
    return ApiKeyResponse(api_key=api_key)
