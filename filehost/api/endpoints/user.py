from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from filehost.api.deps import get_cache, get_current_user, get_db, get_storage
from filehost.core.redis import RedisClient
from filehost.core.storage import FileStorage
from filehost.schemas.application import ApplicationList
from filehost.services.application import ApplicationService

router = APIRouter(dependencies=[Depends(get_current_user)])


@router.get("/applications", response_model=ApplicationList)
async def list_applications(
    db: AsyncSession = Depends(get_db),
    storage: FileStorage = Depends(get_storage),
    cache: RedisClient = Depends(get_cache)
):
    """List tenants visible in the console"""
    applications = await ApplicationService(db, storage, cache).list_applications()
    return {"applications": applications}
