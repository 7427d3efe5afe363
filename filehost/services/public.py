from typing import Optional
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from filehost.core.redis import RedisClient
from filehost.core.storage import FileStorage
from filehost.models.file import File
from filehost.repositories.file import FileRepository
from filehost.schemas.file import PublicFileInfo
from filehost.utils.exceptions import NotFoundError

logger = logging.getLogger(__name__)


def public_cache_key(file_id: str) -> str:
    """Get cache key for public file info"""
    return f"file:public:{file_id}"


class PublicFileService:
    """Unauthenticated read path, gated solely by the is_public flag.

    Bytes are always served from a fresh store lookup. Only the /info payload
    is cached, and every cache fill is re-checked against the row.
    """

    def __init__(self, db: AsyncSession, storage: FileStorage, cache: RedisClient):
        self.file_repo = FileRepository(db)
        self.storage = storage
        self.cache = cache

    async def _get_public(self, file_id: str) -> File:
        db_file = await self.file_repo.get_public(file_id)
        if not db_file:
            raise NotFoundError("Public file not found")
        return db_file

    async def get_public_file(self, file_id: str) -> File:
        """A public file whose bytes are present on disk"""
        db_file = await self._get_public(file_id)
        if not await self.storage.file_exists(db_file.file_path):
            logger.warning(f"Public file {file_id} is missing on disk")
            raise NotFoundError("File not found on disk")
        return db_file

    async def get_public_info(self, file_id: str) -> PublicFileInfo:
        key = public_cache_key(file_id)
        cached = await self.cache.get_json(key)
        if cached:
            return PublicFileInfo.model_validate(cached)

        info = PublicFileInfo.model_validate(await self._get_public(file_id))
        if await self.cache.set_json(key, info.model_dump(mode="json")):
            if not await self.file_repo.is_public(file_id):
                await self.cache.delete(key)
                raise NotFoundError("Public file not found")
        return info


async def invalidate_public_cache(cache: RedisClient, file_id: Optional[str]) -> None:
    if file_id:
        await cache.delete(public_cache_key(file_id))
