from typing import List, Optional
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from filehost.core.redis import RedisClient
from filehost.core.security import generate_api_key
from filehost.core.storage import FileStorage
from filehost.models.application import Application
from filehost.repositories.application import ApplicationRepository
from filehost.schemas.application import ApplicationCreate
from filehost.services.public import public_cache_key
from filehost.utils.exceptions import ConflictError, NotFoundError

logger = logging.getLogger(__name__)


class ApplicationService:
    def __init__(self, db: AsyncSession, storage: FileStorage, cache: RedisClient):
        self.app_repo = ApplicationRepository(db)
        self.storage = storage
        self.cache = cache

    async def list_applications(self) -> List[Application]:
        return await self.app_repo.list_all()

    async def create_application(self, app_data: ApplicationCreate) -> Application:
        """Create the tenant folder, then the row; a taken name is a conflict"""
        folder_path = self.storage.tenant_folder(app_data.name)
        await self.storage.ensure_folder(folder_path)

        db_app = await self.app_repo.create(
            name=app_data.name,
            api_key=generate_api_key(),
            folder_path=folder_path
        )
        if not db_app:
            raise ConflictError("Application name already exists")

        logger.info(f"Created application {db_app.name} ({db_app.id})")
        return db_app

    async def delete_application(self, application_id: str) -> None:
        """Remove the tenant, its file rows and its folder on disk"""
        db_app = await self.app_repo.get_by_id(application_id)
        if not db_app:
            raise NotFoundError("Application not found")

        folder_path = db_app.folder_path
        file_ids = await self.app_repo.get_file_ids(application_id)

        await self.app_repo.delete(application_id)
        await self.cache.delete(*[public_cache_key(file_id) for file_id in file_ids])
        await self.storage.remove_folder(folder_path)

        logger.info(f"Deleted application {application_id} and {len(file_ids)} file records")

    async def regenerate_api_key(self, application_id: str) -> str:
        """Replace the key; the previous one stops working immediately"""
        db_app = await self.app_repo.update_api_key(application_id, generate_api_key())
        if not db_app:
            raise NotFoundError("Application not found")

        logger.info(f"Regenerated API key for application {application_id}")
        return db_app.api_key

    async def resolve_api_key(self, api_key: Optional[str]) -> Optional[Application]:
        if not api_key:
            return None
        return await self.app_repo.get_by_api_key(api_key)
