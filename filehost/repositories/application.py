from typing import Optional, List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete
from sqlalchemy.exc import IntegrityError

from filehost.models.application import Application
from filehost.models.file import File


class ApplicationRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, name: str, api_key: str, folder_path: str) -> Optional[Application]:
        """Create a tenant, returning None when the name or key is already taken"""
        try:
            db_app = Application(
                name=name,
                api_key=api_key,
                folder_path=folder_path
            )
            self.db.add(db_app)
            await self.db.commit()
            await self.db.refresh(db_app)
            return db_app
        except IntegrityError:
            await self.db.rollback()
            return None

    async def get_by_id(self, application_id: str) -> Optional[Application]:
        query = select(Application).filter(Application.id == application_id)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def get_by_api_key(self, api_key: str) -> Optional[Application]:
        query = select(Application).filter(Application.api_key == api_key)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def list_all(self) -> List[Application]:
        query = select(Application).order_by(Application.created_at, Application.name)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_file_ids(self, application_id: str) -> List[str]:
        query = select(File.id).filter(File.application_id == application_id)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def delete(self, application_id: str) -> bool:
        """Delete the tenant row and every file row it owns"""
        db_app = await self.get_by_id(application_id)
        if not db_app:
            return False

        await self.db.execute(delete(File).where(File.application_id == application_id))
        await self.db.delete(db_app)
        await self.db.commit()
        return True

    async def update_api_key(self, application_id: str, api_key: str) -> Optional[Application]:
        db_app = await self.get_by_id(application_id)
        if not db_app:
            return None

        db_app.api_key = api_key
        await self.db.commit()
        await self.db.refresh(db_app)
        return db_app
