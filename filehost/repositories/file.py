from typing import Optional, List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, and_

from filehost.models.file import File


class FileRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(
        self,
        application_id: str,
        original_name: str,
        current_name: str,
        file_path: str,
        file_type: str,
        size: int,
        is_public: bool = False
    ) -> File:
        """Create a new file record"""
        db_file = File(
            application_id=application_id,
            original_name=original_name,
            current_name=current_name,
            file_path=file_path,
            file_type=file_type,
            size=size,
            is_public=is_public
        )
        self.db.add(db_file)
        await self.db.commit()
        await self.db.refresh(db_file)
        return db_file

    async def get_by_id(self, file_id: str) -> Optional[File]:
        """Get file by ID"""
        query = select(File).filter(File.id == file_id)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def get_for_application(self, file_id: str, application_id: str) -> Optional[File]:
        """Get a file only if the tenant owns it"""
        query = select(File).filter(
            and_(File.id == file_id, File.application_id == application_id)
        )
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def get_public(self, file_id: str) -> Optional[File]:
        query = select(File).filter(
            and_(File.id == file_id, File.is_public.is_(True))
        )
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def is_public(self, file_id: str) -> bool:
        """Current flag read straight from the row, bypassing loaded instances"""
        result = await self.db.execute(select(File.is_public).filter(File.id == file_id))
        return bool(result.scalar_one_or_none())

    async def get_application_files(self, application_id: str) -> List[File]:
        """Get all files for a tenant"""
        query = (
            select(File)
            .filter(File.application_id == application_id)
            .order_by(File.created_at.desc())
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def update_name(self, db_file: File, current_name: str, file_path: str) -> File:
        db_file.current_name = current_name
        db_file.file_path = file_path
        await self.db.commit()
        await self.db.refresh(db_file)
        return db_file

    async def set_visibility(self, db_file: File, is_public: bool) -> File:
        db_file.is_public = is_public
        await self.db.commit()
        await self.db.refresh(db_file)
        return db_file

    async def delete(self, db_file: File) -> None:
        """Delete file record"""
        await self.db.delete(db_file)
        await self.db.commit()
