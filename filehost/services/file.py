from typing import List, Optional
import logging
import os

from fastapi import UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from filehost.core.config import Settings
from filehost.core.redis import RedisClient
from filehost.core.storage import FileStorage, generate_unique_filename, webp_sibling_name
from filehost.models.application import Application
from filehost.models.file import File
from filehost.repositories.file import FileRepository
from filehost.schemas import file as file_schemas
from filehost.services.public import invalidate_public_cache
from filehost.utils.exceptions import (
    ConflictError,
    FileOperationError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

WEBP_MIME_TYPE = "image/webp"


class FileService:
    """File lifecycle for a single tenant.

    Every operation receives the tenant resolved from the request's API key
    and only ever sees that tenant's rows; another tenant's file id behaves
    exactly like an unknown id.

    Disk and database changes are two separate steps. The disk side happens
    first and the row is committed only after it succeeds; when the commit
    fails the disk change is undone where possible.
    """

    def __init__(self, db: AsyncSession, storage: FileStorage, settings: Settings, cache: RedisClient):
        self.file_repo = FileRepository(db)
        self.storage = storage
        self.settings = settings
        self.cache = cache

    def to_schema(self, db_file: File) -> file_schemas.File:
        """Response model, annotated with the public URL when the file is public"""
        data = file_schemas.File.model_validate(db_file)
        if db_file.is_public:
            data.public_url = self.settings.public_url(db_file.id)
        return data

    async def _get_owned(self, application: Application, file_id: str) -> File:
        db_file = await self.file_repo.get_for_application(file_id, application.id)
        if not db_file:
            raise NotFoundError("File not found")
        return db_file

    async def upload_file(self, application: Application, file: UploadFile, is_public: bool = False) -> File:
        """Validate, write to the tenant folder, then record"""
        if not file or not file.filename:
            raise ValidationError("No file uploaded")

        content_type = file.content_type or ""
        if content_type not in self.settings.ALLOWED_MIME_TYPES:
            raise ValidationError("File type not allowed")

        # Whole payload is buffered in memory
        file_content = await file.read()
        if len(file_content) > self.settings.MAX_FILE_SIZE_BYTES:
            raise ValidationError("File too large. Maximum size is 1GB")

        original_name = os.path.basename(file.filename.replace("\\", "/"))
        if not original_name or "\x00" in original_name:
            raise ValidationError("Invalid filename")

        unique_name = generate_unique_filename(original_name)
        file_path = await self.storage.write_file(application.folder_path, unique_name, file_content)
        size = await self.storage.file_size(file_path)

        try:
            db_file = await self.file_repo.create(
                application_id=application.id,
                original_name=original_name,
                current_name=unique_name,
                file_path=file_path,
                file_type=content_type,
                size=size,
                is_public=is_public
            )
        except Exception as e:
            logger.error(f"Failed to record upload {unique_name} for application {application.id}: {e}")
            await self.storage.delete_file(file_path)
            raise FileOperationError("Failed to save file")

        logger.info(f"Uploaded {unique_name} ({size} bytes) to application {application.id}")
        return db_file

    async def list_files(self, application: Application) -> List[File]:
        return await self.file_repo.get_application_files(application.id)

    async def rename_file(self, application: Application, file_id: str, new_name: str) -> File:
        """Rename on disk, keeping the extension, then update the row"""
        db_file = await self._get_owned(application, file_id)

        ext = os.path.splitext(db_file.current_name)[1]
        new_filename = f"{new_name}{ext}"
        if new_filename == db_file.current_name:
            return db_file

        old_path = db_file.file_path
        new_path = os.path.join(application.folder_path, new_filename)

        try:
            await self.storage.rename_file(old_path, new_path)
        except FileExistsError:
            raise ConflictError("A file with this name already exists")
        except (OSError, ValueError) as e:
            logger.error(f"Failed to rename {old_path} to {new_path}: {e}")
            raise FileOperationError("Failed to rename file")

        try:
            db_file = await self.file_repo.update_name(db_file, new_filename, new_path)
        except Exception as e:
            logger.error(f"Failed to record rename of file {file_id}, reverting disk rename: {e}")
            try:
                await self.storage.rename_file(new_path, old_path)
            except OSError as revert_error:
                logger.error(f"Could not revert rename of {new_path}: {revert_error}")
            raise FileOperationError("Failed to rename file")

        await invalidate_public_cache(self.cache, file_id)
        logger.info(f"Renamed file {file_id} to {new_filename}")
        return db_file

    async def convert_to_webp(self, application: Application, file_id: str) -> File:
        """Write a WebP sibling and record it as a new file; the source is untouched"""
        db_file = await self._get_owned(application, file_id)

        if not db_file.file_type.startswith("image/") or db_file.file_type == WEBP_MIME_TYPE:
            raise ValidationError("File must be a non-WebP image")

        webp_name = webp_sibling_name(db_file.current_name)
        webp_path = os.path.join(application.folder_path, webp_name)

        try:
            size = await self.storage.convert_to_webp(db_file.file_path, webp_path)
        except FileExistsError:
            raise ConflictError("A WebP version of this file already exists")
        except FileNotFoundError:
            raise NotFoundError("File not found on disk")
        except Exception as e:
            logger.error(f"Failed to convert file {file_id} to WebP: {e}")
            raise FileOperationError("Failed to convert image to WebP")

        try:
            webp_file = await self.file_repo.create(
                application_id=application.id,
                original_name=f"{db_file.original_name} (WebP)",
                current_name=webp_name,
                file_path=webp_path,
                file_type=WEBP_MIME_TYPE,
                size=size,
                is_public=db_file.is_public
            )
        except Exception as e:
            logger.error(f"Failed to record WebP conversion of file {file_id}: {e}")
            await self.storage.delete_file(webp_path)
            raise FileOperationError("Failed to convert image to WebP")

        logger.info(f"Converted file {file_id} to WebP as {webp_file.id} ({size} bytes)")
        return webp_file

    async def set_visibility(self, application: Application, file_id: str, is_public: bool) -> Optional[str]:
        """Flip the public flag; returns the public URL when the file is now public"""
        db_file = await self._get_owned(application, file_id)
        db_file = await self.file_repo.set_visibility(db_file, is_public)
        await invalidate_public_cache(self.cache, file_id)

        logger.info(f"File {file_id} is now {'public' if is_public else 'private'}")
        if db_file.is_public:
            return self.settings.public_url(db_file.id)
        return None

    async def delete_file(self, application: Application, file_id: str) -> None:
        """Delete from disk (best effort) and then the record"""
        db_file = await self._get_owned(application, file_id)

        if not await self.storage.delete_file(db_file.file_path):
            logger.warning(f"Continuing deletion of file {file_id} although its bytes could not be removed")

        await self.file_repo.delete(db_file)
        await invalidate_public_cache(self.cache, file_id)
        logger.info(f"Deleted file {file_id}")

    async def get_download(self, application: Application, file_id: str) -> File:
        """The owned record whose bytes are present on disk"""
        db_file = await self._get_owned(application, file_id)
        if not await self.storage.file_exists(db_file.file_path):
            raise NotFoundError("File not found on disk")
        return db_file
