from typing import List
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from filehost.core.config import Settings
from filehost.core.security import get_password_hash
from filehost.models.user import User
from filehost.repositories.user import UserRepository
from filehost.schemas.user import UserCreate
from filehost.utils.exceptions import ConflictError, NotFoundError

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, db: AsyncSession, settings: Settings):
        self.user_repo = UserRepository(db)
        self.settings = settings

    async def list_users(self) -> List[User]:
        return await self.user_repo.list_all()

    async def create_user(self, user_data: UserCreate) -> User:
        password_hash = get_password_hash(user_data.password, self.settings.BCRYPT_ROUNDS)
        user = await self.user_repo.create(user_data.username, password_hash, user_data.role)
        if not user:
            raise ConflictError("Username already exists")

        logger.info(f"Created user {user.username} with role {user.role}")
        return user

    async def delete_user(self, user_id: str) -> None:
        if not await self.user_repo.delete(user_id):
            raise NotFoundError("User not found")
        logger.info(f"Deleted user {user_id}")
