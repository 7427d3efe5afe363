from typing import Optional, List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from filehost.models.user import User


class UserRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, username: str, password_hash: str, role: str) -> Optional[User]:
        """Create a new user, returning None when the username is taken"""
        try:
            db_user = User(
                username=username,
                password_hash=password_hash,
                role=role
            )
            self.db.add(db_user)
            await self.db.commit()
            await self.db.refresh(db_user)
            return db_user
        except IntegrityError:
            await self.db.rollback()
            return None

    async def get_by_id(self, user_id: str) -> Optional[User]:
        """Get user by ID"""
        query = select(User).filter(User.id == user_id)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def get_by_username(self, username: str) -> Optional[User]:
        """Get user by username"""
        query = select(User).filter(User.username == username)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def list_all(self) -> List[User]:
        query = select(User).order_by(User.created_at, User.username)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def delete(self, user_id: str) -> bool:
        """Delete user"""
        user = await self.get_by_id(user_id)
        if not user:
            return False

        await self.db.delete(user)
        await self.db.commit()
        return True
