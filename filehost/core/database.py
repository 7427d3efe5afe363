import logging
import os
import uuid

from sqlalchemy import event, select
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import declarative_base

from filehost.core.config import Settings
from filehost.core.security import get_password_hash

logger = logging.getLogger(__name__)

# Create Base class for models
Base = declarative_base()


def _enable_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """Owns the engine and session factory for one SQLite file"""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.engine = create_async_engine(
            settings.DATABASE_URL,
            echo=settings.DEBUG,
        )
        event.listen(self.engine.sync_engine, "connect", _enable_foreign_keys)

        self.session_factory = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autocommit=False,
            autoflush=False,
        )

    async def init(self) -> None:
        """Create tables and seed the default admin"""
        # Models must be registered on Base before create_all
        from filehost import models  # noqa: F401

        db_dir = os.path.dirname(os.path.abspath(self.settings.DATABASE_PATH))
        os.makedirs(db_dir, exist_ok=True)

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

        await self.seed_admin()

    async def seed_admin(self) -> None:
        from filehost.models.user import User

        async with self.session_factory() as session:
            result = await session.execute(select(User.id).filter(User.role == "admin").limit(1))
            if result.scalar_one_or_none() is not None:
                return

            session.add(User(
                id=str(uuid.uuid4()),
                username=self.settings.ADMIN_USERNAME,
                password_hash=get_password_hash(self.settings.ADMIN_PASSWORD, self.settings.BCRYPT_ROUNDS),
                role="admin"
            ))
            await session.commit()
            logger.info(f"Seeded default admin account '{self.settings.ADMIN_USERNAME}'")

    async def ping(self) -> bool:
        try:
            async with self.engine.connect() as conn:
                await conn.execute(select(1))
            return True
        except Exception as e:
            logger.error(f"Database health check failed: {e}")
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()

