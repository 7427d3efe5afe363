from typing import AsyncGenerator, Optional

from fastapi import Depends, Request
from fastapi.security import APIKeyHeader, HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from filehost.core.config import Settings
from filehost.core.redis import RedisClient
from filehost.core.storage import FileStorage
from filehost.models.application import Application
from filehost.schemas.auth import TokenData
from filehost.services.application import ApplicationService
from filehost.services.auth import verify_token
from filehost.utils.exceptions import AuthenticationError, AuthorizationError

bearer_scheme = HTTPBearer(auto_error=False)
api_key_scheme = APIKeyHeader(name="X-API-Key", auto_error=False)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_storage(request: Request) -> FileStorage:
    return request.app.state.storage


def get_cache(request: Request) -> RedisClient:
    return request.app.state.cache


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Dependency to get DB session from the application's store"""
    async with request.app.state.database.session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    settings: Settings = Depends(get_settings)
) -> TokenData:
    # HTTPBearer yields None for a missing header, a foreign scheme or an empty token
    if not credentials:
        raise AuthenticationError("Unauthorized")
    return verify_token(credentials.credentials, settings)


async def require_admin(current_user: TokenData = Depends(get_current_user)) -> TokenData:
    if not current_user.is_admin:
        raise AuthorizationError("Admin access required")
    return current_user


async def get_current_application(
    api_key: Optional[str] = Depends(api_key_scheme),
    db: AsyncSession = Depends(get_db),
    storage: FileStorage = Depends(get_storage),
    cache: RedisClient = Depends(get_cache)
) -> Application:
    """Bind the request to exactly one tenant through its API key"""
    if not api_key:
        raise AuthenticationError("API key required")

    application = await ApplicationService(db, storage, cache).resolve_api_key(api_key)
    if not application:
        raise AuthenticationError("Invalid API key")
    return application
