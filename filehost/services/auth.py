from typing import Optional
from datetime import timedelta
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from filehost.core.config import Settings
from filehost.core.security import create_access_token, decode_token, verify_password
from filehost.repositories.user import UserRepository
from filehost.schemas.auth import LoginResponse, TokenData
from filehost.schemas.user import UserPublic
from filehost.utils.exceptions import AuthenticationError

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, db: AsyncSession, settings: Settings):
        self.user_repo = UserRepository(db)
        self.settings = settings

    async def authenticate(self, username: str, password: str) -> Optional[LoginResponse]:
        """Check credentials and issue a token; None on any mismatch"""
        if not username or not password:
            return None

        user = await self.user_repo.get_by_username(username)
        if not user or not verify_password(password, user.password_hash):
            return None

        token = create_access_token(
            user_id=user.id,
            username=user.username,
            role=user.role,
            secret_key=self.settings.JWT_SECRET_KEY,
            algorithm=self.settings.JWT_ALGORITHM,
            expires_delta=timedelta(hours=self.settings.JWT_EXPIRE_HOURS)
        )
        logger.info(f"User {user.username} logged in")
        return LoginResponse(token=token, user=UserPublic.model_validate(user))


def verify_token(token: str, settings: Settings) -> TokenData:
    """Validate signature and expiry, raising AuthenticationError otherwise"""
    payload = decode_token(token, settings.JWT_SECRET_KEY, settings.JWT_ALGORITHM)
    if not payload:
        raise AuthenticationError("Invalid token")

    return TokenData(
        user_id=payload["sub"],
        username=payload.get("username", ""),
        role=payload["role"]
    )
