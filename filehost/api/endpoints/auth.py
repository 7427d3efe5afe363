from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from filehost.api.deps import get_db, get_settings
from filehost.core.config import Settings
from filehost.schemas.auth import LoginRequest, LoginResponse
from filehost.services.auth import AuthService
from filehost.utils.exceptions import AuthenticationError

router = APIRouter()


@router.post("/login", response_model=LoginResponse)
async def login(
    login_data: LoginRequest,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings)
):
    """Login with username and password"""
    auth_service = AuthService(db, settings)
    result = await auth_service.authenticate(login_data.username, login_data.password)

    if not result:
        raise AuthenticationError("Invalid credentials")

    return result
