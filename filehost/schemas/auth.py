from pydantic import BaseModel

from filehost.schemas.user import UserPublic


class LoginRequest(BaseModel):
    username: str
    password: str


class LoginResponse(BaseModel):
    token: str
    user: UserPublic


class TokenData(BaseModel):
    """Claims carried by a bearer token"""
    user_id: str
    username: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"
