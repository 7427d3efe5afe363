from datetime import datetime, timedelta, timezone
from typing import Optional
import secrets

from jose import JWTError, jwt
from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

API_KEY_PREFIX = "app_"


def get_password_hash(password: str, rounds: int = 12) -> str:
    return pwd_context.hash(password, rounds=rounds)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        return False


def create_access_token(
    user_id: str,
    username: str,
    role: str,
    secret_key: str,
    algorithm: str = "HS256",
    expires_delta: timedelta = timedelta(hours=24)
) -> str:
    """Sign a token carrying the user's identity and role"""
    expire = datetime.now(timezone.utc) + expires_delta
    to_encode = {
        "sub": user_id,
        "username": username,
        "role": role,
        "exp": int(expire.timestamp()),
    }
    return jwt.encode(to_encode, secret_key, algorithm=algorithm)


def decode_token(token: str, secret_key: str, algorithm: str = "HS256") -> Optional[dict]:
    """Return the claims of a valid token, or None when the signature or expiry check fails"""
    try:
        payload = jwt.decode(token, secret_key, algorithms=[algorithm])
    except JWTError:
        return None

    if not payload.get("sub") or not payload.get("role"):
        return None
    return payload


def generate_api_key() -> str:
    """app_ followed by 32 lowercase hex characters"""
    return f"{API_KEY_PREFIX}{secrets.token_hex(16)}"
