import redis.asyncio as redis
from typing import Optional
import json
import logging

logger = logging.getLogger(__name__)


class RedisClient:
    """Thin async Redis wrapper; every call is a no-op until connected"""

    def __init__(self, url: Optional[str] = None, default_expire: int = 3600):
        self.url = url
        self.default_expire = default_expire
        self.redis: Optional[redis.Redis] = None

    @property
    def enabled(self) -> bool:
        return self.redis is not None

    async def connect(self):
        """Connect to Redis"""
        if not self.url:
            logger.info("REDIS_URL not set, metadata cache disabled")
            return
        self.redis = redis.from_url(
            self.url,
            encoding="utf-8",
            decode_responses=True
        )
        logger.info("Connected to Redis metadata cache")

    async def disconnect(self):
        """Disconnect from Redis"""
        if self.redis:
            await self.redis.aclose()
            self.redis = None

    async def ping(self) -> bool:
        if not self.redis:
            return False
        try:
            return bool(await self.redis.ping())
        except redis.RedisError as e:
            logger.error(f"Redis health check failed: {e}")
            return False

    async def get(self, key: str) -> Optional[str]:
        """Get value from Redis"""
        if not self.redis:
            return None
        try:
            return await self.redis.get(key)
        except redis.RedisError as e:
            logger.warning(f"Redis get failed for {key}: {e}")
            return None

    async def set(self, key: str, value: str, expire: Optional[int] = None) -> bool:
        """Set value in Redis with expiration"""
        if not self.redis:
            return False
        try:
            return bool(await self.redis.set(key, value, ex=expire or self.default_expire))
        except redis.RedisError as e:
            logger.warning(f"Redis set failed for {key}: {e}")
            return False

    async def delete(self, *keys: str) -> bool:
        """Delete keys from Redis"""
        if not self.redis or not keys:
            return False
        try:
            return await self.redis.delete(*keys) > 0
        except redis.RedisError as e:
            logger.warning(f"Redis delete failed for {keys}: {e}")
            return False

    async def get_json(self, key: str) -> Optional[dict]:
        """Get JSON value from Redis"""
        value = await self.get(key)
        if value:
            try:
                return json.loads(value)
            except json.JSONDecodeError:
                return None
        return None

    async def set_json(self, key: str, value: dict, expire: Optional[int] = None) -> bool:
        """Set JSON value in Redis"""
        try:
            json_str = json.dumps(value, default=str)
        except TypeError:
            return False
        return await self.set(key, json_str, expire)
