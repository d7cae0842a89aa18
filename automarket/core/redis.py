import hashlib
import json
import redis.asyncio as redis
from automarket.core.config import settings


class RedisClient:
    def __init__(self, redis_url: str = settings.redis_url):
        self.client = redis.from_url(redis_url, decode_responses=True)
        self.prefix = "auth_identity"
        self.ttl = settings.auth_cache_ttl  # seconds

    def _key(self, token: str) -> str:
        digest = hashlib.sha256(token.encode()).hexdigest()
        return f"{self.prefix}:{digest}"

    async def set_identity(self, token: str, identity: dict) -> None:
        """Cache an auth-provider identity for a bearer token"""
        await self.client.set(self._key(token), json.dumps(identity), ex=self.ttl)

    async def get_identity(self, token: str) -> dict | None:
        """Get a cached identity, None on miss"""
        cached = await self.client.get(self._key(token))
        if not cached:
            return None
        return json.loads(cached)

    async def drop_identity(self, token: str) -> None:
        await self.client.delete(self._key(token))

    async def close(self):
        """Close Redis's connection"""
        await self.client.close()


redis_client = RedisClient()
