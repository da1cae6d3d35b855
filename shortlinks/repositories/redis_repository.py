"""Redis link store for the link shortener service.

Key layout under ``prefix``:

    <prefix>:links              hash   code -> JSON record
    <prefix>:links:by_created   zset   code scored by insertion sequence
    <prefix>:links:seq          string insertion sequence / id counter

Create-if-absent and listing run as server-side scripts so each is atomic
with respect to every other client.
"""

import functools
import json
import logging
from datetime import datetime
from typing import Any, Callable, List, Optional, TypeVar

import redis.asyncio as redis
from redis.exceptions import RedisError

from shortlinks.models.link import LinkRecord, utcnow
from shortlinks.repositories.base import LinkStore, StorageUnavailableError

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

CREATE_IF_ABSENT_SCRIPT = """
if redis.call('HEXISTS', KEYS[1], ARGV[1]) == 1 then
    return 0
end
local id = redis.call('INCR', KEYS[3])
-- ARGV[2] is the JSON record without its id
local record = '{"id":' .. string.format('%d', id) .. ',' .. string.sub(ARGV[2], 2)
redis.call('HSET', KEYS[1], ARGV[1], record)
redis.call('ZADD', KEYS[2], id, ARGV[1])
return id
"""

LIST_ALL_SCRIPT = """
local codes = redis.call('ZREVRANGE', KEYS[2], 0, -1)
local records = {}
for i, code in ipairs(codes) do
    records[i] = redis.call('HGET', KEYS[1], code)
end
return records
"""


def handle_redis_errors(method: F) -> F:
    """Wrap Redis-interacting store methods so driver failures surface as StorageUnavailableError."""

    @functools.wraps(method)
    async def wrapper(self, *args, **kwargs):
        try:
            return await method(self, *args, **kwargs)
        except (RedisError, OSError) as e:
            logger.error(f"Redis error in {method.__name__}: {e}")
            raise StorageUnavailableError(f"Redis error in {method.__name__}: {e}") from e

    return wrapper


def _decode_record(raw: Any) -> LinkRecord:
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8")
    data = json.loads(raw)
    return LinkRecord(
        id=int(data["id"]),
        code=data["code"],
        original_url=data["original_url"],
        created_at=datetime.fromisoformat(data["created_at"]),
    )


class RedisLinkStore(LinkStore):
    """LinkStore backed by Redis."""
    
    def __init__(self, client: redis.Redis, prefix: str = "shortlinks"):
        self.redis = client
        self.prefix = prefix
        self._create_script = client.register_script(CREATE_IF_ABSENT_SCRIPT)
        self._list_script = client.register_script(LIST_ALL_SCRIPT)
    
    @classmethod
    def from_url(cls, url: str, prefix: str = "shortlinks") -> "RedisLinkStore":
        client = redis.Redis.from_url(url, decode_responses=True)
        return cls(client, prefix=prefix)
    
    @property
    def records_key(self) -> str:
        return f"{self.prefix}:links"
    
    @property
    def index_key(self) -> str:
        return f"{self.prefix}:links:by_created"
    
    @property
    def sequence_key(self) -> str:
        return f"{self.prefix}:links:seq"
    
    async def close(self) -> None:
        await self.redis.aclose()
    
    async def ping(self) -> bool:
        try:
            return bool(await self.redis.ping())
        except (RedisError, OSError) as e:
            logger.error(f"Redis ping failed: {e}")
            return False
    
    @handle_redis_errors
    async def create_if_absent(self, record: LinkRecord) -> bool:
        created_at = utcnow()
        payload = json.dumps({
            "code": record.code,
            "original_url": record.original_url,
            "created_at": created_at.isoformat(),
        })
        new_id = await self._create_script(
            keys=[self.records_key, self.index_key, self.sequence_key],
            args=[record.code, payload],
        )
        if not new_id:
            return False
        
        record.id = int(new_id)
        record.created_at = created_at
        return True
    
    @handle_redis_errors
    async def get_by_code(self, code: str) -> Optional[LinkRecord]:
        raw = await self.redis.hget(self.records_key, code)
        if raw is None:
            return None
        return _decode_record(raw)
    
    @handle_redis_errors
    async def list_all(self) -> List[LinkRecord]:
        rows = await self._list_script(keys=[self.records_key, self.index_key])
        return [_decode_record(raw) for raw in rows if raw]
