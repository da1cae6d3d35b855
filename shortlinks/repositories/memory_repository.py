"""In-process link store.

Suitable for tests and single-process deployments. A mutex is held only
around the check-and-insert step, never across an ``await``, so the store
is safe to share between coroutines and threads.
"""

import threading
from datetime import datetime
from typing import Dict, List, Optional

from shortlinks.models.link import LinkRecord, utcnow
from shortlinks.repositories.base import LinkStore


def _copy(record: LinkRecord) -> LinkRecord:
    return LinkRecord(
        id=record.id,
        code=record.code,
        original_url=record.original_url,
        created_at=record.created_at,
    )


class MemoryLinkStore(LinkStore):
    """Dict-backed LinkStore with an insertion-ordered index.
    
    Records are copied on the way in and out, so callers never share state
    with the store.
    """
    
    def __init__(self):
        self._lock = threading.Lock()
        self._by_code: Dict[str, LinkRecord] = {}
        self._ordered: List[LinkRecord] = []
        self._next_id = 1
        self._last_created_at: Optional[datetime] = None
    
    async def create_if_absent(self, record: LinkRecord) -> bool:
        with self._lock:
            if record.code in self._by_code:
                return False
            
            created_at = utcnow()
            if self._last_created_at is not None and created_at < self._last_created_at:
                created_at = self._last_created_at
            
            record.id = self._next_id
            record.created_at = created_at
            self._next_id += 1
            self._last_created_at = created_at
            
            stored = _copy(record)
            self._by_code[record.code] = stored
            self._ordered.append(stored)
            return True
    
    async def get_by_code(self, code: str) -> Optional[LinkRecord]:
        record = self._by_code.get(code)
        return _copy(record) if record is not None else None
    
    async def list_all(self) -> List[LinkRecord]:
        with self._lock:
            snapshot = list(self._ordered)
        return [_copy(record) for record in reversed(snapshot)]
    
    def __len__(self) -> int:
        return len(self._by_code)
