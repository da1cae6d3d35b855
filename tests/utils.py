"""Test utilities for link shortener tests."""

import random
import string
from typing import List, Optional

from shortlinks.models.link import LinkRecord
from shortlinks.repositories.base import StorageUnavailableError
from shortlinks.repositories.memory_repository import MemoryLinkStore


def random_string(length: int = 10) -> str:
    """Generate a random alphanumeric string."""
    return ''.join(random.choice(string.ascii_letters + string.digits) for _ in range(length))


def random_url() -> str:
    """Generate a random URL for testing."""
    domain = f"{random_string(8).lower()}.com"
    path = random_string(12)
    return f"https://{domain}/{path}"


def make_record(code: Optional[str] = None, original_url: Optional[str] = None) -> LinkRecord:
    return LinkRecord(code=code or random_string(6), original_url=original_url or random_url())


class FirstChoice:
    """Random source that always picks the first element, so every code is identical."""

    def choice(self, seq):
        return seq[0]


class RecordingLinkStore(MemoryLinkStore):
    """Memory store that records every code it was asked to insert."""

    def __init__(self):
        super().__init__()
        self.attempted: List[str] = []

    async def create_if_absent(self, record: LinkRecord) -> bool:
        self.attempted.append(record.code)
        return await super().create_if_absent(record)


class FailingLinkStore(MemoryLinkStore):
    """Memory store whose storage medium is down."""

    async def ping(self) -> bool:
        return False

    async def create_if_absent(self, record: LinkRecord) -> bool:
        raise StorageUnavailableError("disk on fire")

    async def get_by_code(self, code: str):
        raise StorageUnavailableError("disk on fire")

    async def list_all(self):
        raise StorageUnavailableError("disk on fire")
