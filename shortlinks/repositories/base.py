"""Base link store definition for the link shortener service.

This module provides the LinkStore interface shared by every storage
backend and the repository exception hierarchy.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from shortlinks.models.link import LinkRecord


class RepositoryError(Exception):
    """Base exception for repository errors."""
    pass


class StorageUnavailableError(RepositoryError):
    """The storage medium could not complete the operation."""
    pass


class LinkStore(ABC):
    """
    Durable mapping from short code to link record.
    
    Implementations must make ``create_if_absent`` linearizable per code:
    of several concurrent calls racing on one free code, exactly one
    reports ``True``. Records are never modified once stored.
    
    Driver failures are raised as ``StorageUnavailableError``.
    """
    
    async def initialize(self) -> None:
        """Prepare the backing storage (tables, scripts)."""
    
    async def close(self) -> None:
        """Release connections held by the store."""
    
    async def ping(self) -> bool:
        """Return True when the backing storage is reachable."""
        return True
    
    @abstractmethod
    async def create_if_absent(self, record: LinkRecord) -> bool:
        """
        Insert ``record`` keyed by its code unless that code is taken.
        
        On success the store stamps ``record.id`` and ``record.created_at``.
        
        Args:
            record: The link to store
            
        Returns:
            True if the record was inserted, False if the code already exists
            
        Raises:
            StorageUnavailableError: On storage failures
        """
    
    @abstractmethod
    async def get_by_code(self, code: str) -> Optional[LinkRecord]:
        """
        Find a record by its short code.
        
        Returns:
            The LinkRecord if found, None otherwise
        """
    
    @abstractmethod
    async def list_all(self) -> List[LinkRecord]:
        """
        Point-in-time snapshot of every record, newest first.
        """
