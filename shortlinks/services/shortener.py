"""Link shortening service.

This module contains the ShortenerService class which implements the
business logic for allocating short codes, storing links and resolving
codes back to their original URLs.
"""

import asyncio
import logging
from typing import Awaitable, List, Optional, TypeVar

from pydantic import HttpUrl, TypeAdapter, ValidationError

from shortlinks.models.link import LinkRecord, ShortLink
from shortlinks.repositories.base import LinkStore
from shortlinks.services.codes import CodeGenerator
from shortlinks.services.exceptions import (
    CodeAlreadyExistsError,
    CodeGenerationExhaustedError,
    InvalidCodeError,
    InvalidURLError,
    LinkNotFoundError,
    OperationTimeoutError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

_http_url_adapter = TypeAdapter(HttpUrl)


class ShortenerService:
    """
    Service for link shortening business logic.
    
    The service holds no state of its own beyond references to its code
    generator and link store, so any number of instances may share one
    store.
    """
    
    def __init__(
        self,
        link_store: LinkStore,
        code_generator: CodeGenerator,
        base_url: str,
        max_attempts: int = 5,
        timeout: Optional[float] = None,
    ):
        """
        Initialize the shortening service.
        
        Args:
            link_store: Store holding the code to link mapping
            code_generator: Source of random codes and custom code validation
            base_url: Prefix for fully-qualified short URLs
            max_attempts: Random codes tried before giving up
            timeout: Default per-operation deadline in seconds (None for no deadline)
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.link_store = link_store
        self.code_generator = code_generator
        self.base_url = base_url.rstrip("/")
        self.max_attempts = max_attempts
        self.timeout = timeout
    
    async def shorten(
        self,
        original_url: str,
        custom_code: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> ShortLink:
        """
        Create a short link for ``original_url``.
        
        A custom code is attempted exactly once. Without one, random codes
        are generated and retried on collision up to ``max_attempts`` times.
        
        Args:
            original_url: Absolute http(s) URL to shorten
            custom_code: Optional code requested by the caller
            timeout: Deadline in seconds overriding the service default
            
        Returns:
            ShortLink: The stored link with its short URL
            
        Raises:
            InvalidURLError: If the URL is not an absolute http(s) URL
            InvalidCodeError: If the custom code fails validation
            CodeAlreadyExistsError: If the custom code is taken
            CodeGenerationExhaustedError: If every random code collided
            StorageUnavailableError: If the store fails
            OperationTimeoutError: If the deadline expires
        """
        return await self._with_deadline(
            self._shorten(original_url, custom_code), timeout, "shorten"
        )
    
    async def get_link(self, code: str, timeout: Optional[float] = None) -> ShortLink:
        """
        Look up the full link stored under ``code``.
        
        Raises:
            LinkNotFoundError: If no link uses this code
        """
        record = await self._with_deadline(self._get_record(code), timeout, "get_link")
        return self._to_short_link(record)
    
    async def resolve(self, code: str, timeout: Optional[float] = None) -> str:
        """
        Resolve ``code`` to the original URL.
        
        Raises:
            LinkNotFoundError: If no link uses this code
        """
        record = await self._with_deadline(self._get_record(code), timeout, "resolve")
        return record.original_url
    
    async def list_links(self, timeout: Optional[float] = None) -> List[ShortLink]:
        """All stored links, newest first."""
        records = await self._with_deadline(self.link_store.list_all(), timeout, "list_links")
        return [self._to_short_link(record) for record in records]
    
    async def _shorten(self, original_url: str, custom_code: Optional[str]) -> ShortLink:
        if not self._is_valid_url(original_url):
            raise InvalidURLError(f"Invalid URL: {original_url!r}")
        
        if custom_code is not None:
            return await self._create_custom(original_url, custom_code)
        
        for attempt in range(1, self.max_attempts + 1):
            record = LinkRecord(
                code=self.code_generator.generate_random(),
                original_url=original_url,
            )
            if await self.link_store.create_if_absent(record):
                logger.info(f"Created link '{record.code}' -> {original_url}")
                return self._to_short_link(record)
            logger.warning(
                f"Random code '{record.code}' collided (attempt {attempt}/{self.max_attempts})"
            )
        
        logger.error(
            f"Code generation exhausted after {self.max_attempts} attempts; "
            f"code length {self.code_generator.length} may be too small"
        )
        raise CodeGenerationExhaustedError(
            f"Could not allocate a unique code after {self.max_attempts} attempts"
        )
    
    async def _create_custom(self, original_url: str, custom_code: str) -> ShortLink:
        result = self.code_generator.validate_custom(custom_code)
        if not result.is_valid:
            raise InvalidCodeError(custom_code, result.failure, result.message)
        
        record = LinkRecord(code=custom_code, original_url=original_url)
        if not await self.link_store.create_if_absent(record):
            raise CodeAlreadyExistsError(f"Code '{custom_code}' is already in use")
        
        logger.info(f"Created custom link '{custom_code}' -> {original_url}")
        return self._to_short_link(record)
    
    async def _get_record(self, code: str) -> LinkRecord:
        record = await self.link_store.get_by_code(code)
        if record is None:
            raise LinkNotFoundError(f"Link with code '{code}' not found")
        return record
    
    async def _with_deadline(self, operation: Awaitable[T], timeout: Optional[float], name: str) -> T:
        deadline = timeout if timeout is not None else self.timeout
        try:
            return await asyncio.wait_for(operation, deadline)
        except asyncio.TimeoutError:
            logger.warning(f"Operation '{name}' exceeded its {deadline}s deadline")
            raise OperationTimeoutError(f"Operation '{name}' timed out after {deadline}s")
    
    def _to_short_link(self, record: LinkRecord) -> ShortLink:
        return ShortLink.from_record(record, self.base_url)
    
    @staticmethod
    def _is_valid_url(url: str) -> bool:
        """True for absolute http(s) URLs with a host, as given (no surrounding whitespace)."""
        if not isinstance(url, str) or not url or url != url.strip():
            return False
        try:
            parsed = _http_url_adapter.validate_python(url)
        except ValidationError:
            return False
        return parsed.scheme in ("http", "https") and bool(parsed.host)
