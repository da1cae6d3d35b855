"""API dependencies for FastAPI.

This module provides dependency injection functions for FastAPI endpoints
to access the link store, the shortening service and the authorization
precondition.
"""

import secrets
from typing import Optional

from fastapi import Depends, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from shortlinks.api.errors import APIError
from shortlinks.core.config import settings
from shortlinks.repositories.base import LinkStore
from shortlinks.services.codes import CodeGenerator
from shortlinks.services.shortener import ShortenerService

bearer_scheme = HTTPBearer(auto_error=False)


async def get_link_store(request: Request) -> LinkStore:
    """Get the link store owned by the application."""
    return request.app.state.link_store


async def get_code_generator() -> CodeGenerator:
    """Get a code generator configured from settings."""
    return CodeGenerator(
        length=settings.CODE_LENGTH,
        min_length=settings.CUSTOM_CODE_MIN_LENGTH,
        max_length=settings.CUSTOM_CODE_MAX_LENGTH,
    )


def get_base_url() -> str:
    """Get the base URL for shortened links."""
    return settings.BASE_URL


async def get_shortener_service(
    link_store: LinkStore = Depends(get_link_store),
    code_generator: CodeGenerator = Depends(get_code_generator),
    base_url: str = Depends(get_base_url),
) -> ShortenerService:
    """Get an instance of the link shortening service."""
    return ShortenerService(
        link_store=link_store,
        code_generator=code_generator,
        base_url=base_url,
        max_attempts=settings.CODE_GENERATION_ATTEMPTS,
        timeout=settings.OPERATION_TIMEOUT_SECONDS,
    )


def get_api_tokens() -> list:
    return list(settings.API_TOKENS)


async def require_bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    api_tokens: list = Depends(get_api_tokens),
) -> None:
    """
    Authorization precondition for the link routes.
    
    With no tokens configured the caller is assumed to have been
    authorized by an upstream collaborator.
    """
    if not api_tokens:
        return
    
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise APIError(
            status.HTTP_401_UNAUTHORIZED,
            "Missing bearer token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    
    presented = credentials.credentials.encode()
    if not any(secrets.compare_digest(presented, token.encode()) for token in api_tokens):
        raise APIError(
            status.HTTP_401_UNAUTHORIZED,
            "Invalid bearer token",
            headers={"WWW-Authenticate": "Bearer"},
        )
