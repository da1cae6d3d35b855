"""Link creation and listing endpoints."""

from typing import List

from fastapi import APIRouter, Depends, Path, status
from loguru import logger

from shortlinks.api import schemas
from shortlinks.api.dependencies import get_shortener_service, require_bearer_token
from shortlinks.api.errors import APIError
from shortlinks.repositories.base import RepositoryError
from shortlinks.services.exceptions import (
    CodeAlreadyExistsError,
    CodeGenerationExhaustedError,
    InvalidCodeError,
    InvalidURLError,
    LinkNotFoundError,
    OperationTimeoutError,
)
from shortlinks.services.shortener import ShortenerService

router = APIRouter(tags=["links"], dependencies=[Depends(require_bearer_token)])


@router.post(
    "/shorten",
    response_model=schemas.LinkResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": schemas.ErrorResponse, "description": "Invalid URL or custom code"},
        409: {"model": schemas.ErrorResponse, "description": "Custom code already exists"},
        503: {"model": schemas.ErrorResponse, "description": "Storage unavailable or codes exhausted"},
        504: {"model": schemas.ErrorResponse, "description": "Operation timed out"},
    }
)
async def shorten_url(
    payload: schemas.ShortenRequest,
    shortener_service: ShortenerService = Depends(get_shortener_service),
):
    try:
        link = await shortener_service.shorten(
            original_url=payload.url,
            custom_code=payload.custom_code,
        )
        return schemas.LinkResponse.from_link(link)
    except InvalidURLError as e:
        raise APIError(status.HTTP_400_BAD_REQUEST, str(e))
    except InvalidCodeError as e:
        raise APIError(status.HTTP_400_BAD_REQUEST, str(e), reason=e.reason.value)
    except CodeAlreadyExistsError as e:
        raise APIError(status.HTTP_409_CONFLICT, str(e))
    except CodeGenerationExhaustedError as e:
        raise APIError(status.HTTP_503_SERVICE_UNAVAILABLE, str(e))
    except RepositoryError as e:
        logger.error("Storage failure while shortening", error=str(e))
        raise APIError(status.HTTP_503_SERVICE_UNAVAILABLE, "Storage unavailable")
    except OperationTimeoutError as e:
        raise APIError(status.HTTP_504_GATEWAY_TIMEOUT, str(e))


@router.get(
    "/links",
    response_model=List[schemas.LinkResponse],
    responses={
        503: {"model": schemas.ErrorResponse, "description": "Storage unavailable"},
        504: {"model": schemas.ErrorResponse, "description": "Operation timed out"},
    }
)
async def list_links(
    shortener_service: ShortenerService = Depends(get_shortener_service),
):
    """List every stored link, newest first."""
    try:
        links = await shortener_service.list_links()
    except RepositoryError as e:
        logger.error("Storage failure while listing links", error=str(e))
        raise APIError(status.HTTP_503_SERVICE_UNAVAILABLE, "Storage unavailable")
    except OperationTimeoutError as e:
        raise APIError(status.HTTP_504_GATEWAY_TIMEOUT, str(e))
    return [schemas.LinkResponse.from_link(link) for link in links]


@router.get(
    "/links/{code}",
    response_model=schemas.LinkResponse,
    responses={
        404: {"model": schemas.ErrorResponse, "description": "Link not found"},
        503: {"model": schemas.ErrorResponse, "description": "Storage unavailable"},
    }
)
async def get_link(
    code: str = Path(..., description="The short code of the link"),
    shortener_service: ShortenerService = Depends(get_shortener_service),
):
    try:
        link = await shortener_service.get_link(code)
    except LinkNotFoundError as e:
        raise APIError(status.HTTP_404_NOT_FOUND, str(e))
    except RepositoryError as e:
        logger.error("Storage failure while reading link", code=code, error=str(e))
        raise APIError(status.HTTP_503_SERVICE_UNAVAILABLE, "Storage unavailable")
    except OperationTimeoutError as e:
        raise APIError(status.HTTP_504_GATEWAY_TIMEOUT, str(e))
    return schemas.LinkResponse.from_link(link)
