"""Short code resolution endpoint."""

from fastapi import APIRouter, Depends, status
from loguru import logger
from starlette.responses import RedirectResponse

from shortlinks.api.dependencies import get_shortener_service
from shortlinks.api.errors import APIError
from shortlinks.repositories.base import RepositoryError
from shortlinks.services.exceptions import LinkNotFoundError, OperationTimeoutError
from shortlinks.services.shortener import ShortenerService

# Create router with tags
router = APIRouter(tags=["redirect"])


@router.get(
    "/{code}",
    response_class=RedirectResponse,
    status_code=status.HTTP_302_FOUND,
)
async def redirect_to_original_url(
    code: str,
    shortener_service: ShortenerService = Depends(get_shortener_service),
):
    """Redirect to the original URL stored under ``code``."""
    try:
        original_url = await shortener_service.resolve(code)
    except LinkNotFoundError as e:
        raise APIError(status.HTTP_404_NOT_FOUND, str(e))
    except RepositoryError as e:
        logger.error("Storage failure while resolving", code=code, error=str(e))
        raise APIError(status.HTTP_503_SERVICE_UNAVAILABLE, "Storage unavailable")
    except OperationTimeoutError as e:
        raise APIError(status.HTTP_504_GATEWAY_TIMEOUT, str(e))
    
    return RedirectResponse(url=original_url, status_code=status.HTTP_302_FOUND)
