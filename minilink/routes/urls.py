"""URL shortening and statistics API routes."""

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from minilink.config import settings
from minilink.database import get_session
from minilink.schemas.common import ErrorResponse
from minilink.schemas.url import ShortenUrlRequest, ShortenUrlResponse, UrlStatsResponse
from minilink.services import url_service

router = APIRouter()


def public_base_url(request: Request) -> str:
    """Base URL short links are built on: configured value or the request host."""
    return settings.APP_BASE_URL or str(request.base_url)


@router.post(
    "/shorten",
    response_model=ShortenUrlResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Creates a new short URL",
    responses={
        400: {"model": ErrorResponse, "description": "Bad Request"},
        409: {"model": ErrorResponse, "description": "Short ID collision"},
        500: {"model": ErrorResponse, "description": "Internal Server Error"},
    },
)
async def shorten_url(
    body: ShortenUrlRequest,
    request: Request,
    db: AsyncSession = Depends(get_session, scope="function"),
) -> ShortenUrlResponse:
    """
    Create a shortened URL.

    **Request Body:**
    ```json
    {
      "originalUrl": "https://example.com/some/long/path",
      "userId": "123e4567-e89b-12d3-a456-426614174000"
    }
    ```

    **Response:**
    ```json
    {
      "id": "1a2b3c4d",
      "originalUrl": "https://example.com/some/long/path",
      "shortUrl": "http://localhost:8080/1a2b3c4d"
    }
    ```

    **Error Codes:**
    - `VALIDATION_ERROR`: A required field is missing
    - `INVALID_URL`: `originalUrl` is not an absolute URI with a host, or uses a script scheme (`javascript:`, `data:`, `vbscript:`)
    - `UNKNOWN_USER`: `userId` does not reference an existing user
    - `SHORT_ID_COLLISION`: No free short ID could be generated (409)
    """
    return await url_service.create_short_url(db, body, public_base_url(request))


@router.get(
    "/urls/{short_id}/stats",
    response_model=UrlStatsResponse,
    summary="Retrieves statistics for a shortened URL",
    responses={404: {"model": ErrorResponse, "description": "URL not found"}},
)
async def get_url_stats(
    short_id: str,
    db: AsyncSession = Depends(get_session, scope="function"),
) -> UrlStatsResponse:
    """
    Get click statistics for a short URL.

    `clickCount` is 0 and `lastClickedAt` is null until the first redirect.
    """
    return await url_service.get_url_stats(db, short_id)
