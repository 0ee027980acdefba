"""URL shortening and statistics service."""

import logging
import secrets

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt

from minilink.config import settings
from minilink.database import FOREIGN_KEY_VIOLATION, get_sqlstate
from minilink.exceptions import ConflictError, InternalError, NotFoundError, ValidationError
from minilink.models.click import Click
from minilink.models.url import SHORT_ID_LENGTH, Url
from minilink.schemas.url import ShortenUrlRequest, ShortenUrlResponse, UrlStatsResponse
from minilink.services.user_service import get_user
from minilink.utils.validators import validate_url

logger = logging.getLogger(__name__)


class ShortIdCollision(Exception):
    """Raised when a generated short ID or short URL is already taken."""

    pass


def generate_short_id() -> str:
    """Return a random 8-character hex token (4 random bytes)."""
    return secrets.token_hex(SHORT_ID_LENGTH // 2)


def build_short_url(base_url: str, short_id: str) -> str:
    """Join the public base URL and a short ID into a redirect link."""
    return f"{base_url.rstrip('/')}/{short_id}"


async def get_url(db: AsyncSession, short_id: str) -> Url | None:
    """
    Get URL by short ID.

    Args:
        db: Database session
        short_id: 8-character short ID

    Returns:
        Url if found, None otherwise
    """
    result = await db.execute(select(Url).where(Url.id == short_id))
    return result.scalar_one_or_none()


async def _insert_url(
    db: AsyncSession,
    request: ShortenUrlRequest,
    base_url: str,
) -> ShortenUrlResponse:
    """Insert a URL row under a fresh short ID, or raise ShortIdCollision."""
    short_id = generate_short_id()
    short_url = build_short_url(base_url, short_id)

    stmt = (
        insert(Url)
        .values(
            id=short_id,
            original_url=request.original_url,
            short_url=short_url,
            user_id=request.user_id,
        )
        .on_conflict_do_nothing()
        .returning(Url.id, Url.original_url, Url.short_url)
    )
    row = (await db.execute(stmt)).one_or_none()

    if row is None:
        logger.warning(f"Short ID collision on {short_id}, regenerating")
        raise ShortIdCollision(short_id)

    return ShortenUrlResponse(
        id=row.id,
        original_url=row.original_url,
        short_url=row.short_url,
    )


async def create_short_url(
    db: AsyncSession,
    request: ShortenUrlRequest,
    base_url: str,
) -> ShortenUrlResponse:
    """
    Create a short URL for the given user.

    The insert skips rows whose ID or short URL already exist; when that
    happens a new ID is generated, up to SHORT_ID_MAX_ATTEMPTS times.

    Args:
        db: Database session
        request: Shorten request
        base_url: Public base URL the short link is built on

    Returns:
        ShortenUrlResponse with id, original URL and short URL

    Raises:
        ValidationError: If the URL is malformed or the user does not exist
        ConflictError: If no free short ID was found
        InternalError: On unexpected storage failure
    """
    is_valid, error_msg = validate_url(request.original_url)
    if not is_valid:
        logger.warning(f"Invalid URL for shortening: {request.original_url[:100]} - {error_msg}")
        raise ValidationError(error_msg or "Invalid URL", code="INVALID_URL")

    user = await get_user(db, request.user_id)
    if not user:
        logger.warning(f"Shorten request for unknown user: {request.user_id}")
        raise ValidationError(
            "User does not exist",
            code="UNKNOWN_USER",
            details={"userId": str(request.user_id)},
        )

    try:
        async for attempt in AsyncRetrying(
            retry=retry_if_exception_type(ShortIdCollision),
            stop=stop_after_attempt(settings.SHORT_ID_MAX_ATTEMPTS),
            reraise=True,
        ):
            with attempt:
                response = await _insert_url(db, request, base_url)

    except ShortIdCollision:
        logger.error(
            f"No free short ID after {settings.SHORT_ID_MAX_ATTEMPTS} attempts"
        )
        raise ConflictError(
            "Could not allocate a unique short ID, please retry",
            code="SHORT_ID_COLLISION",
        )

    except IntegrityError as e:
        if get_sqlstate(e) == FOREIGN_KEY_VIOLATION:
            logger.warning(f"User vanished while shortening: {request.user_id}")
            raise ValidationError("User does not exist", code="UNKNOWN_USER")
        logger.error(f"Integrity error creating short URL: {str(e)}")
        raise InternalError("Failed to create short URL")

    except SQLAlchemyError as e:
        logger.error(f"Database error creating short URL: {str(e)}")
        raise InternalError("Failed to create short URL")

    logger.info(f"Created short URL {response.id} for user {request.user_id}")
    return response


async def get_url_stats(db: AsyncSession, short_id: str) -> UrlStatsResponse:
    """
    Get click statistics for a short URL.

    URLs that were never clicked report a count of 0 and no timestamp.

    Args:
        db: Database session
        short_id: 8-character short ID

    Returns:
        UrlStatsResponse

    Raises:
        NotFoundError: If the short ID does not exist
    """
    stmt = (
        select(
            Url.id,
            Url.original_url,
            Url.short_url,
            Click.click_count,
            Click.last_clicked_at,
        )
        .outerjoin(Click, Click.url_id == Url.id)
        .where(Url.id == short_id)
    )
    row = (await db.execute(stmt)).one_or_none()

    if row is None:
        logger.info(f"Stats requested for unknown short ID: {short_id}")
        raise NotFoundError("URL not found", details={"id": short_id})

    return UrlStatsResponse(
        id=row.id,
        original_url=row.original_url,
        short_url=row.short_url,
        click_count=row.click_count or 0,
        last_clicked_at=row.last_clicked_at,
    )
