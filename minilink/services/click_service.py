"""Redirect tracking service for short URL clicks."""

import logging
from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from minilink.exceptions import NotFoundError
from minilink.models.click import Click
from minilink.services.url_service import get_url

logger = logging.getLogger(__name__)


async def get_click(db: AsyncSession, short_id: str) -> Click | None:
    """
    Get the click counter row for a short URL.

    Args:
        db: Database session
        short_id: 8-character short ID

    Returns:
        Click if the URL was ever redirected, None otherwise
    """
    result = await db.execute(
        select(Click)
        .where(Click.url_id == short_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def record_click(db: AsyncSession, short_id: str) -> str:
    """
    Count a redirect and return the original URL.

    The counter is maintained by one INSERT ... ON CONFLICT (url_id) DO UPDATE,
    so concurrent redirects to the same short ID never lose increments.

    Args:
        db: Database session
        short_id: 8-character short ID

    Returns:
        Original URL to redirect to

    Raises:
        NotFoundError: If the short ID does not exist (no click row is written)
    """
    url = await get_url(db, short_id)

    if not url:
        logger.warning(f"Short URL not found for redirect: {short_id}")
        raise NotFoundError("Shortened URL not found", details={"id": short_id})

    clicked_at = datetime.now(timezone.utc)

    stmt = insert(Click).values(
        id=uuid4(),
        url_id=url.id,
        click_count=1,
        last_clicked_at=clicked_at,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=[Click.url_id],
        set_={
            "click_count": Click.click_count + 1,
            "last_clicked_at": stmt.excluded.last_clicked_at,
        },
    )
    await db.execute(stmt)

    logger.info(f"Recorded click for {short_id}")
    return url.original_url
