"""Redirect route for short URLs."""

from fastapi import APIRouter, Depends, status
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from minilink.database import get_session
from minilink.schemas.common import ErrorResponse
from minilink.services import click_service

router = APIRouter()


@router.get(
    "/{short_id}",
    status_code=status.HTTP_302_FOUND,
    response_class=RedirectResponse,
    summary="Redirects to the original URL and increments click count",
    responses={404: {"model": ErrorResponse, "description": "URL not found"}},
)
async def redirect_to_original(
    short_id: str,
    db: AsyncSession = Depends(get_session, scope="function"),
) -> RedirectResponse:
    """
    Redirect to the original URL (302) and count the click.

    Unknown short IDs return 404 and are not counted.
    """
    original_url = await click_service.record_click(db, short_id)

    return RedirectResponse(
        url=original_url,
        status_code=status.HTTP_302_FOUND,
    )
