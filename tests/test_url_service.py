"""Tests for URL shortening and statistics service."""

from datetime import datetime, timezone
from unittest.mock import patch
from uuid import uuid4

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from minilink.exceptions import ConflictError, InternalError, NotFoundError, ValidationError
from minilink.models.click import Click
from minilink.models.url import Url
from minilink.models.user import User
from minilink.schemas.url import ShortenUrlRequest
from minilink.services.url_service import (
    build_short_url,
    create_short_url,
    generate_short_id,
    get_url,
    get_url_stats,
)

BASE_URL = "http://test/"


class TestGenerateShortId:
    def test_length_and_alphabet(self):
        short_id = generate_short_id()
        assert len(short_id) == 8
        assert all(c in "0123456789abcdef" for c in short_id)

    def test_ids_differ(self):
        assert len({generate_short_id() for _ in range(50)}) == 50


class TestBuildShortUrl:
    def test_trailing_slash_collapsed(self):
        assert build_short_url("http://test/", "abcd1234") == "http://test/abcd1234"

    def test_without_trailing_slash(self):
        assert build_short_url("https://mini.link", "abcd1234") == "https://mini.link/abcd1234"


class TestCreateShortUrl:
    async def test_creates_url(self, db: AsyncSession, user: User):
        request = ShortenUrlRequest(original_url="https://example.com/a", user_id=user.id)
        response = await create_short_url(db, request, BASE_URL)

        assert len(response.id) == 8
        assert response.original_url == "https://example.com/a"
        assert response.short_url == f"http://test/{response.id}"
        assert response.id in response.short_url

        stored = await get_url(db, response.id)
        assert stored is not None
        assert stored.user_id == user.id

    async def test_invalid_url(self, db: AsyncSession, user: User):
        request = ShortenUrlRequest(original_url="not a url", user_id=user.id)
        with pytest.raises(ValidationError) as exc_info:
            await create_short_url(db, request, BASE_URL)
        assert exc_info.value.code == "INVALID_URL"

    async def test_empty_url(self, db: AsyncSession, user: User):
        request = ShortenUrlRequest(original_url="   ", user_id=user.id)
        with pytest.raises(ValidationError):
            await create_short_url(db, request, BASE_URL)

    async def test_unknown_user(self, db: AsyncSession):
        request = ShortenUrlRequest(original_url="https://example.com", user_id=uuid4())
        with pytest.raises(ValidationError) as exc_info:
            await create_short_url(db, request, BASE_URL)
        assert exc_info.value.code == "UNKNOWN_USER"

        count = await db.scalar(
            select(func.count()).select_from(Url).where(Url.user_id == request.user_id)
        )
        assert count == 0

    async def test_user_removed_before_insert(self, db: AsyncSession, user: User):
        # The existence check passes, but the foreign key rejects the row
        request = ShortenUrlRequest(original_url="https://example.com", user_id=uuid4())
        with patch("minilink.services.url_service.get_user", return_value=user):
            with pytest.raises(ValidationError) as exc_info:
                await create_short_url(db, request, BASE_URL)
        assert exc_info.value.code == "UNKNOWN_USER"
        assert exc_info.value.status_code == 400

    async def test_storage_failure_raises_internal_error(self, db: AsyncSession, user: User):
        request = ShortenUrlRequest(original_url="https://example.com", user_id=user.id)
        with (
            patch("minilink.services.url_service.get_user", return_value=user),
            patch.object(db, "execute", side_effect=SQLAlchemyError("connection lost")),
        ):
            with pytest.raises(InternalError) as exc_info:
                await create_short_url(db, request, BASE_URL)
        assert exc_info.value.status_code == 500

    async def test_collision_is_retried_with_new_id(self, db: AsyncSession, user: User, make_url):
        taken = await make_url(db, user)
        fresh_id = uuid4().hex[:8]

        with patch(
            "minilink.services.url_service.generate_short_id",
            side_effect=[taken.id, taken.id, fresh_id],
        ) as mock_generate:
            request = ShortenUrlRequest(original_url="https://example.com/b", user_id=user.id)
            response = await create_short_url(db, request, BASE_URL)

        assert response.id == fresh_id
        assert mock_generate.call_count == 3

        # Original row untouched
        await db.refresh(taken)
        assert taken.original_url == "https://example.com/some/long/path"

    async def test_persistent_collision_raises_conflict(
        self, db: AsyncSession, user: User, make_url
    ):
        taken = await make_url(db, user)

        with patch(
            "minilink.services.url_service.generate_short_id",
            return_value=taken.id,
        ) as mock_generate:
            request = ShortenUrlRequest(original_url="https://example.com/c", user_id=user.id)
            with pytest.raises(ConflictError) as exc_info:
                await create_short_url(db, request, BASE_URL)

        assert exc_info.value.code == "SHORT_ID_COLLISION"
        assert exc_info.value.status_code == 409
        assert mock_generate.call_count == 5


class TestGetUrl:
    async def test_found(self, db: AsyncSession, user: User, make_url):
        url = await make_url(db, user)
        found = await get_url(db, url.id)
        assert found is not None
        assert found.original_url == url.original_url

    async def test_not_found(self, db: AsyncSession):
        assert await get_url(db, "00000000") is None

    async def test_without_owner(self, db: AsyncSession, make_url):
        url = await make_url(db)
        await db.refresh(url, ["user", "click"])

        assert url.user_id is None
        assert url.user is None
        assert url.click is None


class TestGetUrlStats:
    async def test_never_clicked(self, db: AsyncSession, user: User, make_url):
        url = await make_url(db, user)
        stats = await get_url_stats(db, url.id)

        assert stats.id == url.id
        assert stats.original_url == url.original_url
        assert stats.short_url == url.short_url
        assert stats.click_count == 0
        assert stats.last_clicked_at is None

    async def test_with_clicks(self, db: AsyncSession, user: User, make_url):
        url = await make_url(db, user)
        clicked_at = datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)
        db.add(Click(url_id=url.id, click_count=7, last_clicked_at=clicked_at))
        await db.flush()

        stats = await get_url_stats(db, url.id)
        assert stats.click_count == 7
        assert stats.last_clicked_at == clicked_at

    async def test_not_found(self, db: AsyncSession):
        with pytest.raises(NotFoundError) as exc_info:
            await get_url_stats(db, "ffffffff")
        assert exc_info.value.status_code == 404
