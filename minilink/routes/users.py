"""User API routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from minilink.database import get_session
from minilink.exceptions import NotFoundError
from minilink.schemas.common import ErrorResponse
from minilink.schemas.url import UserUrlItem
from minilink.schemas.user import CreateUserRequest, UserResponse
from minilink.services import user_service

router = APIRouter()


@router.post(
    "/users",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Creates a new user and returns their information",
    responses={
        400: {"model": ErrorResponse, "description": "Bad Request"},
        409: {"model": ErrorResponse, "description": "Conflict - Email already exists"},
        500: {"model": ErrorResponse, "description": "Internal Server Error"},
    },
)
async def create_user(
    request: CreateUserRequest,
    db: AsyncSession = Depends(get_session, scope="function"),
) -> UserResponse:
    """
    Create a new user.

    **Request Body:**
    ```json
    {
      "firstName": "Ada",
      "lastName": "Lovelace",
      "email": "ada@example.com",
      "phoneNumber": "+44 20 7946 0000",
      "profileImageUrl": "https://example.com/ada.png"
    }
    ```

    `phoneNumber` and `profileImageUrl` are optional. Emails are stored
    lower-cased and must be unique (409 `EMAIL_EXISTS` otherwise).
    """
    user = await user_service.create_user(db, request)
    return UserResponse.model_validate(user)


@router.get(
    "/users/{user_id}",
    response_model=UserResponse,
    summary="Retrieves a user",
    responses={404: {"model": ErrorResponse, "description": "User not found"}},
)
async def get_user(
    user_id: UUID,
    db: AsyncSession = Depends(get_session, scope="function"),
) -> UserResponse:
    """Get a single user by ID."""
    user = await user_service.get_user(db, user_id)
    if not user:
        raise NotFoundError("User not found", details={"userId": str(user_id)})
    return UserResponse.model_validate(user)


@router.get(
    "/users/{user_id}/urls",
    response_model=list[UserUrlItem],
    summary="Retrieves all URLs created by a user with their statistics",
    responses={404: {"model": ErrorResponse, "description": "User not found"}},
)
async def list_user_urls(
    user_id: UUID,
    db: AsyncSession = Depends(get_session, scope="function"),
) -> list[UserUrlItem]:
    """
    List a user's short URLs.

    Each item carries a nested `clicks` object with `clickCount` and
    `lastClickedAt`; never-clicked URLs report 0 and null.
    """
    return await user_service.list_user_urls(db, user_id)
