"""User management service."""

import logging
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from minilink.database import UNIQUE_VIOLATION, get_sqlstate
from minilink.exceptions import ConflictError, InternalError, NotFoundError, ValidationError
from minilink.models.click import Click
from minilink.models.url import Url
from minilink.models.user import User
from minilink.schemas.url import ClickStats, UserUrlItem
from minilink.schemas.user import CreateUserRequest
from minilink.utils.validators import validate_email, validate_phone_number, validate_url

logger = logging.getLogger(__name__)


async def get_user(db: AsyncSession, user_id: UUID | str) -> User | None:
    """
    Get user by ID.

    Args:
        db: Database session
        user_id: User UUID or string

    Returns:
        User if found, None otherwise
    """
    if isinstance(user_id, str):
        try:
            user_id = UUID(user_id)
        except ValueError:
            logger.warning(f"Invalid user ID format: {user_id}")
            return None

    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def create_user(db: AsyncSession, request: CreateUserRequest) -> User:
    """
    Register a new user.

    Args:
        db: Database session
        request: Signup request

    Returns:
        Created user record

    Raises:
        ValidationError: If a field is malformed
        ConflictError: If the email is already registered
        InternalError: On unexpected storage failure
    """
    is_valid, error_msg = validate_email(request.email)
    if not is_valid:
        logger.warning(f"Invalid email for signup: {request.email}")
        raise ValidationError(error_msg or "Invalid email address", code="INVALID_EMAIL")

    is_valid, error_msg = validate_phone_number(request.phone_number)
    if not is_valid:
        raise ValidationError(error_msg or "Invalid phone number", code="INVALID_PHONE_NUMBER")

    profile_image_url = (request.profile_image_url or "").strip() or None
    if profile_image_url:
        is_valid, error_msg = validate_url(profile_image_url)
        if not is_valid:
            raise ValidationError(
                error_msg or "Invalid profile image URL",
                code="INVALID_PROFILE_IMAGE_URL",
            )

    # Check if already registered
    existing = await db.execute(select(User.id).where(User.email == request.email))
    if existing.scalar_one_or_none():
        logger.info(f"Signup with existing email: {request.email}")
        raise ConflictError(
            "Email already exists",
            code="EMAIL_EXISTS",
            details={"email": request.email},
        )

    user = User(
        id=uuid4(),
        first_name=request.first_name,
        last_name=request.last_name,
        email=request.email,
        phone_number=(request.phone_number or "").strip() or None,
        profile_image_url=profile_image_url,
    )

    try:
        db.add(user)
        await db.flush()

    except IntegrityError as e:
        if get_sqlstate(e) == UNIQUE_VIOLATION:
            # Race condition - email was registered by another request
            logger.warning(f"Race condition creating user: {request.email}")
            raise ConflictError(
                "Email already exists",
                code="EMAIL_EXISTS",
                details={"email": request.email},
            )
        logger.error(f"Integrity error creating user: {str(e)}")
        raise InternalError("Failed to create user")

    except SQLAlchemyError as e:
        logger.error(f"Database error creating user: {str(e)}")
        raise InternalError("Failed to create user")

    logger.info(f"Created user {user.id}")
    return user


async def list_user_urls(db: AsyncSession, user_id: UUID | str) -> list[UserUrlItem]:
    """
    List all URLs owned by a user together with their click statistics.

    Args:
        db: Database session
        user_id: Owner ID

    Returns:
        List of UserUrlItem (empty if the user has no URLs)

    Raises:
        NotFoundError: If the user does not exist
    """
    user = await get_user(db, user_id)
    if not user:
        logger.info(f"URL list requested for unknown user: {user_id}")
        raise NotFoundError("User not found", details={"userId": str(user_id)})

    stmt = (
        select(
            Url.id,
            Url.original_url,
            Url.short_url,
            Click.click_count,
            Click.last_clicked_at,
        )
        .outerjoin(Click, Click.url_id == Url.id)
        .where(Url.user_id == user.id)
        .order_by(Url.id)
    )
    rows = (await db.execute(stmt)).all()

    return [
        UserUrlItem(
            id=row.id,
            original_url=row.original_url,
            short_url=row.short_url,
            clicks=ClickStats(
                click_count=row.click_count or 0,
                last_clicked_at=row.last_clicked_at,
            ),
        )
        for row in rows
    ]
