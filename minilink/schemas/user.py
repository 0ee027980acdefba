"""User-related Pydantic schemas."""

from uuid import UUID

from pydantic import Field, field_validator

from minilink.schemas.common import CamelModel


class CreateUserRequest(CamelModel):
    """Request schema for user signup."""

    first_name: str = Field(..., min_length=1, max_length=50, description="User's first name")
    last_name: str = Field(..., min_length=1, max_length=50, description="User's last name")
    email: str = Field(..., max_length=100, description="User's email address")
    phone_number: str | None = Field(
        None,
        max_length=15,
        description="User's phone number (optional)",
    )
    profile_image_url: str | None = Field(
        None,
        description="URL to user's profile image (optional)",
    )

    @field_validator("first_name", "last_name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Validate name is not blank."""
        if not v.strip():
            raise ValueError("Name cannot be empty")
        return v.strip()

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        """Normalize email casing and whitespace."""
        return v.strip().lower()


class UserResponse(CamelModel):
    """User object returned by the API."""

    id: UUID
    first_name: str
    last_name: str
    email: str
    phone_number: str | None = None
    profile_image_url: str | None = None
