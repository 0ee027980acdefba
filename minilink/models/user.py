"""User model for link owners."""

from uuid import uuid4

from sqlalchemy import String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from minilink.database import Base


class User(Base):
    """Represents a registered user who owns short URLs."""

    __tablename__ = "users"

    # Primary key
    id: Mapped[UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid4,
    )

    # Profile
    first_name: Mapped[str] = mapped_column(String(50), nullable=False)
    last_name: Mapped[str] = mapped_column(String(50), nullable=False)
    email: Mapped[str] = mapped_column(
        String(100),
        unique=True,
        nullable=False,
    )
    phone_number: Mapped[str | None] = mapped_column(String(15), nullable=True)
    profile_image_url: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Relationships
    urls: Mapped[list["Url"]] = relationship("Url", back_populates="user")

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email})>"
