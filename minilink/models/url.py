"""Url model for shortened links."""

from typing import Optional

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from minilink.database import Base

SHORT_ID_LENGTH = 8


class Url(Base):
    """Represents a shortened URL. The short ID is the primary key."""

    __tablename__ = "urls"

    # Primary key (short ID)
    id: Mapped[str] = mapped_column(String(SHORT_ID_LENGTH), primary_key=True)

    original_url: Mapped[str] = mapped_column(Text, nullable=False)
    short_url: Mapped[str] = mapped_column(Text, unique=True, nullable=False)

    # Owner
    user_id: Mapped[UUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id"),
        index=True,
        nullable=True,
    )

    # Relationships
    user: Mapped[Optional["User"]] = relationship("User", back_populates="urls")
    click: Mapped[Optional["Click"]] = relationship(
        "Click",
        back_populates="url",
        uselist=False,
    )

    def __repr__(self) -> str:
        return f"<Url(id={self.id}, original_url={self.original_url[:50]})>"
