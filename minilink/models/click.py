"""Click counter model, one row per shortened URL."""

from datetime import datetime
from uuid import uuid4

from sqlalchemy import DateTime, ForeignKey, Integer, String, text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from minilink.database import Base
from minilink.models.url import SHORT_ID_LENGTH


class Click(Base):
    """Aggregated click count and last click time for a URL."""

    __tablename__ = "clicks"

    # Primary key
    id: Mapped[UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid4,
    )

    # Unique foreign key to url (upsert conflict target)
    url_id: Mapped[str] = mapped_column(
        String(SHORT_ID_LENGTH),
        ForeignKey("urls.id"),
        unique=True,
        nullable=False,
    )

    click_count: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        server_default=text("0"),
    )
    last_clicked_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    # Relationships
    url: Mapped["Url"] = relationship("Url", back_populates="click")

    def __repr__(self) -> str:
        return f"<Click(url_id={self.url_id}, click_count={self.click_count})>"
