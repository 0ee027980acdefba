"""SQLAlchemy models."""

from minilink.models.click import Click
from minilink.models.url import Url
from minilink.models.user import User

__all__ = [
    "User",
    "Url",
    "Click",
]
