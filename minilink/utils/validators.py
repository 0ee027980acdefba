"""Input validation utilities for URLs, emails and phone numbers."""

import re
from typing import Tuple
from urllib.parse import urlparse

# Schemes that execute content instead of naming a resource
BLOCKED_URL_SCHEMES = {"javascript", "vbscript", "data"}
MAX_URL_LENGTH = 2048

# Simplified RFC 5322 address check; length limits are enforced separately
EMAIL_REGEX = re.compile(
    r"^[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+@[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}"
    r"[a-zA-Z0-9])?(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)+$"
)
MAX_EMAIL_LENGTH = 100

PHONE_REGEX = re.compile(r"^\+?[0-9 ()\-]{3,15}$")


def validate_url(url: str | None) -> Tuple[bool, str | None]:
    """
    Validate that a string is an absolute URI with a host.

    Any scheme with an authority part is accepted (http, https, ftp, ...);
    script-type schemes such as ``javascript:`` are rejected.

    Args:
        url: URL to validate

    Returns:
        Tuple of (is_valid, error_message)
        If valid, error_message is None
    """
    if not url or not url.strip():
        return False, "URL is required"

    url = url.strip()

    if len(url) > MAX_URL_LENGTH:
        return False, f"URL is too long (max {MAX_URL_LENGTH} characters)"

    if any(ch.isspace() for ch in url):
        return False, "URL cannot contain whitespace"

    try:
        parsed = urlparse(url)
    except ValueError:
        return False, "Invalid URL format"

    # urlparse only reports a scheme when it matches RFC 3986 syntax
    if not parsed.scheme:
        return False, "URL must include a scheme such as http or https"

    if parsed.scheme.lower() in BLOCKED_URL_SCHEMES:
        return False, f"URL scheme '{parsed.scheme}' is not allowed"

    if not parsed.netloc or not parsed.hostname:
        return False, "URL must include a host"

    try:
        # Accessing .port raises for out-of-range or non-numeric ports
        parsed.port
    except ValueError:
        return False, "URL has an invalid port"

    return True, None


def validate_email(email: str | None) -> Tuple[bool, str | None]:
    """
    Validate email address format.

    Args:
        email: Email address to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not email or not email.strip():
        return False, "Email address is required"

    email = email.strip()

    if len(email) > MAX_EMAIL_LENGTH:
        return False, f"Email address is too long (max {MAX_EMAIL_LENGTH} characters)"

    if ".." in email:
        return False, "Email address cannot contain consecutive dots"

    if not EMAIL_REGEX.match(email):
        return False, "Invalid email address format"

    local, _, _ = email.partition("@")
    if len(local) > 64:
        return False, "Email local part is too long (max 64 characters)"

    return True, None


def validate_phone_number(phone_number: str | None) -> Tuple[bool, str | None]:
    """Validate an optional phone number. Empty values are accepted."""
    if phone_number is None or not phone_number.strip():
        return True, None

    if not PHONE_REGEX.match(phone_number.strip()):
        return False, "Phone number may only contain digits, spaces, '+', '-', '(' and ')'"

    return True, None
