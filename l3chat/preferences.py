"""The dark-mode preference cookie."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from email.utils import format_datetime

DARK_MODE_COOKIE = "bb_dark_mode"
COOKIE_LIFETIME = timedelta(days=365)


def dark_mode_cookie(is_dark: bool, now: datetime | None = None) -> str:
    """Build the Set-Cookie value storing the dark-mode choice for a year.

    A naive ``now`` is taken as UTC; by default the current time is used.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    expires = (now + COOKIE_LIFETIME).astimezone(timezone.utc)
    value = "true" if is_dark else "false"
    return (
        f"{DARK_MODE_COOKIE}={value}; SameSite=Lax; Secure; Path=/; "
        f"Expires={format_datetime(expires, usegmt=True)}"
    )


def parse_dark_mode(cookie_header: str | None) -> bool | None:
    """Read the dark-mode choice from a Cookie header, or None if absent or invalid."""
    if not cookie_header:
        return None
    found = None
    for piece in cookie_header.split(";"):
        name, sep, value = piece.strip().partition("=")
        if sep and name.strip() == DARK_MODE_COOKIE:
            found = value.strip()
    return {"true": True, "false": False}.get(found) if found is not None else None