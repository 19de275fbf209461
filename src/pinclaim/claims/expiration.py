"""Claim expiration - ledger timestamp to claim time to expiration time.

A claim is retained for one calendar year after its claim transaction is
confirmed. Times are rendered the way the pinning service and its web UI
display them: UTC, millisecond precision, trailing ``Z``.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

log = logging.getLogger(__name__)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def to_iso(dt: datetime) -> str:
    """Format an aware datetime as ``YYYY-MM-DDTHH:MM:SS.mmmZ``."""
    dt = dt.astimezone(timezone.utc)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


def parse_iso(value: str) -> datetime:
    """Parse a timestamp produced by ``to_iso`` (or any ISO 8601 string)."""
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    dt = datetime.fromisoformat(value)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def from_ledger_time(seconds: int | float) -> datetime:
    """Convert ledger UNIX seconds to a UTC instant, truncated to milliseconds."""
    return _EPOCH + timedelta(milliseconds=int(seconds * 1000))


def add_calendar_year(dt: datetime) -> datetime:
    """Same month, day and time one year later.

    Feb 29 has no counterpart in the following year and rolls over to Mar 1.
    """
    try:
        return dt.replace(year=dt.year + 1)
    except ValueError:
        return dt.replace(year=dt.year + 1, month=3, day=1)


def derive_claim_times(claim_tx_time: int | float | None) -> tuple[str | None, str | None]:
    """Return ``(claim_time, expiration_time)``.

    Both are None when the claim is unconfirmed, or when the ledger time
    falls outside the range a calendar date can represent.
    """
    if claim_tx_time is None:
        return None, None
    try:
        claimed = from_ledger_time(claim_tx_time)
        expires = add_calendar_year(claimed)
    except (OverflowError, ValueError):
        log.warning("Ledger time %r is out of range; no expiration derived", claim_tx_time)
        return None, None
    return to_iso(claimed), to_iso(expires)


def is_expired(expiration_time: str, now: datetime | None = None) -> bool:
    now = now or datetime.now(timezone.utc)
    return parse_iso(expiration_time) < now
