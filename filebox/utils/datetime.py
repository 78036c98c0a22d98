"""Datetime utilities."""
from datetime import datetime, timezone


def utc_now() -> datetime:
    """
    Return the current time as a naive UTC datetime.

    Timestamps are stored naive (UTC implied) so they compare the same way
    on every database backend. Microsecond resolution keeps rows created in
    quick succession in creation order.
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)
