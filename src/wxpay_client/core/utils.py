"""
Small helpers for provider field formats.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Optional, Union

from .errors import DateFormatError

__all__ = [
    "DEFAULT_ORDER_NO_LENGTH",
    "PROVIDER_TZ",
    "date_to_str",
    "fill_zero",
    "str_to_date",
    "to_text",
]

logger = logging.getLogger(__name__)

# Beijing time; the provider has no DST.
PROVIDER_TZ = timezone(timedelta(hours=8), name="UTC+08:00")

DEFAULT_ORDER_NO_LENGTH = 11

_TIME_FORMAT = "%Y%m%d%H%M%S"


def fill_zero(order_id: Union[int, str], length: Optional[int] = DEFAULT_ORDER_NO_LENGTH) -> str:
    """
    Left-pad an order id with zeros up to ``length`` characters.

    Longer ids are returned unchanged. A missing or non-positive ``length``
    falls back to the default of 11.
    """
    if not length or length < 1:
        length = DEFAULT_ORDER_NO_LENGTH
    return str(order_id).rjust(length, "0")


def _parse_provider_time(value: str) -> datetime:
    if not isinstance(value, str) or len(value) != 14 or not (value.isascii() and value.isdigit()):
        raise DateFormatError(f"Invalid date {value!r}, expected YYYYMMDDHHmmss")
    try:
        parsed = datetime.strptime(value, _TIME_FORMAT)
    except ValueError as exc:
        raise DateFormatError(f"Invalid date {value!r}: {exc}") from exc
    return parsed.replace(tzinfo=PROVIDER_TZ)


def str_to_date(value: Optional[str]) -> Optional[datetime]:
    """
    Parse a provider timestamp such as ``20190202122233``.

    Returns an aware datetime in :data:`PROVIDER_TZ`, or ``None`` after logging
    when the value is malformed.
    """
    try:
        return _parse_provider_time(value)
    except DateFormatError as exc:
        logger.error("%s", exc)
        return None


def date_to_str(moment: datetime) -> str:
    """
    Format ``moment`` for fields like ``time_start``.

    Naive datetimes are assumed to already be provider local time.
    """
    if moment.tzinfo is not None:
        moment = moment.astimezone(PROVIDER_TZ)
    return moment.strftime(_TIME_FORMAT)


def to_text(value: Any) -> str:
    """
    Render a scalar the way the provider expects it in signatures and XML.

    ``None`` is empty, booleans are ``true``/``false`` and integral floats
    lose their ``.0`` so ``1.0`` and ``1`` sign the same.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
