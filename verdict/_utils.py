from __future__ import annotations

import calendar
import time
import typing as tp
from email.utils import formatdate, parsedate_tz
from urllib.parse import urlsplit, urlunsplit

HEADERS_ENCODING = "iso-8859-1"


class BaseClock:
    def now(self) -> int:
        raise NotImplementedError()


class Clock(BaseClock):
    def now(self) -> int:
        return int(time.time())


def parse_date(date: tp.Optional[str]) -> tp.Optional[int]:
    """
    Parse an HTTP-date into a UNIX timestamp.

    All three formats allowed by RFC 9110 Section 5.6.7 are accepted
    (IMF-fixdate, RFC 850 and asctime). Anything that cannot be parsed
    yields None instead of raising, since malformed dates are routine
    network input.

    Examples:
        >>> parse_date("Mon, 25 Aug 2015 12:00:00 GMT")
        1440504000
        >>> parse_date("THIS IS AN INVALID DATE") is None
        True
    """
    if not date:
        return None
    try:
        parsed = parsedate_tz(date)
        if parsed is None:
            return None
        return calendar.timegm(parsed[:6]) - (parsed[9] or 0)
    except (TypeError, ValueError, IndexError, OverflowError):
        return None


def parse_int(value: tp.Optional[str]) -> tp.Optional[int]:
    """Parse a non-negative delta-seconds value, return None if invalid."""
    if value is None:
        return None
    value = value.strip()
    if not (value.isascii() and value.isdigit()):
        return None
    try:
        return int(value)
    except (ValueError, OverflowError):
        return None


def to_str(value: tp.Union[str, bytes]) -> str:
    if isinstance(value, bytes):
        return value.decode(HEADERS_ENCODING)
    return value


def get_safe_url(url: str) -> str:
    """Strip the query and the fragment so that URLs can be logged."""
    parts = urlsplit(url)
    return urlunsplit((parts.scheme, parts.netloc, parts.path or "/", "", ""))


def generate_http_date(timeval: tp.Optional[float] = None) -> str:
    """
    Generate a Date header value in RFC 1123 format.

    Example output: 'Sun, 26 Oct 2025 12:34:56 GMT'
    """
    return formatdate(timeval=timeval, localtime=False, usegmt=True)
