from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from verdict._utils import get_safe_url

if TYPE_CHECKING:
    from verdict._core.models import Response

logger = logging.getLogger("verdict.core.freshness")

__all__ = (
    "get_freshness_lifetime",
    "get_age",
    "is_expired",
    "expires_not_in_its_past",
    "expires_not_in_our_past",
    "is_cacheable",
)


def describe(response: Response) -> str:
    url = response.url
    if url is None:
        return "the response"
    return f"the resource located at {get_safe_url(url)}"


def get_freshness_lifetime(response: Response) -> Optional[int]:
    """
    Calculates the freshness lifetime of a response in seconds.

    Rules, first match wins:

     - if the max-age directive parses, use its value; it always takes
       priority over Expires, even when both are present
     - if the Expires header parses, use its value minus the value of the
       Date header, or minus the current time when Date is absent or broken
     - otherwise the lifetime cannot be determined and None is returned

    See: https://www.rfc-editor.org/rfc/rfc9111.html#section-4.2.1
    """
    max_age = response.max_age
    if max_age is not None:
        return max_age

    expires = response.expires
    if expires is None:
        return None

    date = response.response_date
    if date is None:
        date = response.clock.now()

    return expires - date


def get_age(response: Response) -> int:
    """
    Calculates the current age of a response in seconds.

    The apparent age is `now - Date`, never negative; a missing or broken
    Date header yields an apparent age of 0. When an Age header reports a
    larger value (upstream caches can observe storage time that we cannot),
    that value is used instead.

    See: https://www.rfc-editor.org/rfc/rfc9111.html#section-4.2.3
    """
    date = response.response_date
    apparent_age = 0 if date is None else max(0, response.clock.now() - date)

    age_value = response.age
    if age_value is None:
        return apparent_age
    return max(apparent_age, age_value)


def is_expired(response: Response) -> bool:
    freshness_lifetime = get_freshness_lifetime(response)
    if freshness_lifetime is None:
        return True
    return get_age(response) >= freshness_lifetime


def expires_not_in_its_past(response: Response) -> bool:
    """True when the origin did not issue the response already stale (Expires >= Date)."""
    expires, date = response.expires, response.response_date
    if expires is None or date is None:
        return False
    return expires >= date


def expires_not_in_our_past(response: Response) -> bool:
    """True when Expires has not passed according to the local clock. Clock skew is not corrected."""
    expires = response.expires
    if expires is None:
        return False
    return expires >= response.clock.now()


def is_cacheable(response: Response) -> bool:
    """
    Determines whether the response may be cached.

    A response is cacheable only when its status code is in the list of
    cacheable status codes, it carries no no-cache/no-store/Pragma
    restriction and no Vary header, it has a usable freshness signal
    (max-age, or an Expires value consistent with both its Date and our
    clock) and it is not already expired.
    """
    resource = describe(response)
    cacheable_status_codes = response.options.cacheable_status_codes

    if response.code not in cacheable_status_codes:
        logger.debug(
            f"Considering {resource} as not cacheable since its status code ({response.code}) "
            "is not in the list of cacheable status codes."
        )
        return False

    if response.no_cache_flag:
        logger.debug(f"Considering {resource} as not cacheable since it contains the no-cache directive.")
        return False

    if response.no_store_flag:
        logger.debug(f"Considering {resource} as not cacheable since it contains the no-store directive.")
        return False

    if response.vary_tag_present:
        logger.debug(f"Considering {resource} as not cacheable since it contains the Vary header.")
        return False

    if response.max_age is None:
        if response.expires is None:
            logger.debug(
                f"Considering {resource} as not cacheable since it contains "
                "neither a valid max-age directive nor a valid Expires header."
            )
            return False

        if not expires_not_in_its_past(response):
            logger.debug(
                f"Considering {resource} as not cacheable since its Expires header "
                "precedes its Date header or the Date header is invalid."
            )
            return False

        if not expires_not_in_our_past(response):
            logger.debug(f"Considering {resource} as not cacheable since its Expires header is in the past.")
            return False

    if is_expired(response):
        logger.debug(f"Considering {resource} as not cacheable since it is already expired.")
        return False

    logger.debug(f"Considering {resource} as cacheable since it meets the criteria for being stored in the cache.")
    return True
