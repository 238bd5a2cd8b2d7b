from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from http import HTTPStatus
from typing import (
    Any,
    Awaitable,
    Callable,
    Mapping,
    Optional,
    Protocol,
    Tuple,
    Union,
)
from urllib.parse import urljoin

from typing_extensions import assert_never

from verdict._core import _freshness
from verdict._core._headers import CacheControl, Headers, HeaderTypes, parse_cache_control, parse_pragma
from verdict._exceptions import (
    FetcherNotConfigured,
    MissingLocationError,
    RedirectLimitExceeded,
    TranslatorNotFound,
)
from verdict._translators import Translator, TranslatorRegistry, charset, default_registry
from verdict._utils import BaseClock, Clock, get_safe_url, parse_date, parse_int

logger = logging.getLogger("verdict.core.models")

__all__ = (
    "SupportsRawResponse",
    "RawResponse",
    "ResponseKind",
    "EvaluationOptions",
    "Response",
    "Fetcher",
    "AsyncFetcher",
    "classify",
    "is_redirection_code",
)

CACHEABLE_STATUS_CODES = (200, 203, 300, 301)


class SupportsRawResponse(Protocol):
    """What the transport layer hands over. `url` is optional."""

    @property
    def status_code(self) -> Union[int, str]: ...

    @property
    def headers(self) -> HeaderTypes: ...

    @property
    def content(self) -> bytes: ...


@dataclass(frozen=True)
class RawResponse:
    status_code: Union[int, str]
    headers: HeaderTypes = field(default_factory=dict)
    content: bytes = b""
    url: Optional[str] = None


Fetcher = Callable[[str], SupportsRawResponse]
AsyncFetcher = Callable[[str], Awaitable[SupportsRawResponse]]


class ResponseKind(enum.Enum):
    STANDARD = "standard"
    REDIRECTION = "redirection"


@dataclass(frozen=True)
class EvaluationOptions:
    """
    Configuration for response evaluation.

    Attributes:
    ----------
    cacheable_status_codes : tuple[int, ...]
        Status codes a response must have to be considered cacheable.
        Default: (200, 203, 300, 301)

    follow_redirects_limit : int
        How many redirects `Response.follow` may chase before giving up
        with `RedirectLimitExceeded`.
        Default: 5
    """

    cacheable_status_codes: Tuple[int, ...] = CACHEABLE_STATUS_CODES
    follow_redirects_limit: int = 5


def parse_status(status_code: Union[int, str]) -> Optional[int]:
    if isinstance(status_code, int):
        return status_code
    return parse_int(str(status_code))


def is_redirection_code(status_code: Optional[int]) -> bool:
    """
    301, 302, 303 and 305..399 are redirections to follow.

    304 is excluded: it answers a conditional request and carries no target.
    """
    if status_code is None:
        return False
    return status_code in (301, 302, 303) or 305 <= status_code <= 399


def status_predicate(status: HTTPStatus) -> Any:
    def predicate(self: Response) -> bool:
        return self.code == status.value

    predicate.__doc__ = f"True when the status code is {status.value} {status.phrase}."
    return property(predicate)


@dataclass(frozen=True, eq=False)
class Response:
    """
    A classified HTTP response.

    Both kinds share the same interface; only `follow` differs. A standard
    response follows to itself, so callers never need to branch on the kind.
    """

    kind: ResponseKind
    raw: SupportsRawResponse
    headers: Headers
    translators: TranslatorRegistry = field(default_factory=default_registry)
    clock: BaseClock = field(default_factory=Clock)
    options: EvaluationOptions = field(default_factory=EvaluationOptions)
    fetcher: Optional[Fetcher] = None
    async_fetcher: Optional[AsyncFetcher] = None

    def __getitem__(self, name: str) -> Optional[str]:
        return self.headers.get(name)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} [{self.kind.value} {self.code}]>"

    # Body and metadata

    @property
    def code(self) -> Optional[int]:
        return parse_status(self.raw.status_code)

    @property
    def body(self) -> bytes:
        return self.raw.content

    @property
    def text(self) -> str:
        return self.body.decode(charset(self.content_type))

    @property
    def content_type(self) -> Optional[str]:
        return self.headers.get("content-type")

    @property
    def url(self) -> Optional[str]:
        return getattr(self.raw, "url", None)

    @property
    def location(self) -> Optional[str]:
        location = self.headers.get("location")
        if location is None or self.url is None:
            return location
        return urljoin(self.url, location)

    @property
    def etag(self) -> Optional[str]:
        return self.headers.get("etag")

    # Status

    ok = status_predicate(HTTPStatus.OK)
    created = status_predicate(HTTPStatus.CREATED)
    accepted = status_predicate(HTTPStatus.ACCEPTED)
    no_content = status_predicate(HTTPStatus.NO_CONTENT)
    moved_permanently = status_predicate(HTTPStatus.MOVED_PERMANENTLY)
    found = status_predicate(HTTPStatus.FOUND)
    see_other = status_predicate(HTTPStatus.SEE_OTHER)
    not_modified = status_predicate(HTTPStatus.NOT_MODIFIED)
    temporary_redirect = status_predicate(HTTPStatus.TEMPORARY_REDIRECT)
    bad_request = status_predicate(HTTPStatus.BAD_REQUEST)
    unauthorized = status_predicate(HTTPStatus.UNAUTHORIZED)
    forbidden = status_predicate(HTTPStatus.FORBIDDEN)
    not_found = status_predicate(HTTPStatus.NOT_FOUND)
    method_not_allowed = status_predicate(HTTPStatus.METHOD_NOT_ALLOWED)
    not_acceptable = status_predicate(HTTPStatus.NOT_ACCEPTABLE)
    conflict = status_predicate(HTTPStatus.CONFLICT)
    unprocessable_entity = status_predicate(HTTPStatus.UNPROCESSABLE_ENTITY)
    internal_server_error = status_predicate(HTTPStatus.INTERNAL_SERVER_ERROR)

    # Date fields

    def parse_datefield(self, name: str) -> Optional[int]:
        return parse_date(self.headers.get(name))

    @property
    def response_date(self) -> Optional[int]:
        return self.parse_datefield("date")

    @property
    def expires(self) -> Optional[int]:
        return self.parse_datefield("expires")

    @property
    def last_modified(self) -> Optional[int]:
        return self.parse_datefield("last-modified")

    @property
    def age(self) -> Optional[int]:
        return parse_int(self.headers.get("age"))

    # Cache directives

    @property
    def cache_control(self) -> CacheControl:
        values = self.headers.get_list("cache-control")
        return parse_cache_control(", ".join(values) if values else None)

    @property
    def max_age(self) -> Optional[int]:
        return self.cache_control.max_age

    @property
    def no_cache_flag(self) -> bool:
        values = self.headers.get_list("pragma") or []
        return self.cache_control.no_cache or "no-cache" in parse_pragma(", ".join(values))

    @property
    def no_store_flag(self) -> bool:
        return self.cache_control.no_store

    @property
    def vary_tag_present(self) -> bool:
        return "vary" in self.headers

    @property
    def code_cacheable(self) -> bool:
        return self.code in self.options.cacheable_status_codes

    @property
    def can_be_validated(self) -> bool:
        return "last-modified" in self.headers or "etag" in self.headers

    @property
    def connection_closed(self) -> bool:
        return self.headers.get("connection") == "Close"

    # Freshness

    def is_cacheable(self) -> bool:
        return _freshness.is_cacheable(self)

    def current_age(self) -> int:
        return _freshness.get_age(self)

    def freshness_lifetime(self) -> Optional[int]:
        return _freshness.get_freshness_lifetime(self)

    def is_expired(self) -> bool:
        return _freshness.is_expired(self)

    def expires_not_in_its_past(self) -> bool:
        return _freshness.expires_not_in_its_past(self)

    def expires_not_in_our_past(self) -> bool:
        return _freshness.expires_not_in_our_past(self)

    # Deserialisation

    def deserialise_using(self, translator: Translator, options: Optional[Mapping[str, Any]] = None) -> Any:
        return translator.deserialise(self, options or {})

    def deserialise(self, options: Optional[Mapping[str, Any]] = None) -> Any:
        translator = self.translators.lookup(self.content_type)
        if translator is None:
            raise TranslatorNotFound(self.content_type or "")
        return self.deserialise_using(translator, options)

    # Redirects

    @property
    def is_redirection(self) -> bool:
        return self.kind is ResponseKind.REDIRECTION

    def follow(self) -> Response:
        """
        Follow the redirect this response points to.

        A standard response returns itself. A redirection fetches its
        Location through the configured fetcher and keeps following
        until a standard response arrives or `follow_redirects_limit`
        is exhausted.
        """
        if self.kind is ResponseKind.STANDARD:
            return self
        elif self.kind is ResponseKind.REDIRECTION:
            response = self
            for _ in range(self.options.follow_redirects_limit):
                if response.fetcher is None:
                    raise FetcherNotConfigured("A fetcher is required to follow redirects.")
                target = response._redirect_target()
                response = response._reclassify(response.fetcher(target))
                if response.kind is ResponseKind.STANDARD:
                    return response
            raise RedirectLimitExceeded(
                f"Stopped following redirects after {self.options.follow_redirects_limit} hops."
            )
        else:
            assert_never(self.kind)

    async def afollow(self) -> Response:
        """Async version of `follow`, driven by the configured async fetcher."""
        if self.kind is ResponseKind.STANDARD:
            return self
        elif self.kind is ResponseKind.REDIRECTION:
            response = self
            for _ in range(self.options.follow_redirects_limit):
                if response.async_fetcher is None:
                    raise FetcherNotConfigured("An async fetcher is required to follow redirects.")
                target = response._redirect_target()
                response = response._reclassify(await response.async_fetcher(target))
                if response.kind is ResponseKind.STANDARD:
                    return response
            raise RedirectLimitExceeded(
                f"Stopped following redirects after {self.options.follow_redirects_limit} hops."
            )
        else:
            assert_never(self.kind)

    def _redirect_target(self) -> str:
        target = self.location
        if target is None:
            raise MissingLocationError(f"The redirection response ({self.code}) has no Location header.")
        logger.debug(f"Following the {self.code} redirection to {get_safe_url(target)}.")
        return target

    def _reclassify(self, raw: SupportsRawResponse) -> Response:
        return classify(
            raw,
            translators=self.translators,
            clock=self.clock,
            options=self.options,
            fetcher=self.fetcher,
            async_fetcher=self.async_fetcher,
        )


def classify(
    raw: SupportsRawResponse,
    *,
    translators: Optional[TranslatorRegistry] = None,
    clock: Optional[BaseClock] = None,
    options: Optional[EvaluationOptions] = None,
    fetcher: Optional[Fetcher] = None,
    async_fetcher: Optional[AsyncFetcher] = None,
) -> Response:
    """
    Wrap a raw response into a `Response` of the right kind.

    301, 302, 303 and 305..399 become redirections, everything else,
    304 and unparsable status codes included, is a standard response.
    """
    code = parse_status(raw.status_code)
    kind = ResponseKind.REDIRECTION if is_redirection_code(code) else ResponseKind.STANDARD

    logger.debug(f"Classified the response with status code {raw.status_code!r} as {kind.value}.")

    return Response(
        kind=kind,
        raw=raw,
        headers=Headers(raw.headers),
        translators=translators if translators is not None else default_registry(),
        clock=clock if clock is not None else Clock(),
        options=options if options is not None else EvaluationOptions(),
        fetcher=fetcher,
        async_fetcher=async_fetcher,
    )
