from __future__ import annotations

from typing import (
    Any,
    Dict,
    Iterable,
    Iterator,
    List,
    Mapping,
    Optional,
    Sequence,
    Tuple,
    Union,
)

from verdict._utils import to_str

__all__ = (
    "Headers",
    "CacheControl",
    "parse_cache_control",
    "parse_pragma",
)

HeaderValue = Union[str, bytes]
HeaderTypes = Union[
    Mapping[str, Union[str, Sequence[str]]],
    Iterable[Tuple[HeaderValue, HeaderValue]],
]


class Headers(Mapping[str, str]):
    """
    Case-insensitive, read-only view over a raw header multimap.

    Every value of a repeated header field is kept in arrival order.
    Item access and `get` return the first value; `get_list` returns
    all of them.

    Examples:
        >>> headers = Headers([(b"ETag", b'"abc"'), ("Vary", "Accept"), ("vary", "Cookie")])
        >>> headers["etag"]
        '"abc"'
        >>> headers.get("VARY")
        'Accept'
        >>> headers.get_list("vary")
        ['Accept', 'Cookie']
    """

    def __init__(self, headers: Optional[HeaderTypes] = None) -> None:
        self._headers: Dict[str, List[str]] = {}

        if headers is None:
            return

        items: Iterable[Tuple[Any, Any]]
        if isinstance(headers, Headers):
            items = headers.multi_items()
        elif isinstance(headers, Mapping):
            items = headers.items()
        else:
            items = headers
        for key, value in items:
            values = [value] if isinstance(value, (str, bytes)) else list(value)
            # A field without values is treated as absent.
            if not values:
                continue
            bucket = self._headers.setdefault(to_str(key).lower(), [])
            bucket.extend(to_str(v) for v in values)

    def get_list(self, key: str) -> Optional[List[str]]:
        values = self._headers.get(key.lower())
        return values[:] if values is not None else None

    def multi_items(self) -> List[Tuple[str, str]]:
        return [(key, value) for key, values in self._headers.items() for value in values]

    def __getitem__(self, key: str) -> str:
        return self._headers[key.lower()][0]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.lower() in self._headers

    def __iter__(self) -> Iterator[str]:
        return iter(self._headers)

    def __len__(self) -> int:
        return len(self._headers)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._headers!r})"

    def __eq__(self, other_headers: Any) -> bool:
        return isinstance(other_headers, Headers) and self._headers == other_headers._headers


class CacheControl:
    """
    Parsed Cache-Control directives that matter for freshness evaluation.

    - max_age: None when the directive is absent or its value is not a
      non-negative integer
    - no_cache: True when the directive is present, with or without field names
    - no_store: True when the directive is present

    Unknown directives are kept verbatim in `extensions`.
    """

    def __init__(self) -> None:
        self.max_age: Optional[int] = None
        self.no_cache: bool = False
        self.no_store: bool = False
        self.extensions: List[str] = []

    def __repr__(self) -> str:
        fields = []
        if self.max_age is not None:
            fields.append(f"max_age={self.max_age}")
        if self.no_cache:
            fields.append("no_cache")
        if self.no_store:
            fields.append("no_store")
        fields.extend(self.extensions)
        return f"<{type(self).__name__} {', '.join(fields)}>"


def split_directives(value: str) -> List[str]:
    """
    Split a comma-separated header value, keeping quoted strings intact.

    Examples:
        >>> split_directives('max-age=60, no-cache="Set-Cookie, Foo"')
        ['max-age=60', 'no-cache="Set-Cookie, Foo"']
    """
    directives = []
    current: List[str] = []
    quoted = False
    escaped = False

    for char in value:
        if escaped:
            escaped = False
        elif char == "\\" and quoted:
            escaped = True
        elif char == '"':
            quoted = not quoted
        elif char == "," and not quoted:
            directives.append("".join(current))
            current = []
            continue
        current.append(char)
    directives.append("".join(current))

    return [directive.strip(" \t") for directive in directives if directive.strip(" \t")]


def unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] == '"':
        return value[1:-1].replace('\\"', '"').replace("\\\\", "\\")
    return value


def parse_int_value(value: str) -> Optional[int]:
    """Parse integer value, return None if invalid."""
    value = unquote(value.strip())
    if not (value.isascii() and value.isdigit()):
        return None
    try:
        return int(value)
    except (ValueError, OverflowError):
        return None


def parse_cache_control(value: Optional[str]) -> CacheControl:
    """
    Parse a Cache-Control header value.

    Malformed input never raises: a broken `max-age` simply stays unset,
    and a directive that cannot be understood lands in `extensions`.

    Examples:
        >>> cc = parse_cache_control("max-age=4000, no-cache")
        >>> cc.max_age
        4000
        >>> cc.no_cache
        True
        >>> parse_cache_control("max-age=soon").max_age is None
        True
    """
    cc = CacheControl()

    if not value:
        return cc

    for directive in split_directives(value):
        token, has_value, argument = directive.partition("=")
        token = token.strip(" \t").lower()

        if token == "max-age":
            cc.max_age = parse_int_value(argument) if has_value else None
        elif token == "no-cache":
            cc.no_cache = True
        elif token == "no-store":
            cc.no_store = True
        else:
            cc.extensions.append(directive)

    return cc


def parse_pragma(value: Optional[str]) -> List[str]:
    """Return the lower-cased pragma directives (HTTP/1.0)."""
    if not value:
        return []
    return [directive.lower() for directive in split_directives(value)]
