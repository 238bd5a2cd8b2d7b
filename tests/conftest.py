import typing as tp

import pytest

from verdict import BaseClock, RawResponse, Response, classify
from verdict._utils import generate_http_date

NOW = 1440504000  # Tue, 25 Aug 2015 12:00:00 GMT


class MockedClock(BaseClock):
    def __init__(self, now: int = NOW) -> None:
        self._now = now

    def now(self) -> int:
        return self._now


@pytest.fixture
def clock() -> MockedClock:
    return MockedClock()


@pytest.fixture
def http_date() -> tp.Callable[[int], str]:
    def build(offset: int = 0) -> str:
        return generate_http_date(NOW + offset)

    return build


@pytest.fixture
def cacheable_headers(http_date: tp.Callable[[int], str]) -> tp.Dict[str, str]:
    """Headers of a response issued right now that expires in 30 minutes."""
    return {
        "content-type": "text/html",
        "date": http_date(0),
        "expires": http_date(30 * 60),
        "cache-control": "public",
        "last-modified": http_date(-24 * 60 * 60),
    }


@pytest.fixture
def build_response(clock: MockedClock) -> tp.Callable[..., Response]:
    def build(
        status_code: tp.Union[int, str] = 200,
        headers: tp.Optional[tp.Any] = None,
        content: bytes = b"",
        **kwargs: tp.Any,
    ) -> Response:
        kwargs.setdefault("clock", clock)
        return classify(RawResponse(status_code, headers if headers is not None else {}, content), **kwargs)

    return build
