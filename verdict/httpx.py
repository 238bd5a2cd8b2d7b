try:
    import httpx  # noqa: F401
except ImportError as e:
    raise ImportError(
        "httpx is required to use verdict.httpx module. "
        "Please install verdict with the 'httpx' extra, "
        "e.g., 'pip install verdict[httpx]'."
    ) from e


from ._httpx import (
    AsyncHttpxFetcher as AsyncHttpxFetcher,
    HttpxFetcher as HttpxFetcher,
    from_httpcore as from_httpcore,
    from_httpx as from_httpx,
)

__all__ = ("AsyncHttpxFetcher", "HttpxFetcher", "from_httpcore", "from_httpx")
