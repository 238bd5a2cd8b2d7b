from verdict._core._headers import (
    CacheControl as CacheControl,
    Headers as Headers,
    parse_cache_control as parse_cache_control,
)
from verdict._core.models import (
    AsyncFetcher as AsyncFetcher,
    EvaluationOptions as EvaluationOptions,
    Fetcher as Fetcher,
    RawResponse as RawResponse,
    Response as Response,
    ResponseKind as ResponseKind,
    SupportsRawResponse as SupportsRawResponse,
    classify as classify,
    is_redirection_code as is_redirection_code,
)

__all__ = (
    ## Headers
    "Headers",
    "CacheControl",
    "parse_cache_control",
    ## Models
    "RawResponse",
    "SupportsRawResponse",
    "Response",
    "ResponseKind",
    "EvaluationOptions",
    "Fetcher",
    "AsyncFetcher",
    ## Factory
    "classify",
    "is_redirection_code",
)
