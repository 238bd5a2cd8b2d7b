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
from verdict._exceptions import (
    FetcherNotConfigured as FetcherNotConfigured,
    MissingLocationError as MissingLocationError,
    RedirectError as RedirectError,
    RedirectLimitExceeded as RedirectLimitExceeded,
    TranslatorNotFound as TranslatorNotFound,
    VerdictError as VerdictError,
)
from verdict._translators import (
    BaseTranslator as BaseTranslator,
    FormTranslator as FormTranslator,
    JSONTranslator as JSONTranslator,
    Translator as Translator,
    TranslatorRegistry as TranslatorRegistry,
    XMLTranslator as XMLTranslator,
    YAMLTranslator as YAMLTranslator,
    default_registry as default_registry,
)
from verdict._utils import BaseClock as BaseClock, Clock as Clock, parse_date as parse_date

__all__ = (
    ## Factory
    "classify",
    "is_redirection_code",
    ## Models
    "RawResponse",
    "SupportsRawResponse",
    "Response",
    "ResponseKind",
    "EvaluationOptions",
    "Fetcher",
    "AsyncFetcher",
    ## Headers
    "Headers",
    "CacheControl",
    "parse_cache_control",
    "parse_date",
    ## Clocks
    "BaseClock",
    "Clock",
    ## Translators
    "Translator",
    "BaseTranslator",
    "JSONTranslator",
    "XMLTranslator",
    "YAMLTranslator",
    "FormTranslator",
    "TranslatorRegistry",
    "default_registry",
    ## Exceptions
    "VerdictError",
    "TranslatorNotFound",
    "RedirectError",
    "MissingLocationError",
    "RedirectLimitExceeded",
    "FetcherNotConfigured",
)
