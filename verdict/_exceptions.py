__all__ = (
    "VerdictError",
    "TranslatorNotFound",
    "RedirectError",
    "MissingLocationError",
    "RedirectLimitExceeded",
    "FetcherNotConfigured",
)


class VerdictError(Exception): ...


class TranslatorNotFound(VerdictError, LookupError):
    def __init__(self, content_type: str) -> None:
        super().__init__(f"No translator is registered for the content type {content_type!r}.")
        self.content_type = content_type


class RedirectError(VerdictError): ...


class MissingLocationError(RedirectError): ...


class RedirectLimitExceeded(RedirectError): ...


class FetcherNotConfigured(RedirectError): ...
