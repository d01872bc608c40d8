from enum import Enum
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .response import RestResponse


class RestClientError(Exception):
    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class ValidationError(RestClientError, ValueError):
    """Raised when a request is composed from malformed pieces.

    Examples are an empty method, an unnamed or duplicated multipart part,
    a multipart body nested in another one, or a route placeholder that has
    no value bound to it.
    """


class ConfigurationError(RestClientError):
    """Raised when the client cannot resolve something it needs to dispatch.

    Typical causes are a missing base URL, a content format that falls back
    to an unset default, or no serializer registered for a format.
    """


class AuthenticationRequiredError(RestClientError):
    def __init__(self, method: str, resource: str):
        self.method = method
        self.resource = resource
        super().__init__(
            f"The request {method} {resource} requires authentication "
            "but no authenticator was set"
        )


class NetworkError(RestClientError):
    """Raised when the transport fails to complete an exchange.

    The underlying httpx exception is always chained as ``__cause__``.
    """


class HttpErrorKind(str, Enum):
    BAD_REQUEST = "bad_request"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    GENERIC = "generic"


_KIND_BY_STATUS = {
    400: HttpErrorKind.BAD_REQUEST,
    401: HttpErrorKind.UNAUTHORIZED,
    403: HttpErrorKind.FORBIDDEN,
    404: HttpErrorKind.NOT_FOUND,
    409: HttpErrorKind.CONFLICT,
}


def error_kind_for(status_code: int) -> Optional[HttpErrorKind]:
    """Map a status code to its error kind.

    Args:
        status_code: The HTTP status code of a response.

    Returns:
        None for successful codes (below 400), otherwise the kind of the
        error. Codes without a dedicated kind map to ``GENERIC``.
    """
    if status_code < 400:
        return None
    return _KIND_BY_STATUS.get(status_code, HttpErrorKind.GENERIC)


class HttpStatusError(RestClientError):
    """A non-successful response, tagged with the kind of failure.

    Callers branch on :attr:`kind` instead of catching one class per status.
    """

    def __init__(
        self,
        kind: HttpErrorKind,
        status_code: int,
        reason_phrase: str,
        response: Optional["RestResponse"] = None,
    ):
        self.kind = kind
        self.status_code = status_code
        self.reason_phrase = reason_phrase
        self.response = response
        super().__init__(reason_phrase or f"HTTP {status_code}")

    @classmethod
    def from_status(
        cls,
        status_code: int,
        reason_phrase: str,
        response: Optional["RestResponse"] = None,
    ) -> Optional["HttpStatusError"]:
        kind = error_kind_for(status_code)
        if kind is None:
            return None
        return cls(kind, status_code, reason_phrase, response)

    def __repr__(self) -> str:
        return (
            f"HttpStatusError(kind={self.kind.value!r}, "
            f"status_code={self.status_code!r}, "
            f"reason_phrase={self.reason_phrase!r})"
        )
