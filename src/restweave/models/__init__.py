from .content import (
    FileContent,
    HttpContent,
    MultipartContent,
    MultipartSection,
    StringContent,
)
from .enums import ContentFormat, HttpMethod, RequestParameterType, ReturnKind
from .errors import (
    AuthenticationRequiredError,
    ConfigurationError,
    HttpErrorKind,
    HttpStatusError,
    NetworkError,
    RestClientError,
    ValidationError,
    error_kind_for,
)
from .parameters import (
    BodyPart,
    MultipartBody,
    Parameter,
    RequestBody,
    RequestFile,
    RequestParameter,
    RequestReturn,
)
from .request import RestRequest
from .response import ResponseFile, RestResponse

__all__ = [
    "AuthenticationRequiredError",
    "BodyPart",
    "ConfigurationError",
    "ContentFormat",
    "FileContent",
    "HttpContent",
    "HttpErrorKind",
    "HttpMethod",
    "HttpStatusError",
    "MultipartBody",
    "MultipartContent",
    "MultipartSection",
    "NetworkError",
    "Parameter",
    "RequestBody",
    "RequestFile",
    "RequestParameter",
    "RequestParameterType",
    "RequestReturn",
    "ResponseFile",
    "RestClientError",
    "RestRequest",
    "RestResponse",
    "ReturnKind",
    "StringContent",
    "ValidationError",
    "error_kind_for",
]
