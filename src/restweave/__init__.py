"""Declarative HTTP request composition and dispatch.

Requests are assembled from route, query, header, body and file
parameters, composed into a single piece of content (plain or multipart)
whose format is negotiated at dispatch time, and sent through httpx.
"""

from .models import (
    AuthenticationRequiredError,
    ConfigurationError,
    ContentFormat,
    FileContent,
    HttpContent,
    HttpErrorKind,
    HttpMethod,
    HttpStatusError,
    MultipartBody,
    MultipartContent,
    NetworkError,
    RequestBody,
    RequestFile,
    RequestParameter,
    RequestParameterType,
    RequestReturn,
    ResponseFile,
    RestClientError,
    RestRequest,
    RestResponse,
    ReturnKind,
    StringContent,
    ValidationError,
    error_kind_for,
)
from .serializers import (
    ContentSerializer,
    JsonContentSerializer,
    KeyValueContentSerializer,
    XmlContentSerializer,
)
from .auth import (
    BasicRequestAuthenticator,
    BearerRequestAuthenticator,
    RequestAuthenticator,
)
from .handlers import RequestHandler, ResponseHandler
from ._config import ClientSettings, ClientSettingsBuilder
from ._builders import RequestBodyBuilder, RequestBuilder, RequestFileBuilder
from ._services import RestClient
from ._utils._parameters import ParameterSource, as_parameters
from ._utils._logs import setup_logging

__version__ = "0.1.0"

__all__ = [
    "AuthenticationRequiredError",
    "BasicRequestAuthenticator",
    "BearerRequestAuthenticator",
    "ClientSettings",
    "ClientSettingsBuilder",
    "ConfigurationError",
    "ContentFormat",
    "ContentSerializer",
    "FileContent",
    "HttpContent",
    "HttpErrorKind",
    "HttpMethod",
    "HttpStatusError",
    "JsonContentSerializer",
    "KeyValueContentSerializer",
    "MultipartBody",
    "MultipartContent",
    "NetworkError",
    "ParameterSource",
    "RequestAuthenticator",
    "RequestBody",
    "RequestBodyBuilder",
    "RequestBuilder",
    "RequestFile",
    "RequestFileBuilder",
    "RequestHandler",
    "RequestParameter",
    "RequestParameterType",
    "RequestReturn",
    "ResponseFile",
    "ResponseHandler",
    "RestClient",
    "RestClientError",
    "RestRequest",
    "RestResponse",
    "ReturnKind",
    "StringContent",
    "ValidationError",
    "XmlContentSerializer",
    "as_parameters",
    "error_kind_for",
    "setup_logging",
]
