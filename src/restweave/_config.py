from os import environ as env
from typing import Any, Dict, List, Mapping, Optional

import httpx
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

from ._utils.constants import ENV_BASE_URL
from .auth import (
    BasicRequestAuthenticator,
    BearerRequestAuthenticator,
    RequestAuthenticator,
)
from .handlers import RequestHandler, ResponseHandler
from .models.enums import ContentFormat
from .serializers import (
    ContentSerializer,
    JsonContentSerializer,
    KeyValueContentSerializer,
    XmlContentSerializer,
)


def resolve_base_url(base_url: Optional[str] = None) -> Optional[str]:
    """Return the given base URL, or the one configured in the environment.

    A ``.env`` file in the working directory is loaded first.
    """
    if base_url:
        return base_url
    load_dotenv()
    return env.get(ENV_BASE_URL) or None


class ClientSettings(BaseModel):
    """Immutable configuration shared by every dispatch of a client."""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    base_url: Optional[str] = None
    default_format: ContentFormat = ContentFormat.DEFAULT
    default_headers: Dict[str, Any] = Field(default_factory=dict)
    serializers: List[ContentSerializer] = Field(default_factory=list)
    authenticator: Optional[RequestAuthenticator] = None
    authenticate_by_default: Optional[bool] = None
    request_handlers: List[RequestHandler] = Field(default_factory=list)
    response_handlers: List[ResponseHandler] = Field(default_factory=list)
    transport: Optional[httpx.BaseTransport] = None
    async_transport: Optional[httpx.AsyncBaseTransport] = None
    debug: bool = False

    def serializer_for(self, content_format: ContentFormat) -> Optional[ContentSerializer]:
        """First registered serializer supporting the format, if any."""
        return next(
            (s for s in self.serializers if s.supported_format == content_format),
            None,
        )

    def serializer_for_content_type(self, media_type: str) -> Optional[ContentSerializer]:
        return next(
            (s for s in self.serializers if s.supports_content_type(media_type)),
            None,
        )

    def should_authenticate(self, authenticate: Optional[bool]) -> bool:
        if authenticate is not None:
            return authenticate
        if self.authenticate_by_default is not None:
            return self.authenticate_by_default
        return self.authenticator is not None


class ClientSettingsBuilder:
    """Fluent construction of ClientSettings.

    Examples:
        >>> settings = (
        ...     ClientSettingsBuilder()
        ...     .base_url("http://example.com/api/")
        ...     .use_json_serializer()
        ...     .default_format(ContentFormat.JSON)
        ...     .build()
        ... )
    """

    def __init__(self) -> None:
        self._values: Dict[str, Any] = {}
        self._default_headers: Dict[str, Any] = {}
        self._serializers: List[ContentSerializer] = []
        self._request_handlers: List[RequestHandler] = []
        self._response_handlers: List[ResponseHandler] = []

    def base_url(self, base_url: str) -> "ClientSettingsBuilder":
        self._values["base_url"] = base_url
        return self

    def default_format(self, content_format: ContentFormat) -> "ClientSettingsBuilder":
        self._values["default_format"] = content_format
        return self

    def with_default_header(self, name: str, value: Any) -> "ClientSettingsBuilder":
        self._default_headers[name] = value
        return self

    def with_default_headers(self, headers: Mapping[str, Any]) -> "ClientSettingsBuilder":
        self._default_headers.update(headers)
        return self

    def use_serializer(self, serializer: ContentSerializer) -> "ClientSettingsBuilder":
        self._serializers.append(serializer)
        return self

    def use_json_serializer(self) -> "ClientSettingsBuilder":
        return self.use_serializer(JsonContentSerializer())

    def use_xml_serializer(self) -> "ClientSettingsBuilder":
        return self.use_serializer(XmlContentSerializer())

    def use_key_value_serializer(self) -> "ClientSettingsBuilder":
        return self.use_serializer(KeyValueContentSerializer())

    def use_authenticator(
        self, authenticator: Optional[RequestAuthenticator]
    ) -> "ClientSettingsBuilder":
        self._values["authenticator"] = authenticator
        return self

    def use_basic_authentication(
        self, user_name: str, password: str
    ) -> "ClientSettingsBuilder":
        return self.use_authenticator(BasicRequestAuthenticator(user_name, password))

    def use_bearer_authentication(self, token: str) -> "ClientSettingsBuilder":
        return self.use_authenticator(BearerRequestAuthenticator(token))

    def authenticate_by_default(self, authenticate: bool = True) -> "ClientSettingsBuilder":
        self._values["authenticate_by_default"] = authenticate
        return self

    def add_request_handler(self, handler: RequestHandler) -> "ClientSettingsBuilder":
        self._request_handlers.append(handler)
        return self

    def add_response_handler(self, handler: ResponseHandler) -> "ClientSettingsBuilder":
        self._response_handlers.append(handler)
        return self

    def use_transport(
        self,
        transport: Optional[httpx.BaseTransport] = None,
        async_transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "ClientSettingsBuilder":
        self._values["transport"] = transport
        self._values["async_transport"] = async_transport
        return self

    def debug(self, debug: bool = True) -> "ClientSettingsBuilder":
        self._values["debug"] = debug
        return self

    def build(self) -> ClientSettings:
        return ClientSettings(
            **{
                **self._values,
                "base_url": resolve_base_url(self._values.get("base_url")),
            },
            default_headers=dict(self._default_headers),
            serializers=list(self._serializers),
            request_handlers=list(self._request_handlers),
            response_handlers=list(self._response_handlers),
        )
