from logging import getLogger
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

from httpx import URL, AsyncClient, Client, Headers
from httpx import Request as HttpRequest

from .._config import ClientSettings, ClientSettingsBuilder, resolve_base_url
from .._utils._errors import handle_transport_errors, handle_transport_errors_async
from .._utils._logs import setup_logging
from .._utils._values import value_as_string
from .._utils.constants import HEADER_ACCEPT, HEADER_USER_AGENT, LOGGER_NAME, USER_AGENT
from ..models.enums import ContentFormat, ReturnKind
from ..models.errors import AuthenticationRequiredError, ConfigurationError
from ..models.parameters import RequestParameter
from ..models.request import RestRequest
from ..models.response import RestResponse
from ._content_composer import compose_content


class RestClient:
    """Dispatches built requests through httpx.

    One call is one exchange: the request is authenticated, translated into
    an ``httpx.Request``, passed through the request handlers, sent, wrapped
    into a RestResponse and passed through the response handlers. The
    response status is never inspected here; callers ask for it with
    :meth:`RestResponse.assert_successful`.
    """

    def __init__(self, settings: ClientSettings) -> None:
        self._logger = getLogger(LOGGER_NAME)

        base_url = resolve_base_url(settings.base_url)
        if not base_url:
            raise ConfigurationError("No base URI was set in the client settings")
        if not URL(base_url).is_absolute_url:
            raise ConfigurationError(f"The base URI {base_url} is not absolute")
        if base_url != settings.base_url:
            settings = settings.model_copy(update={"base_url": base_url})

        self.settings = settings
        if settings.debug:
            setup_logging(debug=True)

        self._client_kwargs: Dict[str, Any] = {
            "base_url": base_url,
            "headers": Headers(self.default_headers),
            "timeout": None,
        }

        self._client = Client(**self._client_kwargs, transport=settings.transport)
        self._client_async: Optional[AsyncClient] = None

        self._logger.debug(f"HEADERS: {self._client.headers}")

    @classmethod
    def build(cls, configure: Callable[[ClientSettingsBuilder], Any]) -> "RestClient":
        builder = ClientSettingsBuilder()
        configure(builder)
        return cls(builder.build())

    @property
    def async_client(self) -> AsyncClient:
        """The async httpx client, opened on first use."""
        if self._client_async is None:
            self._client_async = AsyncClient(
                **self._client_kwargs, transport=self.settings.async_transport
            )
        return self._client_async

    @property
    def base_url(self) -> URL:
        return self._client.base_url

    @property
    def default_headers(self) -> Dict[str, str]:
        return {
            HEADER_USER_AGENT: USER_AGENT,
            **{
                name: value_as_string(value)
                for name, value in self.settings.default_headers.items()
            },
        }

    def _authenticate(self, request: RestRequest) -> List[RequestParameter]:
        if not self.settings.should_authenticate(request.authenticate):
            return []

        authenticator = request.authenticator or self.settings.authenticator
        if authenticator is None:
            self._logger.warning(
                f"Refusing to send {request.method.value} {request.resource}: "
                "authentication required but no authenticator was set"
            )
            raise AuthenticationRequiredError(request.method.value, request.resource)

        return list(authenticator.authenticate_request(self, request))

    def _accept_header(self, request: RestRequest) -> Optional[str]:
        returned = request.returned
        if returned is not None and returned.kind == ReturnKind.VOID:
            return None
        if returned is not None and returned.kind == ReturnKind.FILE:
            return returned.content_type

        content_format = request.returned_format
        if content_format == ContentFormat.DEFAULT:
            content_format = self.settings.default_format
        if content_format == ContentFormat.DEFAULT:
            return None

        serializer = self.settings.serializer_for(content_format)
        if serializer is None:
            return None
        return ", ".join(serializer.content_types)

    def build_message(
        self,
        request: RestRequest,
        credentials: Iterable[RequestParameter] = (),
        *,
        client: Union[Client, AsyncClient, None] = None,
    ) -> HttpRequest:
        """Translate a request into the ``httpx.Request`` sent on the wire.

        Client default headers come first, then the request headers, the
        credentials and finally the content headers.

        Raises:
            ValidationError: If the route or the content is malformed.
            ConfigurationError: If the content format cannot be resolved.
        """
        content = compose_content(request, self.settings)

        headers = Headers(request.headers())
        for credential in credentials:
            headers[credential.name] = value_as_string(credential.value)

        if HEADER_ACCEPT not in headers and HEADER_ACCEPT not in Headers(
            self.default_headers
        ):
            accept = self._accept_header(request)
            if accept:
                headers[HEADER_ACCEPT] = accept

        if content is not None:
            headers.update(content.headers())

        query_params = request.query_params()
        return (client or self._client).build_request(
            request.method.value,
            request.resolve_resource(),
            params=query_params or None,
            headers=headers,
            **(content.request_kwargs() if content is not None else {}),
        )

    def request(self, request: RestRequest) -> RestResponse:
        """Send a request and wrap its response.

        Raises:
            AuthenticationRequiredError: If the request must be authenticated
                and no authenticator is available.
            ValidationError: If the request is malformed.
            ConfigurationError: If the content cannot be negotiated.
            NetworkError: If the transport fails.
        """
        credentials = self._authenticate(request)
        message = self.build_message(request, credentials)

        for handler in self.settings.request_handlers:
            handler.handle_request(self, message)

        self._logger.debug(f"Request: {message.method} {message.url}")
        self._logger.debug(f"HEADERS: {message.headers}")

        with handle_transport_errors():
            http_response = self._client.send(message)

        response = RestResponse(self, request, http_response)
        self._logger.debug(f"Response: {response.status_code} {response.reason_phrase}")

        for handler in self.settings.response_handlers:
            handler.handle_response(self, response)

        return response

    async def request_async(self, request: RestRequest) -> RestResponse:
        """Async version of request().

        Handlers are awaited one at a time, in order. Cancelling the calling
        task cancels the send.
        """
        credentials = self._authenticate(request)
        message = self.build_message(request, credentials, client=self.async_client)

        for handler in self.settings.request_handlers:
            await handler.handle_request_async(self, message)

        self._logger.debug(f"Request: {message.method} {message.url}")
        self._logger.debug(f"HEADERS: {message.headers}")

        async with handle_transport_errors_async():
            http_response = await self.async_client.send(message)

        response = RestResponse(self, request, http_response)
        self._logger.debug(f"Response: {response.status_code} {response.reason_phrase}")

        for handler in self.settings.response_handlers:
            await handler.handle_response_async(self, response)

        return response

    def close(self) -> None:
        """Close the sync client.

        An async client can only be closed from a coroutine: use
        :meth:`aclose` once async requests have been sent.
        """
        self._client.close()
        if self._client_async is not None and not self._client_async.is_closed:
            self._logger.warning(
                "The async client is still open: close it with aclose()"
            )

    async def aclose(self) -> None:
        """Close both the async and the sync client."""
        if self._client_async is not None:
            await self._client_async.aclose()
        self._client.close()

    def __enter__(self) -> "RestClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    async def __aenter__(self) -> "RestClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
