from dataclasses import dataclass
from email.message import Message
from io import BytesIO
from typing import TYPE_CHECKING, Any, Optional

import httpx

from .._utils.constants import (
    APPLICATION_OCTET_STREAM,
    HEADER_CONTENT_DISPOSITION,
    HEADER_CONTENT_TYPE,
)
from .enums import ContentFormat, ReturnKind
from .errors import ConfigurationError, HttpStatusError
from .parameters import RequestReturn
from .request import RestRequest

if TYPE_CHECKING:
    from .._services._rest_client import RestClient
    from ..serializers import ContentSerializer


@dataclass(frozen=True)
class ResponseFile:
    content: bytes
    content_type: str
    file_name: Optional[str] = None

    @property
    def stream(self) -> BytesIO:
        return BytesIO(self.content)


def _file_name(disposition: Optional[str]) -> Optional[str]:
    if not disposition:
        return None
    message = Message()
    message[HEADER_CONTENT_DISPOSITION] = disposition
    return message.get_filename()


class RestResponse:
    """The response of one dispatch, bound to its request and client.

    The body is decoded on demand: every call to :meth:`get_body` decodes
    the raw content again with the serializer negotiated for the request's
    return format.
    """

    def __init__(
        self, client: "RestClient", request: RestRequest, response: httpx.Response
    ) -> None:
        self.client = client
        self.request = request
        self.http_response = response

    @property
    def status_code(self) -> int:
        return self.http_response.status_code

    @property
    def reason_phrase(self) -> str:
        return self.http_response.reason_phrase

    @property
    def headers(self) -> httpx.Headers:
        return self.http_response.headers

    @property
    def content(self) -> bytes:
        return self.http_response.content

    @property
    def text(self) -> str:
        return self.http_response.text

    @property
    def media_type(self) -> Optional[str]:
        content_type = self.headers.get(HEADER_CONTENT_TYPE)
        if not content_type:
            return None
        return content_type.split(";", 1)[0].strip().lower()

    def is_successful(self) -> bool:
        return self.status_code < 400

    def get_exception(self) -> Optional[HttpStatusError]:
        """Describe the failure of this response, if any.

        Returns:
            None when the response is successful, otherwise an
            HttpStatusError tagged with the kind of failure.
        """
        return HttpStatusError.from_status(
            self.status_code, self.reason_phrase, response=self
        )

    def assert_successful(self) -> None:
        """Raise the HttpStatusError of a non-successful response."""
        error = self.get_exception()
        if error is not None:
            raise error

    def get_body(self, return_type: Optional[Any] = None) -> Any:
        """Decode the content according to what the request declared it returns.

        Args:
            return_type: Overrides the target type declared on the request.

        Returns:
            None for void returns or empty content, a ResponseFile for file
            returns, otherwise the decoded value.

        Raises:
            ConfigurationError: If no return format or deserializer can be
                resolved.
        """
        returned = self.request.returned or RequestReturn.of()
        if return_type is not None:
            returned = RequestReturn.of(return_type)

        if returned.kind == ReturnKind.VOID:
            return None
        if returned.kind == ReturnKind.FILE:
            return self.get_file()
        if not self.content:
            return None

        target = returned.return_type
        if target is bytes:
            return self.content
        if target is str:
            return self.text

        serializer = self._negotiate_serializer()
        return serializer.deserialize(self.text, target)

    def get_file(self) -> ResponseFile:
        return ResponseFile(
            content=self.content,
            content_type=self.headers.get(HEADER_CONTENT_TYPE, APPLICATION_OCTET_STREAM),
            file_name=_file_name(self.headers.get(HEADER_CONTENT_DISPOSITION)),
        )

    def _negotiate_serializer(self) -> "ContentSerializer":
        settings = self.client.settings
        content_format = self.request.returned_format

        if content_format == ContentFormat.DEFAULT:
            media_type = self.media_type
            if media_type:
                serializer = settings.serializer_for_content_type(media_type)
                if serializer is not None:
                    return serializer
            content_format = settings.default_format

        if content_format == ContentFormat.DEFAULT:
            raise ConfigurationError(
                "Invalid return format setup: the response fallbacks to default "
                "that was not set"
            )

        serializer = settings.serializer_for(content_format)
        if serializer is None:
            raise ConfigurationError(
                "Unable to define a deserializer for content of format "
                f"{content_format.value.upper()}"
            )
        return serializer

    def __repr__(self) -> str:
        return (
            f"RestResponse({self.request.method.value} {self.request.resource}: "
            f"{self.status_code} {self.reason_phrase})"
        )
