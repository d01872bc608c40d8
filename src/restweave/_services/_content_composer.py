from io import BytesIO
from typing import Optional

from .._config import ClientSettings
from .._utils._values import value_as_string
from .._utils.constants import TEXT_PLAIN
from ..models.content import FileContent, HttpContent, MultipartContent, StringContent
from ..models.enums import ContentFormat, RequestParameterType
from ..models.errors import ConfigurationError, ValidationError
from ..models.parameters import MultipartBody, Parameter, RequestBody, RequestFile
from ..models.request import RestRequest
from ..serializers import ContentSerializer


def resolve_format(body: RequestBody, settings: ClientSettings) -> ContentFormat:
    """Resolve the format of a body, falling back to the client default.

    Raises:
        ConfigurationError: If both the body and the client use the default.
    """
    content_format = body.format
    if content_format == ContentFormat.DEFAULT:
        content_format = settings.default_format
    if content_format == ContentFormat.DEFAULT:
        raise ConfigurationError(
            "Invalid content format setup: the body fallbacks to default that was not set"
        )
    return content_format


def find_serializer(
    settings: ClientSettings, content_format: ContentFormat
) -> ContentSerializer:
    serializer = settings.serializer_for(content_format)
    if serializer is None:
        raise ConfigurationError(
            "Unable to define a serializer for content of format "
            f"{content_format.value.upper()}"
        )
    return serializer


def _serialize_body(body: RequestBody, settings: ClientSettings) -> StringContent:
    serializer = find_serializer(settings, resolve_format(body, settings))
    try:
        text = serializer.serialize(body.value)
    except (TypeError, ValueError) as e:
        raise ValidationError(
            f"Unable to serialize the request body with {serializer!r}: {e}"
        ) from e
    return StringContent(text, serializer.content_types[0])


def _file_content(file: RequestFile) -> FileContent:
    return FileContent(file.stream, file.file_name, file.content_type)


def create_multipart_content(
    body: MultipartBody, settings: ClientSettings
) -> MultipartContent:
    """Compose every part of a multipart body, in insertion order.

    File parts keep their file name; the other parts are composed like a
    standalone body and carry no file name.
    """
    multipart = MultipartContent()
    for name, part in body.parts.items():
        if isinstance(part, RequestFile):
            multipart.add(name, _file_content(part), part.file_name)
        else:
            multipart.add(name, create_content(part, settings))
    return multipart


def create_content(parameter: Parameter, settings: ClientSettings) -> HttpContent:
    """Turn a body or file parameter into transport content.

    Bytes are sent as they are, as ``application/octet-stream``. Other
    simple values are sent as text. Complex values are serialized with the
    first serializer registered for the resolved format.

    Raises:
        ValidationError: If the body has no value or cannot be serialized.
        ConfigurationError: If the format or its serializer cannot be
            resolved, or the parameter cannot be sent as content at all.
    """
    if isinstance(parameter, MultipartBody):
        return create_multipart_content(parameter, settings)

    if isinstance(parameter, RequestBody):
        if parameter.value is None:
            raise ValidationError("The request body has no value to send")
        if isinstance(parameter.value, (bytes, bytearray)):
            return FileContent(BytesIO(bytes(parameter.value)))
        if parameter.is_simple_value():
            return StringContent(value_as_string(parameter.value), TEXT_PLAIN)
        return _serialize_body(parameter, settings)

    if parameter.type == RequestParameterType.FILE:
        if not isinstance(parameter, RequestFile):
            raise ConfigurationError(
                f"The file parameter {parameter.name} does not carry a stream"
            )
        return _file_content(parameter)

    raise ConfigurationError(
        f"A {parameter.type.value} parameter cannot be sent as content"
    )


def compose_content(
    request: RestRequest, settings: ClientSettings
) -> Optional[HttpContent]:
    """Compose the content of a request, if it has a body or a file.

    Raises:
        ValidationError: If the request carries more than one body or file.
    """
    parameters = request.content_parameters()
    if not parameters:
        return None
    if len(parameters) > 1:
        names = ", ".join(p.name or p.type.value for p in parameters)
        raise ValidationError(
            f"The request {request.method.value} {request.resource} has more than "
            f"one body or file ({names}): use a multipart body to send them together"
        )
    return create_content(parameters[0], settings)
