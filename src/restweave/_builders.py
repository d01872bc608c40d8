from pathlib import Path
from typing import Any, BinaryIO, Callable, Dict, List, Optional, Union

from ._utils._parameters import as_parameters, create_parameter
from .auth import (
    BasicRequestAuthenticator,
    BearerRequestAuthenticator,
    RequestAuthenticator,
)
from .models.enums import ContentFormat, HttpMethod, RequestParameterType
from .models.errors import ValidationError
from .models.parameters import (
    BodyPart,
    MultipartBody,
    Parameter,
    RequestBody,
    RequestFile,
    RequestReturn,
    validate_part,
)
from .models.request import RestRequest


class RequestBodyBuilder:
    """Builds a single body, or a multipart body when parts are added.

    Parts are validated as soon as they are added, so an unnamed, duplicated
    or nested part fails at the call that adds it.
    """

    def __init__(self) -> None:
        self._name: Optional[str] = None
        self._value: Any = None
        self._format = ContentFormat.DEFAULT
        self._parts: Optional[Dict[str, BodyPart]] = None

    def named(self, name: str) -> "RequestBodyBuilder":
        self._name = name
        return self

    def with_content(
        self, value: Any, format: ContentFormat = ContentFormat.DEFAULT
    ) -> "RequestBodyBuilder":
        if self._parts is not None:
            raise ValidationError("A multi-parted body cannot have a content value")
        self._value = value
        self._format = format
        return self

    def with_json_content(self, value: Any) -> "RequestBodyBuilder":
        return self.with_content(value, ContentFormat.JSON)

    def with_xml_content(self, value: Any) -> "RequestBodyBuilder":
        return self.with_content(value, ContentFormat.XML)

    def with_key_value_content(self, value: Any) -> "RequestBodyBuilder":
        return self.with_content(value, ContentFormat.KEY_VALUE)

    def _ensure_multipart(self) -> Dict[str, BodyPart]:
        if self._value is not None:
            raise ValidationError("A body with a content value cannot be multi-parted")
        if self._parts is None:
            self._parts = {}
        return self._parts

    def multipart(self) -> "RequestBodyBuilder":
        self._ensure_multipart()
        return self

    def with_part(
        self,
        part: Union[BodyPart, str, None],
        value: Any = None,
        format: ContentFormat = ContentFormat.DEFAULT,
    ) -> "RequestBodyBuilder":
        """Add a part, given either as a body/file or as a name and a value."""
        if part is None or isinstance(part, str):
            part = RequestBody(value=value, format=format, name=part)
        parts = self._ensure_multipart()
        validate_part(parts, part)
        parts[part.name] = part  # type: ignore[index]
        return self

    def with_file_part(
        self,
        name: str,
        file_name: str,
        stream: BinaryIO,
        content_type: Optional[str] = None,
    ) -> "RequestBodyBuilder":
        return self.with_part(
            RequestFile(
                name=name,
                file_name=file_name,
                stream=stream,
                content_type=content_type,
            )
        )

    def build(self) -> RequestBody:
        if self._parts is not None:
            return MultipartBody(name=self._name, parts=dict(self._parts))
        return RequestBody(value=self._value, format=self._format, name=self._name)


class RequestFileBuilder:
    def __init__(self) -> None:
        self._name: Optional[str] = None
        self._file_name: Optional[str] = None
        self._content_type: Optional[str] = None
        self._stream: Optional[BinaryIO] = None

    def named(self, name: str) -> "RequestFileBuilder":
        self._name = name
        return self

    def with_file_name(self, file_name: str) -> "RequestFileBuilder":
        self._file_name = file_name
        return self

    def with_content_type(self, content_type: str) -> "RequestFileBuilder":
        self._content_type = content_type
        return self

    def from_stream(self, stream: BinaryIO) -> "RequestFileBuilder":
        self._stream = stream
        return self

    def from_path(self, path: Union[str, Path]) -> "RequestFileBuilder":
        file_path = Path(path)
        if self._file_name is None:
            self._file_name = file_path.name
        self._stream = open(file_path, "rb")
        return self

    def build(self) -> RequestFile:
        if not self._name:
            raise ValidationError("A file must be named")
        if self._stream is None:
            raise ValidationError(f"The file {self._name} has no content stream")
        return RequestFile(
            name=self._name,
            file_name=self._file_name or self._name,
            stream=self._stream,
            content_type=self._content_type,
        )


class RequestBuilder:
    """Accumulates the pieces of a request until it is built.

    Every call is additive and returns the builder. Only local checks run
    here (method names, part names and formats); the rest is validated when
    the request is dispatched. :meth:`build` snapshots the current state into
    an immutable RestRequest, and can be called more than once.

    Examples:
        >>> request = (
        ...     RequestBuilder()
        ...     .post()
        ...     .to("orders")
        ...     .with_json_body({"id": 1})
        ...     .build()
        ... )
        >>> request.body().format
        <ContentFormat.JSON: 'json'>
    """

    def __init__(self) -> None:
        self._method: Optional[HttpMethod] = None
        self._resource: Optional[str] = None
        self._parameters: List[Parameter] = []
        self._authenticate: Optional[bool] = None
        self._authenticator: Optional[RequestAuthenticator] = None
        self._returned: Optional[RequestReturn] = None
        self._returned_format = ContentFormat.DEFAULT

    @property
    def is_configured(self) -> bool:
        return self._method is not None and bool(self._resource)

    def method(self, method: Union[str, HttpMethod]) -> "RequestBuilder":
        self._method = HttpMethod.parse(method)
        return self

    def get(self) -> "RequestBuilder":
        return self.method(HttpMethod.GET)

    def post(self) -> "RequestBuilder":
        return self.method(HttpMethod.POST)

    def put(self) -> "RequestBuilder":
        return self.method(HttpMethod.PUT)

    def delete(self) -> "RequestBuilder":
        return self.method(HttpMethod.DELETE)

    def head(self) -> "RequestBuilder":
        return self.method(HttpMethod.HEAD)

    def options(self) -> "RequestBuilder":
        return self.method(HttpMethod.OPTIONS)

    def to(self, resource: str, *args: Any) -> "RequestBuilder":
        """Set the resource template, binding ``args`` to ``{0}``, ``{1}``..."""
        if not resource:
            raise ValidationError("The resource of the request must be set")
        for index, arg in enumerate(args):
            self.with_route(str(index), arg)
        self._resource = resource
        return self

    def with_parameter(self, parameter: Parameter) -> "RequestBuilder":
        if parameter is None:
            raise ValidationError("A request parameter cannot be None")
        self._parameters.append(parameter)
        return self

    def with_parameters(self, *parameters: Parameter) -> "RequestBuilder":
        for parameter in parameters:
            self.with_parameter(parameter)
        return self

    def with_value(
        self, parameter_type: RequestParameterType, name: str, value: Any
    ) -> "RequestBuilder":
        return self.with_parameter(create_parameter(parameter_type, name, value))

    def with_values(
        self, parameter_type: RequestParameterType, values: Any
    ) -> "RequestBuilder":
        return self.with_parameters(*as_parameters(values, parameter_type))

    def with_route(self, name: str, value: Any) -> "RequestBuilder":
        return self.with_value(RequestParameterType.ROUTE, name, value)

    def with_routes(self, values: Any) -> "RequestBuilder":
        return self.with_values(RequestParameterType.ROUTE, values)

    def with_query_string(self, name: str, value: Any) -> "RequestBuilder":
        return self.with_value(RequestParameterType.QUERY_STRING, name, value)

    def with_query_strings(self, values: Any) -> "RequestBuilder":
        return self.with_values(RequestParameterType.QUERY_STRING, values)

    def with_header(self, name: str, value: Any) -> "RequestBuilder":
        return self.with_value(RequestParameterType.HEADER, name, value)

    def with_headers(self, values: Any) -> "RequestBuilder":
        return self.with_values(RequestParameterType.HEADER, values)

    def with_body(
        self,
        value: Any,
        *,
        name: Optional[str] = None,
        format: ContentFormat = ContentFormat.DEFAULT,
    ) -> "RequestBuilder":
        if isinstance(value, RequestBody):
            return self.with_parameter(value)
        return self.with_parameter(RequestBody(value=value, format=format, name=name))

    def build_body(
        self, configure: Callable[[RequestBodyBuilder], Any]
    ) -> "RequestBuilder":
        body = RequestBodyBuilder()
        configure(body)
        return self.with_parameter(body.build())

    def with_json_body(self, value: Any) -> "RequestBuilder":
        return self.build_body(lambda body: body.with_json_content(value))

    def with_xml_body(self, value: Any) -> "RequestBuilder":
        return self.build_body(lambda body: body.with_xml_content(value))

    def with_multipart_body(self, *parts: BodyPart) -> "RequestBuilder":
        def _configure(body: RequestBodyBuilder) -> None:
            body.multipart()
            for part in parts:
                body.with_part(part)

        return self.build_body(_configure)

    def with_file(self, file: RequestFile) -> "RequestBuilder":
        return self.with_parameter(file)

    def build_file(
        self, configure: Callable[[RequestFileBuilder], Any]
    ) -> "RequestBuilder":
        file = RequestFileBuilder()
        configure(file)
        return self.with_file(file.build())

    def returns(self, return_type: Optional[Any]) -> "RequestBuilder":
        """Declare the type the response body decodes to.

        Passing None leaves the declared return unchanged.
        """
        if return_type is not None:
            self._returned = RequestReturn.of(return_type)
        return self

    def returns_format(self, format: ContentFormat) -> "RequestBuilder":
        self._returned_format = format
        return self

    def returns_json(self, return_type: Optional[Any] = None) -> "RequestBuilder":
        return self.returns(return_type).returns_format(ContentFormat.JSON)

    def returns_xml(self, return_type: Optional[Any] = None) -> "RequestBuilder":
        return self.returns(return_type).returns_format(ContentFormat.XML)

    def returns_file(self, content_type: Optional[str] = None) -> "RequestBuilder":
        self._returned = RequestReturn.file(content_type)
        return self

    def has_no_return(self) -> "RequestBuilder":
        self._returned = RequestReturn.void()
        return self

    def authenticate(self, authenticate: Optional[bool] = True) -> "RequestBuilder":
        self._authenticate = authenticate
        return self

    def use_authenticator(
        self, authenticator: Optional[RequestAuthenticator]
    ) -> "RequestBuilder":
        self._authenticator = authenticator
        return self

    def use_basic_authentication(
        self, user_name: str, password: str
    ) -> "RequestBuilder":
        return self.use_authenticator(BasicRequestAuthenticator(user_name, password))

    def use_bearer_authentication(self, token: str) -> "RequestBuilder":
        return self.use_authenticator(BearerRequestAuthenticator(token))

    def anonymous(self) -> "RequestBuilder":
        return self.use_authenticator(None).authenticate(False)

    def build(self) -> RestRequest:
        if self._method is None:
            raise ValidationError("The HTTP method must be set")
        if not self._resource:
            raise ValidationError("The resource of the request must be set")

        return RestRequest(
            method=self._method,
            resource=self._resource,
            parameters=tuple(self._parameters),
            authenticate=self._authenticate,
            authenticator=self._authenticator,
            returned=self._returned,
            returned_format=self._returned_format,
        )
