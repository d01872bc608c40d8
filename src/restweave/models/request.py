from dataclasses import dataclass
from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    Dict,
    List,
    Optional,
    Tuple,
)

from .._utils._route import fill_route
from .._utils._values import value_as_string
from .enums import ContentFormat, HttpMethod, RequestParameterType
from .parameters import Parameter, RequestBody, RequestFile, RequestReturn

if TYPE_CHECKING:
    from .._builders import RequestBuilder
    from ..auth import RequestAuthenticator


@dataclass(frozen=True)
class RestRequest:
    """An immutable HTTP request, assembled by a RequestBuilder.

    The request owns its parameters and the resources they carry: closing
    it (directly or by leaving a ``with`` block) closes every file stream
    exactly once.

    Examples:
        >>> request = RestRequest.build(
        ...     lambda b: b.get().to("users/{0}", 42).with_query_string("active", True)
        ... )
        >>> request.resolve_resource()
        'users/42'
    """

    method: HttpMethod
    resource: str
    parameters: Tuple[Parameter, ...] = ()
    authenticate: Optional[bool] = None
    authenticator: Optional["RequestAuthenticator"] = None
    returned: Optional[RequestReturn] = None
    returned_format: ContentFormat = ContentFormat.DEFAULT

    def _of_type(self, parameter_type: RequestParameterType) -> List[Parameter]:
        return [p for p in self.parameters if p.type == parameter_type]

    def routes(self) -> Dict[str, Any]:
        return {p.name: p.value for p in self._of_type(RequestParameterType.ROUTE)}

    def resolve_resource(self) -> str:
        """Fill the resource template with the route parameters."""
        return fill_route(self.resource, self.routes())

    def has_query_string(self) -> bool:
        return bool(self._of_type(RequestParameterType.QUERY_STRING))

    def query_string_pairs(self) -> Dict[str, Any]:
        return {
            p.name: p.value for p in self._of_type(RequestParameterType.QUERY_STRING)
        }

    def has_query_string_pair(self, name: str) -> bool:
        key = name.casefold()
        return any(
            p.name.casefold() == key
            for p in self._of_type(RequestParameterType.QUERY_STRING)
        )

    def query_params(self) -> List[Tuple[str, str]]:
        return [
            (p.name, value_as_string(p.value))
            for p in self._of_type(RequestParameterType.QUERY_STRING)
        ]

    def headers(self) -> List[Tuple[str, str]]:
        return [
            (p.name, value_as_string(p.value))
            for p in self._of_type(RequestParameterType.HEADER)
        ]

    def has_body(self) -> bool:
        return self.body() is not None

    def body(self) -> Optional[RequestBody]:
        bodies = self._of_type(RequestParameterType.BODY)
        return bodies[0] if bodies else None  # type: ignore[return-value]

    def has_files(self) -> bool:
        return bool(self._of_type(RequestParameterType.FILE))

    def files(self) -> List[RequestFile]:
        return self._of_type(RequestParameterType.FILE)  # type: ignore[return-value]

    def content_parameters(self) -> List[Parameter]:
        return [
            p
            for p in self.parameters
            if p.type in (RequestParameterType.BODY, RequestParameterType.FILE)
        ]

    def close(self) -> None:
        for parameter in self.parameters:
            parameter.close()

    def __enter__(self) -> "RestRequest":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    @staticmethod
    def model(configure: Callable[["RequestBuilder"], Any]) -> "RequestBuilder":
        from .._builders import RequestBuilder

        builder = RequestBuilder()
        configure(builder)
        return builder

    @classmethod
    def build(cls, configure: Callable[["RequestBuilder"], Any]) -> "RestRequest":
        return cls.model(configure).build()

    @classmethod
    def get(
        cls,
        resource: str,
        *,
        returns: Optional[Any] = None,
        routes: Any = None,
        query: Any = None,
    ) -> "RestRequest":
        return cls.build(
            lambda b: b.get()
            .to(resource)
            .with_routes(routes)
            .with_query_strings(query)
            .returns(returns)
        )

    @classmethod
    def post(
        cls,
        resource: str,
        body: Any,
        *,
        returns: Optional[Any] = None,
        routes: Any = None,
        query: Any = None,
    ) -> "RestRequest":
        return cls.build(
            lambda b: b.post()
            .to(resource)
            .with_routes(routes)
            .with_query_strings(query)
            .with_body(body)
            .returns(returns)
        )

    @classmethod
    def put(
        cls,
        resource: str,
        body: Any,
        *,
        returns: Optional[Any] = None,
        routes: Any = None,
        query: Any = None,
    ) -> "RestRequest":
        return cls.build(
            lambda b: b.put()
            .to(resource)
            .with_routes(routes)
            .with_query_strings(query)
            .with_body(body)
            .returns(returns)
        )

    @classmethod
    def delete(
        cls, resource: str, *, routes: Any = None, query: Any = None
    ) -> "RestRequest":
        return cls.build(
            lambda b: b.delete()
            .to(resource)
            .with_routes(routes)
            .with_query_strings(query)
        )

    @classmethod
    def post_file(
        cls,
        resource: str,
        file: RequestFile,
        *,
        routes: Any = None,
        query: Any = None,
    ) -> "RestRequest":
        return cls.build(
            lambda b: b.post()
            .to(resource)
            .with_routes(routes)
            .with_query_strings(query)
            .with_file(file)
        )
