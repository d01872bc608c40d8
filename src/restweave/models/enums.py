from enum import Enum

from .errors import ConfigurationError, ValidationError


class HttpMethod(str, Enum):
    """The HTTP verbs a request can be built with."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"

    @classmethod
    def parse(cls, method: "str | HttpMethod") -> "HttpMethod":
        """Parse a method name, ignoring case.

        Raises:
            ValidationError: If the method is empty.
            ConfigurationError: If the method is not a supported verb.
        """
        if isinstance(method, HttpMethod):
            return method
        if not method:
            raise ValidationError("The HTTP method must be set")
        try:
            return cls(method.upper())
        except ValueError:
            raise ConfigurationError(
                f"The string {method} is not a valid HTTP method"
            ) from None


class ContentFormat(str, Enum):
    """Wire encodings a body can be serialized to."""

    DEFAULT = "default"
    JSON = "json"
    XML = "xml"
    KEY_VALUE = "key_value"


class RequestParameterType(str, Enum):
    ROUTE = "route"
    QUERY_STRING = "query_string"
    HEADER = "header"
    BODY = "body"
    FILE = "file"


class ReturnKind(str, Enum):
    OBJECT = "object"
    VOID = "void"
    FILE = "file"
