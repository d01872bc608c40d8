from dataclasses import dataclass, field, replace
from pathlib import Path
from types import MappingProxyType
from typing import Any, BinaryIO, ClassVar, Dict, Mapping, Optional, Union

from .._utils._values import is_simple_value
from .enums import ContentFormat, RequestParameterType, ReturnKind
from .errors import ValidationError


@dataclass(frozen=True)
class RequestParameter:
    """A named route, query string or header value."""

    type: RequestParameterType
    name: str
    value: Any

    def __post_init__(self) -> None:
        if self.type in (RequestParameterType.BODY, RequestParameterType.FILE):
            raise ValidationError(
                f"A {self.type.value} parameter must be a RequestBody or RequestFile"
            )
        if not self.name:
            raise ValidationError(f"A {self.type.value} parameter must be named")

    @property
    def format(self) -> ContentFormat:
        return ContentFormat.DEFAULT

    def is_simple_value(self) -> bool:
        return is_simple_value(self.value)

    def close(self) -> None:
        pass


@dataclass(frozen=True)
class RequestBody:
    """The body of a request, or a named part of a multipart body.

    The format decides which serializer encodes a complex value; it is only
    resolved when the request is dispatched. Simple values (strings,
    numbers, booleans...) are sent as text whatever the format, and
    ``bytes`` are sent as they are.
    """

    type: ClassVar[RequestParameterType] = RequestParameterType.BODY

    value: Any = None
    format: ContentFormat = ContentFormat.DEFAULT
    name: Optional[str] = None

    def is_multipart(self) -> bool:
        return False

    def is_simple_value(self) -> bool:
        return is_simple_value(self.value)

    def close(self) -> None:
        """Plain bodies hold no resources."""


@dataclass(frozen=True)
class RequestFile:
    """A binary stream sent as a file.

    The file owns its stream: closing the file (or the request holding it)
    closes the stream, exactly once.
    """

    type: ClassVar[RequestParameterType] = RequestParameterType.FILE

    name: str
    file_name: str
    stream: BinaryIO
    content_type: Optional[str] = None
    _closed: bool = field(default=False, init=False, repr=False, compare=False)

    @property
    def value(self) -> BinaryIO:
        return self.stream

    @property
    def format(self) -> ContentFormat:
        return ContentFormat.DEFAULT

    @property
    def closed(self) -> bool:
        return self._closed

    @classmethod
    def from_path(
        cls,
        name: str,
        path: Union[str, Path],
        content_type: Optional[str] = None,
    ) -> "RequestFile":
        file_path = Path(path)
        return cls(
            name=name,
            file_name=file_path.name,
            stream=open(file_path, "rb"),
            content_type=content_type,
        )

    def read(self) -> bytes:
        return self.stream.read()

    def close(self) -> None:
        if self._closed:
            return
        object.__setattr__(self, "_closed", True)
        self.stream.close()


BodyPart = Union[RequestBody, RequestFile]

Parameter = Union[RequestParameter, RequestBody, RequestFile]

_PART_FORMATS = (ContentFormat.DEFAULT, ContentFormat.KEY_VALUE)


def validate_part(parts: Mapping[str, BodyPart], part: BodyPart) -> None:
    """Check that ``part`` can join a multipart body already holding ``parts``.

    Raises:
        ValidationError: If the part is unnamed, already present, itself
            multipart, or has a format other than default or key-value.
    """
    if part is None:
        raise ValidationError("A part of a multi-parted body cannot be None")
    if not isinstance(part, (RequestBody, RequestFile)):
        raise ValidationError(
            "Only bodies and files can be parts of a multi-parted body"
        )
    if not part.name:
        raise ValidationError("A part of a multi-parted body must be named")

    if isinstance(part, RequestBody):
        if part.is_multipart():
            raise ValidationError(
                "Cannot add a multi-parted body to a multi-parted body"
            )
        if part.format not in _PART_FORMATS:
            raise ValidationError(
                f"The part {part.name} has format {part.format.value}: "
                "a body part can only use the default or key-value format"
            )

    if part.name in parts:
        raise ValidationError(f"A part named {part.name} is already in the body")


@dataclass(frozen=True)
class MultipartBody(RequestBody):
    """A body made of named parts, sent as ``multipart/form-data``.

    Parts are either files or plain bodies in the default or key-value
    format. A multipart body cannot contain another multipart body. The
    parts are exposed as a read-only mapping; :meth:`with_part` returns a
    new body.
    """

    parts: Mapping[str, BodyPart] = field(default_factory=dict)
    _closed: bool = field(default=False, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        parts: Dict[str, BodyPart] = {}
        for part in self.parts.values():
            validate_part(parts, part)
            parts[part.name] = part  # type: ignore[index]
        object.__setattr__(self, "parts", MappingProxyType(parts))

    def is_multipart(self) -> bool:
        return True

    def with_part(self, part: BodyPart) -> "MultipartBody":
        validate_part(self.parts, part)
        return replace(self, parts={**self.parts, part.name: part})

    def close(self) -> None:
        if self._closed:
            return
        object.__setattr__(self, "_closed", True)
        for part in self.parts.values():
            part.close()


@dataclass(frozen=True)
class RequestReturn:
    """What a request expects back, consumed when the response is decoded."""

    kind: ReturnKind
    return_type: Optional[Any] = None
    content_type: Optional[str] = None

    @classmethod
    def of(cls, return_type: Optional[Any] = None) -> "RequestReturn":
        return cls(ReturnKind.OBJECT, return_type=return_type)

    @classmethod
    def file(cls, content_type: Optional[str] = None) -> "RequestReturn":
        return cls(ReturnKind.FILE, content_type=content_type)

    @classmethod
    def void(cls) -> "RequestReturn":
        return cls(ReturnKind.VOID)
