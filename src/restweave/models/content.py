"""Transport-ready request content.

A built request turns into exactly one of these values when it is
dispatched: plain text, a single file, or a ``multipart/form-data``
document made of named sections. Each value knows the keyword arguments
that hand it to ``httpx.Client.build_request``.
"""

import mimetypes
import secrets
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, BinaryIO, Dict, List, Optional, Tuple, Union

from .._utils.constants import (
    APPLICATION_OCTET_STREAM,
    HEADER_CONTENT_DISPOSITION,
    HEADER_CONTENT_TYPE,
    MULTIPART_FORM_DATA,
)

FileField = Tuple[Optional[str], Union[bytes, BinaryIO], str]


def _format_param(name: str, value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', "%22")
    escaped = escaped.replace("\r", "%0D").replace("\n", "%0A")
    return f'{name}="{escaped}"'


class HttpContent(ABC):
    @property
    @abstractmethod
    def content_type(self) -> str: ...

    @abstractmethod
    def request_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments handing this content to ``build_request``."""

    def headers(self) -> Dict[str, str]:
        return {HEADER_CONTENT_TYPE: self.content_type}


class StringContent(HttpContent):
    """Text content, encoded as UTF-8."""

    def __init__(self, text: str, media_type: str, encoding: str = "utf-8"):
        self.text = text
        self.media_type = media_type
        self.encoding = encoding

    @property
    def content_type(self) -> str:
        return f"{self.media_type}; charset={self.encoding}"

    def read(self) -> bytes:
        return self.text.encode(self.encoding)

    def request_kwargs(self) -> Dict[str, Any]:
        return {"content": self.read()}

    def __repr__(self) -> str:
        return f"StringContent(media_type={self.media_type!r}, text={self.text!r})"


class FileContent(HttpContent):
    """The content of a binary stream, tagged with its file name if it has one."""

    def __init__(
        self,
        stream: BinaryIO,
        file_name: Optional[str] = None,
        media_type: Optional[str] = None,
    ):
        self.stream = stream
        self.file_name = file_name
        if media_type is None and file_name:
            media_type = mimetypes.guess_type(file_name)[0]
        self.media_type = media_type or APPLICATION_OCTET_STREAM

    @property
    def content_type(self) -> str:
        return self.media_type

    def read(self) -> bytes:
        return self.stream.read()

    def request_kwargs(self) -> Dict[str, Any]:
        return {"content": self.read()}

    def headers(self) -> Dict[str, str]:
        headers = super().headers()
        if self.file_name:
            headers[HEADER_CONTENT_DISPOSITION] = "attachment; " + _format_param(
                "filename", self.file_name
            )
        return headers

    def __repr__(self) -> str:
        return (
            f"FileContent(file_name={self.file_name!r}, "
            f"media_type={self.media_type!r})"
        )


@dataclass(frozen=True)
class MultipartSection:
    name: str
    content: Union[StringContent, FileContent]
    file_name: Optional[str] = None

    def field(self) -> Tuple[str, FileField]:
        """The ``(name, (file name, data, content type))`` entry httpx encodes."""
        if isinstance(self.content, FileContent):
            data: Union[bytes, BinaryIO] = self.content.stream
        else:
            data = self.content.read()
        return self.name, (self.file_name, data, self.content.content_type)


class MultipartContent(HttpContent):
    """A ``multipart/form-data`` document, encoded by httpx.

    Sections are sent in the order they were added. Sections with a file
    name carry it in their ``Content-Disposition``; the others omit it.
    httpx picks the boundary up from the ``Content-Type`` header. A document
    without sections is sent as the closing delimiter alone.
    """

    def __init__(self, boundary: Optional[str] = None):
        self.boundary = boundary or secrets.token_hex(16)
        self.sections: List[MultipartSection] = []

    @property
    def content_type(self) -> str:
        return f"{MULTIPART_FORM_DATA}; boundary={self.boundary}"

    def add(
        self,
        name: str,
        content: Union[StringContent, FileContent],
        file_name: Optional[str] = None,
    ) -> None:
        self.sections.append(MultipartSection(name, content, file_name))

    def files(self) -> List[Tuple[str, FileField]]:
        return [section.field() for section in self.sections]

    def request_kwargs(self) -> Dict[str, Any]:
        if not self.sections:
            return {"content": f"--{self.boundary}--\r\n".encode("ascii")}
        return {"files": self.files()}

    def __len__(self) -> int:
        return len(self.sections)

    def __repr__(self) -> str:
        names = [section.name for section in self.sections]
        return f"MultipartContent(boundary={self.boundary!r}, sections={names!r})"
