"""Content serializers.

A serializer converts values to and from text for one content format and
advertises the content types it handles; the first one is canonical and
labels the content it produces.
"""

import json
import xml.etree.ElementTree as ET
from abc import ABC, abstractmethod
from dataclasses import asdict, is_dataclass
from typing import Any, Dict, List, Mapping, Optional
from urllib.parse import parse_qsl, urlencode

from pydantic import BaseModel, TypeAdapter

from ._utils._values import value_as_string
from .models.enums import ContentFormat

_ANY_ADAPTER: TypeAdapter[Any] = TypeAdapter(Any)
_XML_DECLARATION = "<?xml version='1.0' encoding='utf-8'?>\n"


class ContentSerializer(ABC):
    supported_format: ContentFormat
    content_types: List[str]

    @abstractmethod
    def serialize(self, value: Any) -> str: ...

    @abstractmethod
    def deserialize(self, text: str, return_type: Optional[Any] = None) -> Any: ...

    def supports_content_type(self, media_type: str) -> bool:
        return media_type.lower() in (c.lower() for c in self.content_types)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(format={self.supported_format.value!r})"


def _validate(value: Any, return_type: Optional[Any]) -> Any:
    if return_type is None or return_type is Any:
        return value
    return TypeAdapter(return_type).validate_python(value)


def _plain(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(by_alias=True, mode="json")
    if is_dataclass(value) and not isinstance(value, type):
        return asdict(value)
    return value


class JsonContentSerializer(ContentSerializer):
    """JSON serializer backed by pydantic.

    Pydantic models, dataclasses and plain containers are serialized; when
    a target type is given the decoded JSON is validated into it.
    """

    supported_format = ContentFormat.JSON

    def __init__(self, content_types: Optional[List[str]] = None):
        self.content_types = content_types or ["application/json", "text/json"]

    def serialize(self, value: Any) -> str:
        return _ANY_ADAPTER.dump_json(value, by_alias=True).decode("utf-8")

    def deserialize(self, text: str, return_type: Optional[Any] = None) -> Any:
        if return_type is None or return_type is Any:
            return json.loads(text)
        return TypeAdapter(return_type).validate_json(text)


class XmlContentSerializer(ContentSerializer):
    """XML serializer for dict-shaped values.

    A dict with a single key becomes the root element; nested dicts become
    child elements, lists repeated siblings and ``None`` empty elements.
    Pydantic models are rooted at their class name. Decoding yields the
    inverse dict, without the root tag when a target type is given.
    """

    supported_format = ContentFormat.XML

    def __init__(self, content_types: Optional[List[str]] = None):
        self.content_types = content_types or ["application/xml", "text/xml"]

    def serialize(self, value: Any) -> str:
        if isinstance(value, BaseModel):
            value = {type(value).__name__: _plain(value)}
        value = _plain(value)
        if not isinstance(value, Mapping) or len(value) != 1:
            raise ValueError(
                "XML content must be a mapping with exactly one root element"
            )
        root_tag, root_value = next(iter(value.items()))
        root = self._to_element(str(root_tag), root_value)
        return _XML_DECLARATION + ET.tostring(root, encoding="unicode")

    def deserialize(self, text: str, return_type: Optional[Any] = None) -> Any:
        root = ET.fromstring(text)
        value = self._from_element(root)
        if return_type is None or return_type is Any:
            return {_strip_ns(root.tag): value}
        return _validate(value, return_type)

    def _to_element(self, tag: str, value: Any) -> ET.Element:
        element = ET.Element(tag)
        value = _plain(value)
        if value is None:
            return element
        if isinstance(value, Mapping):
            for key, child in value.items():
                if isinstance(child, (list, tuple)):
                    for item in child:
                        element.append(self._to_element(str(key), item))
                else:
                    element.append(self._to_element(str(key), child))
        elif isinstance(value, (list, tuple)):
            for item in value:
                element.append(self._to_element("item", item))
        else:
            element.text = value_as_string(value)
        return element

    def _from_element(self, element: ET.Element) -> Any:
        children: Dict[str, List[Any]] = {}
        for child in element:
            children.setdefault(_strip_ns(child.tag), []).append(
                self._from_element(child)
            )

        if not children:
            text = (element.text or "").strip()
            return text or None

        return {
            tag: values if len(values) > 1 else values[0]
            for tag, values in children.items()
        }


def _strip_ns(tag: str) -> str:
    if tag.startswith("{"):
        return tag.split("}", 1)[1]
    return tag


class KeyValueContentSerializer(ContentSerializer):
    """Serializer for ``application/x-www-form-urlencoded`` content."""

    supported_format = ContentFormat.KEY_VALUE

    def __init__(self, content_types: Optional[List[str]] = None):
        self.content_types = content_types or ["application/x-www-form-urlencoded"]

    def serialize(self, value: Any) -> str:
        value = _plain(value)
        if isinstance(value, Mapping):
            pairs = value.items()
        else:
            pairs = value
        return urlencode(
            [
                (str(key), value_as_string(item))
                for key, item in pairs
                if item is not None
            ]
        )

    def deserialize(self, text: str, return_type: Optional[Any] = None) -> Any:
        return _validate(dict(parse_qsl(text, keep_blank_values=True)), return_type)
