from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import UUID

from ..models.errors import ValidationError

_SIMPLE_TYPES = (str, bytes, int, float, bool, Decimal, UUID, date, datetime, time)


def is_simple_value(value: Any) -> bool:
    """Check whether a value is sent as plain text rather than serialized."""
    return isinstance(value, _SIMPLE_TYPES) or isinstance(value, Enum)


def value_as_string(value: Any) -> str:
    """Render a scalar value the way it travels on the wire.

    Examples:
        >>> value_as_string(True)
        'true'
        >>> value_as_string(42)
        '42'
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return value_as_string(value.value)
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, bytes):
        try:
            return value.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ValidationError(
                f"The value {value!r} is not UTF-8 text and cannot be sent as a string"
            ) from e
    return str(value)
