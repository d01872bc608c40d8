from ._logs import setup_logging
from ._values import is_simple_value, value_as_string

__all__ = [
    "is_simple_value",
    "setup_logging",
    "value_as_string",
]
