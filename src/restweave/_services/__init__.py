from ._content_composer import compose_content, create_content, resolve_format
from ._rest_client import RestClient

__all__ = [
    "RestClient",
    "compose_content",
    "create_content",
    "resolve_format",
]
