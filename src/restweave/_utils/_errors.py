from contextlib import asynccontextmanager, contextmanager
from typing import AsyncGenerator, Generator

import httpx

from ..models.errors import NetworkError


@contextmanager
def handle_transport_errors() -> Generator[None, None, None]:
    """Context manager translating transport failures into NetworkError.

    Only ``httpx.TransportError`` (connection, timeout, protocol failures) is
    translated; everything else propagates untouched.

    Raises:
        NetworkError: When the wrapped send fails at the transport level.
    """
    try:
        yield
    except httpx.TransportError as e:
        raise NetworkError(str(e) or type(e).__name__) from e


@asynccontextmanager
async def handle_transport_errors_async() -> AsyncGenerator[None, None]:
    """Async version of handle_transport_errors()."""
    try:
        yield
    except httpx.TransportError as e:
        raise NetworkError(str(e) or type(e).__name__) from e
