"""Interceptors invoked around the network send.

Request handlers run in order after the request has been translated and
may modify the outgoing ``httpx.Request``. Response handlers run in order
once the response has been wrapped and may only inspect it. Handlers are
awaited one after the other, never concurrently, and any exception they
raise aborts the dispatch unchanged.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

import httpx

if TYPE_CHECKING:
    from ._services._rest_client import RestClient
    from .models.response import RestResponse


class RequestHandler(ABC):
    @abstractmethod
    def handle_request(self, client: "RestClient", message: httpx.Request) -> None: ...

    async def handle_request_async(
        self, client: "RestClient", message: httpx.Request
    ) -> None:
        self.handle_request(client, message)


class ResponseHandler(ABC):
    @abstractmethod
    def handle_response(self, client: "RestClient", response: "RestResponse") -> None: ...

    async def handle_response_async(
        self, client: "RestClient", response: "RestResponse"
    ) -> None:
        self.handle_response(client, response)
