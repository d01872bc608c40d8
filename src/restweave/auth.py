"""Request authenticators.

An authenticator is consulted once per dispatch, before the request is
translated to the wire. It returns the credential parameters (usually an
``Authorization`` header) that are merged into the outgoing message; the
built request itself is never modified.
"""

import base64
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, List

from ._utils.constants import HEADER_AUTHORIZATION
from .models.enums import RequestParameterType
from .models.parameters import RequestParameter

if TYPE_CHECKING:
    from ._services._rest_client import RestClient
    from .models.request import RestRequest


class RequestAuthenticator(ABC):
    @abstractmethod
    def authenticate_request(
        self, client: "RestClient", request: "RestRequest"
    ) -> List[RequestParameter]: ...


class BasicRequestAuthenticator(RequestAuthenticator):
    def __init__(self, user_name: str, password: str):
        self.user_name = user_name
        self.password = password

    def authenticate_request(
        self, client: "RestClient", request: "RestRequest"
    ) -> List[RequestParameter]:
        credentials = f"{self.user_name}:{self.password}".encode("utf-8")
        token = base64.b64encode(credentials).decode("ascii")
        return [
            RequestParameter(
                RequestParameterType.HEADER, HEADER_AUTHORIZATION, f"Basic {token}"
            )
        ]

    def __repr__(self) -> str:
        return f"BasicRequestAuthenticator(user_name={self.user_name!r})"


class BearerRequestAuthenticator(RequestAuthenticator):
    """Sends a bearer token (typically a JWT) in the Authorization header."""

    def __init__(self, token: str):
        self.token = token

    def authenticate_request(
        self, client: "RestClient", request: "RestRequest"
    ) -> List[RequestParameter]:
        return [
            RequestParameter(
                RequestParameterType.HEADER, HEADER_AUTHORIZATION, f"Bearer {self.token}"
            )
        ]

    def __repr__(self) -> str:
        return "BearerRequestAuthenticator(token='***')"
