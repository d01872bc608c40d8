from typing import Generator

import pytest

from restweave import (
    ClientSettings,
    ContentFormat,
    JsonContentSerializer,
    KeyValueContentSerializer,
    RestClient,
    XmlContentSerializer,
)
from restweave._utils.constants import ENV_BASE_URL


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Clean environment variables before each test."""
    monkeypatch.delenv(ENV_BASE_URL, raising=False)
    monkeypatch.setattr("restweave._config.load_dotenv", lambda: False)


@pytest.fixture
def base_url() -> str:
    return "https://example.com/api/"


@pytest.fixture
def json_serializer() -> JsonContentSerializer:
    return JsonContentSerializer()


@pytest.fixture
def settings(base_url: str, json_serializer: JsonContentSerializer) -> ClientSettings:
    return ClientSettings(
        base_url=base_url,
        default_format=ContentFormat.JSON,
        serializers=[
            json_serializer,
            XmlContentSerializer(),
            KeyValueContentSerializer(),
        ],
    )


@pytest.fixture
def client(settings: ClientSettings) -> Generator[RestClient, None, None]:
    with RestClient(settings) as rest_client:
        yield rest_client
