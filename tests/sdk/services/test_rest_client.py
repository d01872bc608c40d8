import logging
from io import BytesIO
from typing import List

import httpx
import pytest
from pydantic import BaseModel
from pytest_httpx import HTTPXMock

from restweave import (
    AuthenticationRequiredError,
    BearerRequestAuthenticator,
    ClientSettings,
    ConfigurationError,
    ContentFormat,
    HttpErrorKind,
    HttpStatusError,
    NetworkError,
    RequestFile,
    RequestHandler,
    ResponseHandler,
    RestClient,
    RestRequest,
    RestResponse,
    ValidationError,
)
from restweave._utils.constants import ENV_BASE_URL, HEADER_USER_AGENT, USER_AGENT


class _User(BaseModel):
    id: int
    name: str


class _Recorder(RequestHandler, ResponseHandler):
    def __init__(self, name: str, calls: List[str]):
        self.name = name
        self.calls = calls

    def handle_request(self, client: RestClient, message: httpx.Request) -> None:
        self.calls.append(f"request:{self.name}")
        message.headers[f"X-{self.name}"] = "seen"

    def handle_response(self, client: RestClient, response: RestResponse) -> None:
        self.calls.append(f"response:{self.name}:{response.status_code}")


class _Failing(RequestHandler):
    def handle_request(self, client: RestClient, message: httpx.Request) -> None:
        raise RuntimeError("rejected by handler")


class TestRestClient:
    class TestInit:
        def test_base_url_from_settings(self, client: RestClient, base_url: str):
            assert client.base_url == base_url

        def test_default_headers(self, settings: ClientSettings):
            settings = settings.model_copy(update={"default_headers": {"X-Flag": True}})
            with RestClient(settings) as client:
                assert client.default_headers == {
                    HEADER_USER_AGENT: USER_AGENT,
                    "X-Flag": "true",
                }

        def test_missing_base_url(self):
            with pytest.raises(ConfigurationError, match="base URI"):
                RestClient(ClientSettings())

        def test_relative_base_url(self):
            with pytest.raises(ConfigurationError, match="not absolute"):
                RestClient(ClientSettings(base_url="api/"))

        def test_base_url_from_environment(self, monkeypatch: pytest.MonkeyPatch):
            monkeypatch.setenv(ENV_BASE_URL, "https://env.example.com/")

            with RestClient(ClientSettings()) as client:
                assert client.base_url == "https://env.example.com/"
                assert client.settings.base_url == "https://env.example.com/"

        def test_build(self, base_url: str):
            with RestClient.build(
                lambda s: s.base_url(base_url)
                .use_json_serializer()
                .default_format(ContentFormat.JSON)
            ) as client:
                assert client.settings.default_format == ContentFormat.JSON
                assert len(client.settings.serializers) == 1

    class TestRequest:
        def test_get_with_route_and_query(
            self, httpx_mock: HTTPXMock, client: RestClient, base_url: str
        ):
            httpx_mock.add_response(
                url=f"{base_url}users/42?active=true",
                json={"id": 42, "name": "Ada"},
            )

            request = RestRequest.build(
                lambda b: b.get()
                .to("users/{0}", 42)
                .with_query_string("active", True)
                .returns(_User)
            )
            response = client.request(request)

            sent_request = httpx_mock.get_request()
            assert sent_request is not None
            assert sent_request.method == "GET"
            assert sent_request.url == f"{base_url}users/42?active=true"
            assert sent_request.headers[HEADER_USER_AGENT] == USER_AGENT
            assert sent_request.headers["Accept"] == "application/json, text/json"

            assert response.is_successful()
            assert response.get_body() == _User(id=42, name="Ada")

        def test_post_json_body(
            self, httpx_mock: HTTPXMock, client: RestClient, base_url: str
        ):
            httpx_mock.add_response(url=f"{base_url}users", status_code=201)

            client.request(RestRequest.post("users", {"name": "Ada"}))

            sent_request = httpx_mock.get_request()
            assert sent_request is not None
            assert sent_request.headers["Content-Type"].startswith("application/json")
            assert sent_request.content == b'{"name":"Ada"}'

        def test_post_multipart(
            self, httpx_mock: HTTPXMock, client: RestClient, base_url: str
        ):
            httpx_mock.add_response(url=f"{base_url}upload")

            request = RestRequest.build(
                lambda b: b.post()
                .to("upload")
                .build_body(
                    lambda body: body.with_part("title", "Report").with_file_part(
                        "file", "report.txt", BytesIO(b"content")
                    )
                )
            )
            with request:
                client.request(request)

            sent_request = httpx_mock.get_request()
            assert sent_request is not None
            assert sent_request.headers["Content-Type"].startswith(
                "multipart/form-data; boundary="
            )
            assert b'name="title"' in sent_request.content
            assert (
                b"Content-Type: text/plain; charset=utf-8\r\n\r\nReport\r\n"
                in sent_request.content
            )
            assert b'name="file"; filename="report.txt"' in sent_request.content
            assert request.body().parts["file"].closed

        def test_post_bytes_body(
            self, httpx_mock: HTTPXMock, client: RestClient, base_url: str
        ):
            httpx_mock.add_response(url=f"{base_url}images")

            client.request(RestRequest.post("images", b"\xff\xd8\xff\xe0"))

            sent_request = httpx_mock.get_request()
            assert sent_request is not None
            assert sent_request.headers["Content-Type"] == "application/octet-stream"
            assert sent_request.content == b"\xff\xd8\xff\xe0"

        def test_non_utf8_header_sends_nothing(
            self, httpx_mock: HTTPXMock, client: RestClient
        ):
            request = RestRequest.build(
                lambda b: b.get().to("a").with_header("X-Raw", b"\xff")
            )

            with pytest.raises(ValidationError, match="not UTF-8"):
                client.request(request)

            assert httpx_mock.get_requests() == []

        def test_post_file(
            self, httpx_mock: HTTPXMock, client: RestClient, base_url: str
        ):
            httpx_mock.add_response(url=f"{base_url}docs")

            file = RequestFile(name="doc", file_name="doc.pdf", stream=BytesIO(b"%PDF"))
            client.request(RestRequest.post_file("docs", file))

            sent_request = httpx_mock.get_request()
            assert sent_request is not None
            assert sent_request.headers["Content-Type"] == "application/pdf"
            assert sent_request.headers["Content-Disposition"] == (
                'attachment; filename="doc.pdf"'
            )
            assert sent_request.content == b"%PDF"

        def test_request_header_overrides_accept(
            self, httpx_mock: HTTPXMock, client: RestClient
        ):
            httpx_mock.add_response()

            client.request(
                RestRequest.build(
                    lambda b: b.get().to("a").with_header("Accept", "text/csv")
                )
            )

            sent_request = httpx_mock.get_request()
            assert sent_request is not None
            assert sent_request.headers["Accept"] == "text/csv"

        def test_accept_follows_return_format(
            self, httpx_mock: HTTPXMock, client: RestClient
        ):
            httpx_mock.add_response()

            client.request(RestRequest.build(lambda b: b.get().to("a").returns_xml()))

            sent_request = httpx_mock.get_request()
            assert sent_request is not None
            assert sent_request.headers["Accept"] == "application/xml, text/xml"

        def test_accept_for_file_return(
            self, httpx_mock: HTTPXMock, client: RestClient
        ):
            httpx_mock.add_response(content=b"%PDF")

            response = client.request(
                RestRequest.build(
                    lambda b: b.get().to("a").returns_file("application/pdf")
                )
            )

            sent_request = httpx_mock.get_request()
            assert sent_request is not None
            assert sent_request.headers["Accept"] == "application/pdf"
            assert response.get_body().content == b"%PDF"

        def test_status_is_not_raised(
            self, httpx_mock: HTTPXMock, client: RestClient
        ):
            httpx_mock.add_response(status_code=404)

            response = client.request(RestRequest.get("users/{id}", routes={"id": 1}))

            assert not response.is_successful()
            error = response.get_exception()
            assert isinstance(error, HttpStatusError)
            assert error.kind == HttpErrorKind.NOT_FOUND
            with pytest.raises(HttpStatusError):
                response.assert_successful()

        def test_missing_route_value_sends_nothing(
            self, httpx_mock: HTTPXMock, client: RestClient
        ):
            with pytest.raises(ValidationError, match="'id'"):
                client.request(RestRequest.get("users/{id}"))

            assert httpx_mock.get_requests() == []

        def test_network_error(self, httpx_mock: HTTPXMock, client: RestClient):
            httpx_mock.add_exception(httpx.ConnectError("connection refused"))

            with pytest.raises(NetworkError) as exc_info:
                client.request(RestRequest.get("a"))

            assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

        def test_debug_logging(
            self,
            httpx_mock: HTTPXMock,
            settings: ClientSettings,
            base_url: str,
            caplog: pytest.LogCaptureFixture,
        ):
            httpx_mock.add_response(url=f"{base_url}a")

            with caplog.at_level(logging.DEBUG, logger="restweave"):
                with RestClient(settings.model_copy(update={"debug": True})) as client:
                    client.request(RestRequest.get("a"))

            assert f"Request: GET {base_url}a" in caplog.text
            assert "Response: 200 OK" in caplog.text

    class TestAuthentication:
        def test_required_without_authenticator(
            self,
            httpx_mock: HTTPXMock,
            client: RestClient,
            caplog: pytest.LogCaptureFixture,
        ):
            request = RestRequest.build(lambda b: b.get().to("a").authenticate())

            with pytest.raises(AuthenticationRequiredError) as exc_info:
                client.request(request)

            assert exc_info.value.method == "GET"
            assert exc_info.value.resource == "a"
            assert httpx_mock.get_requests() == []
            assert "authentication required" in caplog.text

        def test_client_authenticator_is_used_by_default(
            self, httpx_mock: HTTPXMock, settings: ClientSettings
        ):
            httpx_mock.add_response()

            settings = settings.model_copy(
                update={"authenticator": BearerRequestAuthenticator("client-token")}
            )
            with RestClient(settings) as client:
                client.request(RestRequest.get("a"))

            sent_request = httpx_mock.get_request()
            assert sent_request is not None
            assert sent_request.headers["Authorization"] == "Bearer client-token"

        def test_request_authenticator_wins(
            self, httpx_mock: HTTPXMock, settings: ClientSettings
        ):
            httpx_mock.add_response()

            settings = settings.model_copy(
                update={"authenticator": BearerRequestAuthenticator("client-token")}
            )
            with RestClient(settings) as client:
                client.request(
                    RestRequest.build(
                        lambda b: b.get()
                        .to("a")
                        .use_basic_authentication("user", "pass")
                    )
                )

            sent_request = httpx_mock.get_request()
            assert sent_request is not None
            assert sent_request.headers["Authorization"] == "Basic dXNlcjpwYXNz"

        def test_anonymous_request(
            self, httpx_mock: HTTPXMock, settings: ClientSettings
        ):
            httpx_mock.add_response()

            settings = settings.model_copy(
                update={"authenticator": BearerRequestAuthenticator("client-token")}
            )
            with RestClient(settings) as client:
                client.request(RestRequest.build(lambda b: b.get().to("a").anonymous()))

            sent_request = httpx_mock.get_request()
            assert sent_request is not None
            assert "Authorization" not in sent_request.headers

        def test_authenticate_by_default_disabled(
            self, httpx_mock: HTTPXMock, settings: ClientSettings
        ):
            httpx_mock.add_response()

            settings = settings.model_copy(
                update={
                    "authenticator": BearerRequestAuthenticator("client-token"),
                    "authenticate_by_default": False,
                }
            )
            with RestClient(settings) as client:
                client.request(RestRequest.get("a"))

            sent_request = httpx_mock.get_request()
            assert sent_request is not None
            assert "Authorization" not in sent_request.headers

        def test_built_request_is_not_modified(
            self, httpx_mock: HTTPXMock, client: RestClient
        ):
            httpx_mock.add_response()

            request = RestRequest.build(
                lambda b: b.get().to("a").use_bearer_authentication("t")
            )
            client.request(request)

            assert request.headers() == []

    class TestHandlers:
        def test_handlers_run_in_order(
            self, httpx_mock: HTTPXMock, settings: ClientSettings
        ):
            httpx_mock.add_response()

            calls: List[str] = []
            first, second = _Recorder("First", calls), _Recorder("Second", calls)
            settings = settings.model_copy(
                update={
                    "request_handlers": [first, second],
                    "response_handlers": [first, second],
                }
            )
            with RestClient(settings) as client:
                client.request(RestRequest.get("a"))

            assert calls == [
                "request:First",
                "request:Second",
                "response:First:200",
                "response:Second:200",
            ]

            sent_request = httpx_mock.get_request()
            assert sent_request is not None
            assert sent_request.headers["X-First"] == "seen"
            assert sent_request.headers["X-Second"] == "seen"

        def test_handler_error_aborts_dispatch(
            self, httpx_mock: HTTPXMock, settings: ClientSettings
        ):
            settings = settings.model_copy(update={"request_handlers": [_Failing()]})
            with RestClient(settings) as client:
                with pytest.raises(RuntimeError, match="rejected by handler"):
                    client.request(RestRequest.get("a"))

            assert httpx_mock.get_requests() == []

    class TestRequestAsync:
        @pytest.mark.asyncio
        async def test_get_async(
            self, httpx_mock: HTTPXMock, client: RestClient, base_url: str
        ):
            httpx_mock.add_response(
                url=f"{base_url}users/7", json={"id": 7, "name": "Grace"}
            )

            response = await client.request_async(
                RestRequest.get("users/{0}", returns=_User, routes=[("0", 7)])
            )

            sent_request = httpx_mock.get_request()
            assert sent_request is not None
            assert sent_request.headers["Accept"] == "application/json, text/json"
            assert response.get_body() == _User(id=7, name="Grace")

        @pytest.mark.asyncio
        async def test_handlers_async(
            self, httpx_mock: HTTPXMock, settings: ClientSettings
        ):
            httpx_mock.add_response(status_code=409)

            calls: List[str] = []
            recorder = _Recorder("Only", calls)
            settings = settings.model_copy(
                update={
                    "request_handlers": [recorder],
                    "response_handlers": [recorder],
                }
            )
            async with RestClient(settings) as client:
                response = await client.request_async(RestRequest.get("a"))

            assert calls == ["request:Only", "response:Only:409"]
            assert response.get_exception().kind == HttpErrorKind.CONFLICT

        @pytest.mark.asyncio
        async def test_required_without_authenticator_async(
            self, httpx_mock: HTTPXMock, client: RestClient
        ):
            with pytest.raises(AuthenticationRequiredError):
                await client.request_async(
                    RestRequest.build(lambda b: b.get().to("a").authenticate())
                )

            assert httpx_mock.get_requests() == []

        @pytest.mark.asyncio
        async def test_network_error_async(
            self, httpx_mock: HTTPXMock, client: RestClient
        ):
            httpx_mock.add_exception(httpx.ReadTimeout("timed out"))

            with pytest.raises(NetworkError):
                await client.request_async(RestRequest.get("a"))

        @pytest.mark.asyncio
        async def test_post_multipart_async(
            self, httpx_mock: HTTPXMock, client: RestClient, base_url: str
        ):
            httpx_mock.add_response(url=f"{base_url}upload")

            await client.request_async(
                RestRequest.build(
                    lambda b: b.post()
                    .to("upload")
                    .build_body(
                        lambda body: body.with_part("title", "Report").with_file_part(
                            "file", "report.txt", BytesIO(b"content")
                        )
                    )
                )
            )

            sent_request = httpx_mock.get_request()
            assert sent_request is not None
            assert b'name="title"' in sent_request.content
            assert b'filename="report.txt"' in sent_request.content
            assert b"\r\n\r\ncontent\r\n" in sent_request.content

    class TestLifecycle:
        @pytest.mark.asyncio
        async def test_async_exit_closes_both_clients(
            self, httpx_mock: HTTPXMock, settings: ClientSettings
        ):
            httpx_mock.add_response()

            async with RestClient(settings) as client:
                await client.request_async(RestRequest.get("a"))

            assert client.async_client.is_closed
            assert client._client.is_closed

        def test_exit_closes_sync_client(self, settings: ClientSettings):
            with RestClient(settings) as client:
                pass

            assert client._client.is_closed
            assert client._client_async is None

        @pytest.mark.asyncio
        async def test_close_warns_about_open_async_client(
            self,
            httpx_mock: HTTPXMock,
            settings: ClientSettings,
            caplog: pytest.LogCaptureFixture,
        ):
            httpx_mock.add_response()
            client = RestClient(settings)
            await client.request_async(RestRequest.get("a"))

            with caplog.at_level(logging.WARNING, logger="restweave"):
                client.close()

            assert "aclose()" in caplog.text
            await client.aclose()
            assert client.async_client.is_closed
