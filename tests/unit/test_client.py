import json
from typing import List

import pytest
from pytest_httpserver import HTTPServer
from werkzeug import Request as WerkzeugRequest
from werkzeug import Response as WerkzeugResponse

from fcclient.api.core import (
    AccessDeniedError,
    FcError,
    FunctionExecutionError,
    PreconditionFailedError,
    ResourceConflictError,
    ResourceNotFoundError,
    ServerError,
    ValidationError,
    get_fc_error,
)
from fcclient.api.functions import InvokeFunctionInput
from fcclient.api.services import (
    CreateServiceInput,
    DeleteServiceInput,
    GetServiceInput,
    ListServicesInput,
    UpdateServiceInput,
)
from fcclient.auth import Credentials, Signer
from fcclient.client import Client, normalize_endpoint
from fcclient.http import Request

ACCESS_KEY_ID = "test-key"
ACCESS_KEY_SECRET = "test-secret"
API = "2016-08-15"


@pytest.fixture
def client(httpserver: HTTPServer):
    with Client(
        httpserver.url_for("/"), access_key_id=ACCESS_KEY_ID, access_key_secret=ACCESS_KEY_SECRET
    ) as client:
        yield client


@pytest.fixture
def recorded_requests() -> List[WerkzeugRequest]:
    """Records the requests received by the http server, and answers with the responses queued in the test."""
    return []


def recording_handler(requests: List[WerkzeugRequest], response: WerkzeugResponse):
    def _handle(request: WerkzeugRequest):
        # read the body before the request is closed
        request.get_data()
        requests.append(request)
        return response

    return _handle


def json_response(document, status=200, headers=None) -> WerkzeugResponse:
    return WerkzeugResponse(
        json.dumps(document), status=status, headers=headers, content_type="application/json"
    )


class TestClientConstruction:
    @pytest.mark.parametrize(
        "endpoint,access_key_id,access_key_secret",
        [
            ("", "key", "secret"),
            ("http://localhost", "", "secret"),
            ("http://localhost", "key", None),
        ],
    )
    def test_missing_arguments(self, endpoint, access_key_id, access_key_secret):
        with pytest.raises(ValueError):
            Client(endpoint, access_key_id=access_key_id, access_key_secret=access_key_secret)

    def test_defaults(self):
        client = Client("123.cn-shanghai.fc.aliyuncs.com/", access_key_id="key", access_key_secret="secret")
        assert client.endpoint == "https://123.cn-shanghai.fc.aliyuncs.com"
        assert client.api_version == "2016-08-15"
        assert client.user_agent.startswith("fc-client/")
        client.close()

    @pytest.mark.parametrize(
        "endpoint,expected",
        [
            ("http://localhost:4566", "http://localhost:4566"),
            ("https://fc.example.com/", "https://fc.example.com"),
            (" fc.example.com ", "https://fc.example.com"),
        ],
    )
    def test_normalize_endpoint(self, endpoint, expected):
        assert normalize_endpoint(endpoint) == expected


class TestDispatch:
    def test_create_service(self, client, httpserver, recorded_requests):
        document = {
            "serviceName": "my-service",
            "serviceId": "service-id",
            "description": "desc",
            "createdTime": "2026-10-19T08:00:00.000Z",
        }
        httpserver.expect_request(f"/{API}/services", method="POST").respond_with_handler(
            recording_handler(
                recorded_requests,
                json_response(document, headers={"ETag": "etag-1", "X-Fc-Request-Id": "request-1"}),
            )
        )

        output = client.create_service(CreateServiceInput("my-service").with_description("desc"))

        assert output.service_name == "my-service"
        assert output.service_id == "service-id"
        assert output.created_time == "2026-10-19T08:00:00.000Z"
        assert output.get_etag() == "etag-1"
        assert output.get_request_id() == "request-1"

        request = recorded_requests[0]
        assert json.loads(request.get_data()) == {"serviceName": "my-service", "description": "desc"}
        assert request.headers["Content-Type"] == "application/json"
        assert request.headers["Content-MD5"]
        assert request.headers["Date"]
        assert request.headers["User-Agent"] == client.user_agent

    def test_requests_are_signed(self, client, httpserver, recorded_requests):
        httpserver.expect_request(f"/{API}/services", method="GET").respond_with_handler(
            recording_handler(recorded_requests, json_response({"services": []}))
        )

        output = client.list_services(ListServicesInput().with_limit(5).with_tag("k1", "v1"))
        assert output.services == []
        assert output.next_token is None

        request = recorded_requests[0]
        assert request.args["limit"] == "5"
        assert request.args["tag_k1"] == "v1"

        expected = Signer(Credentials(ACCESS_KEY_ID, ACCESS_KEY_SECRET)).authorization(
            "GET", request.path, dict(request.headers.items()), list(request.args.items(multi=True))
        )
        assert request.headers["Authorization"] == expected
        assert expected.startswith(f"FC {ACCESS_KEY_ID}:")

    def test_security_token(self, httpserver, recorded_requests):
        httpserver.expect_request(f"/{API}/account-settings").respond_with_handler(
            recording_handler(recorded_requests, json_response({"availableAZs": ["cn-shanghai-a"]}))
        )
        with Client(
            httpserver.url_for("/"),
            access_key_id=ACCESS_KEY_ID,
            access_key_secret=ACCESS_KEY_SECRET,
            security_token="sts-token",
        ) as client:
            output = client.get_account_settings()

        assert output.available_azs == ["cn-shanghai-a"]
        assert recorded_requests[0].headers["x-fc-security-token"] == "sts-token"

    def test_if_match_header(self, client, httpserver, recorded_requests):
        httpserver.expect_request(f"/{API}/services/my-service", method="PUT").respond_with_handler(
            recording_handler(recorded_requests, json_response({"serviceName": "my-service"}))
        )
        client.update_service(UpdateServiceInput("my-service").with_role("").with_if_match("etag-1"))

        assert recorded_requests[0].headers["If-Match"] == "etag-1"
        assert json.loads(recorded_requests[0].get_data()) == {"role": ""}

    def test_empty_response(self, client, httpserver):
        httpserver.expect_request(f"/{API}/services/my-service", method="DELETE").respond_with_response(
            WerkzeugResponse(status=204, headers={"X-Fc-Request-Id": "request-2"})
        )
        output = client.delete_service(DeleteServiceInput("my-service"))
        assert output.get_request_id() == "request-2"

    def test_invalid_json_response(self, client, httpserver):
        httpserver.expect_request(f"/{API}/services/my-service").respond_with_data("<html>oops</html>")
        with pytest.raises(ServerError) as e:
            client.get_service(GetServiceInput("my-service"))
        assert "oops" in e.value.message


class TestErrors:
    def test_error_document(self, client, httpserver):
        httpserver.expect_request(f"/{API}/services/missing").respond_with_json(
            {"ErrorCode": "ServiceNotFound", "ErrorMessage": "service missing does not exist"},
            status=404,
            headers={"X-Fc-Request-Id": "request-3"},
        )
        with pytest.raises(ResourceNotFoundError) as e:
            client.get_service(GetServiceInput("missing"))

        assert e.value.code == "ServiceNotFound"
        assert e.value.message == "service missing does not exist"
        assert e.value.status_code == 404
        assert e.value.request_id == "request-3"
        assert "request-3" in str(e.value)

    def test_precondition_failed(self, client, httpserver):
        httpserver.expect_request(f"/{API}/services/my-service", method="PUT").respond_with_json(
            {"ErrorCode": "PreconditionFailed", "ErrorMessage": "etag mismatch"}, status=412
        )
        with pytest.raises(PreconditionFailedError):
            client.update_service(UpdateServiceInput("my-service").with_if_match("stale"))

    def test_server_error_without_document(self, client, httpserver):
        httpserver.expect_request(f"/{API}/services").respond_with_data("Bad Gateway", status=502)
        with pytest.raises(ServerError) as e:
            client.list_services()
        assert e.value.status_code == 502
        assert e.value.message == "Bad Gateway"

    @pytest.mark.parametrize(
        "status,code,error_cls",
        [
            (400, "InvalidArgument", ValidationError),
            (400, None, ValidationError),
            (401, None, AccessDeniedError),
            (403, "SignatureNotMatch", AccessDeniedError),
            (404, "FunctionNotFound", ResourceNotFoundError),
            (409, "ServiceAlreadyExists", ResourceConflictError),
            (400, "ServiceNotEmpty", ResourceConflictError),
            (412, None, PreconditionFailedError),
            (400, "PreconditionFailed", PreconditionFailedError),
            (418, None, ValidationError),
            (500, "InternalServerError", ServerError),
            (503, None, ServerError),
        ],
    )
    def test_get_fc_error(self, status, code, error_cls):
        error = get_fc_error(status, code, "message", "request-id")
        assert type(error) is error_cls
        assert error.status_code == status
        assert error.request_id == "request-id"
        if code:
            assert error.code == code

    def test_conflicts_are_validation_errors(self):
        assert issubclass(ResourceConflictError, ValidationError)
        assert issubclass(ValidationError, FcError)


class TestInvocation:
    def test_payload_is_returned_raw(self, client, httpserver, recorded_requests):
        payload = bytes(range(256))
        httpserver.expect_request(
            f"/{API}/services/my-service/functions/my-function/invocations", method="POST"
        ).respond_with_handler(
            recording_handler(recorded_requests, WerkzeugResponse(payload, status=200))
        )
        output = client.invoke_function(
            InvokeFunctionInput("my-service", "my-function").with_payload(b"\x00\xff")
        )
        assert output.payload == payload
        assert output.get_log_result() is None
        assert recorded_requests[0].get_data() == b"\x00\xff"
        assert recorded_requests[0].headers["Content-Type"] == "application/octet-stream"

    def test_function_error(self, client, httpserver):
        error_payload = {"errorMessage": "division by zero", "errorType": "ZeroDivisionError"}
        httpserver.expect_request(
            f"/{API}/services/my-service/functions/my-function/invocations", method="POST"
        ).respond_with_json(
            error_payload,
            headers={"x-fc-error-type": "UnhandledInvocationError", "X-Fc-Request-Id": "request-4"},
        )
        with pytest.raises(FunctionExecutionError) as e:
            client.invoke_function(InvokeFunctionInput("my-service", "my-function"))

        assert e.value.code == "UnhandledInvocationError"
        assert e.value.message == "division by zero"
        assert e.value.request_id == "request-4"
        assert json.loads(e.value.payload) == error_payload


class TestRawRequests:
    def test_do_http_request(self, client, httpserver, recorded_requests):
        httpserver.expect_request("/custom/path", method="POST").respond_with_handler(
            recording_handler(recorded_requests, WerkzeugResponse("created", status=201))
        )
        response = client.do_http_request(
            Request("POST", "/custom/path", body=b"data", headers={"x-fc-trace-id": "trace"})
        )
        assert response.status_code == 201
        assert response.get_data() == b"created"
        assert recorded_requests[0].headers["Authorization"].startswith(f"FC {ACCESS_KEY_ID}:")

    def test_error_status_is_not_raised(self, client, httpserver):
        httpserver.expect_request("/missing").respond_with_data("not found", status=404)
        response = client.do_http_request(Request("GET", "/missing"))
        assert response.status_code == 404

    def test_proxy_request(self, client, httpserver, recorded_requests):
        httpserver.expect_request(
            f"/{API}/proxy/my-service.prod/my-function/action", method="PUT"
        ).respond_with_handler(recording_handler(recorded_requests, WerkzeugResponse("ok")))

        response = client.proxy_request(
            "PUT",
            "my-service",
            "my-function",
            path="action",
            query={"a": "1"},
            body="payload",
            qualifier="prod",
        )
        assert response.get_data() == b"ok"
        assert recorded_requests[0].args["a"] == "1"
        assert recorded_requests[0].get_data() == b"payload"
