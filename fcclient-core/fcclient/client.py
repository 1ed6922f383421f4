"""
The Function Compute client. Every API operation is one method of ``Client``, which takes the input of the operation
and returns its typed output::

    from fcclient.api.services import CreateServiceInput
    from fcclient.client import Client

    with Client.from_config() as client:
        output = client.create_service(CreateServiceInput().with_service_name("my-service"))
        print(output.service_id, output.get_etag())

Errors returned by the service are raised as subclasses of ``fcclient.api.core.FcError``.
"""
import json
import logging
import platform
from typing import Dict, List, Optional, Tuple, Type, TypeVar, Union
from urllib.parse import quote, unquote, urlencode

import requests
from werkzeug.datastructures import Headers

from fcclient import config
from fcclient.api.account import GetAccountSettingsInput, GetAccountSettingsOutput
from fcclient.api.core import (
    FcError,
    FunctionExecutionError,
    RequestInput,
    ResponseOutput,
    ServerError,
    get_fc_error,
)
from fcclient.api.functions import (
    CreateFunctionInput,
    CreateFunctionOutput,
    DeleteFunctionInput,
    DeleteFunctionOutput,
    GetFunctionCodeInput,
    GetFunctionCodeOutput,
    GetFunctionInput,
    GetFunctionOutput,
    InvokeFunctionInput,
    InvokeFunctionOutput,
    ListFunctionsInput,
    ListFunctionsOutput,
    UpdateFunctionInput,
    UpdateFunctionOutput,
)
from fcclient.api.services import (
    CreateServiceInput,
    CreateServiceOutput,
    DeleteServiceInput,
    DeleteServiceOutput,
    GetServiceInput,
    GetServiceOutput,
    ListServicesInput,
    ListServicesOutput,
    UpdateServiceInput,
    UpdateServiceOutput,
)
from fcclient.api.tags import (
    GetResourceTagsInput,
    GetResourceTagsOutput,
    TagResourceInput,
    TagResourceOutput,
    UnTagResourceInput,
    UnTagResourceOutput,
)
from fcclient.api.triggers import (
    CreateTriggerInput,
    CreateTriggerOutput,
    DeleteTriggerInput,
    DeleteTriggerOutput,
    GetTriggerInput,
    GetTriggerOutput,
    ListTriggersInput,
    ListTriggersOutput,
    UpdateTriggerInput,
    UpdateTriggerOutput,
)
from fcclient.auth import Credentials, Signer
from fcclient.constants import DEFAULT_API_VERSION, HEADER_REQUEST_ID, VERSION
from fcclient.http import Request, Response
from fcclient.http.client import SigningRequestsClient
from fcclient.utils.strings import to_str, truncate

LOG = logging.getLogger(__name__)
REQUEST_LOG = logging.getLogger("fcclient.request")

O = TypeVar("O", bound=ResponseOutput)


def normalize_endpoint(endpoint: str) -> str:
    endpoint = endpoint.strip().rstrip("/")
    if "://" not in endpoint:
        return f"https://{endpoint}"
    return endpoint


class Client:
    """
    Client of the FC API. The client performs exactly one HTTP round-trip per call, it does not retry.

    :param endpoint: the endpoint URL, ``https://`` is assumed if it has no scheme
    :param api_version: the API version, defaults to ``2016-08-15``
    :param access_key_id: the access key used to sign requests
    :param access_key_secret: the secret of the access key
    :param security_token: the STS security token, if temporary credentials are used
    :param timeout: the transport timeout in seconds
    :param session: the requests session to use, a new one is created if none is given
    """

    endpoint: str
    api_version: str

    def __init__(
        self,
        endpoint: str,
        api_version: str = None,
        access_key_id: str = None,
        access_key_secret: str = None,
        security_token: str = None,
        timeout: float = None,
        session: requests.Session = None,
    ):
        if not endpoint:
            raise ValueError("A valid endpoint must be specified to construct the client")
        if not access_key_id:
            raise ValueError("A valid access key ID must be specified to construct the client")
        if not access_key_secret:
            raise ValueError("A valid access key secret must be specified to construct the client")

        self.endpoint = normalize_endpoint(endpoint)
        self.api_version = api_version or DEFAULT_API_VERSION
        self.user_agent = "fc-client/%s python/%s %s/%s" % (
            VERSION,
            platform.python_version(),
            platform.system(),
            platform.release(),
        )
        self._http_client = SigningRequestsClient(
            Signer(Credentials(access_key_id, access_key_secret, security_token)),
            session=session,
            timeout=timeout,
            user_agent=self.user_agent,
        )

    @classmethod
    def from_config(cls) -> "Client":
        """Creates a client from the endpoint and credentials in ``fcclient.config``."""
        return cls(
            config.ENDPOINT,
            api_version=config.API_VERSION,
            access_key_id=config.ACCESS_KEY_ID,
            access_key_secret=config.ACCESS_KEY_SECRET,
            security_token=config.SECURITY_TOKEN,
            timeout=config.HTTP_TIMEOUT,
        )

    def close(self):
        self._http_client.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()

    # account

    def get_account_settings(
        self, request: GetAccountSettingsInput = None
    ) -> GetAccountSettingsOutput:
        return self._dispatch(request or GetAccountSettingsInput(), GetAccountSettingsOutput)

    # services

    def create_service(self, request: CreateServiceInput) -> CreateServiceOutput:
        return self._dispatch(request, CreateServiceOutput)

    def get_service(self, request: GetServiceInput) -> GetServiceOutput:
        return self._dispatch(request, GetServiceOutput)

    def update_service(self, request: UpdateServiceInput) -> UpdateServiceOutput:
        return self._dispatch(request, UpdateServiceOutput)

    def delete_service(self, request: DeleteServiceInput) -> DeleteServiceOutput:
        return self._dispatch(request, DeleteServiceOutput)

    def list_services(self, request: ListServicesInput = None) -> ListServicesOutput:
        return self._dispatch(request or ListServicesInput(), ListServicesOutput)

    # functions

    def create_function(self, request: CreateFunctionInput) -> CreateFunctionOutput:
        return self._dispatch(request, CreateFunctionOutput)

    def get_function(self, request: GetFunctionInput) -> GetFunctionOutput:
        return self._dispatch(request, GetFunctionOutput)

    def get_function_code(self, request: GetFunctionCodeInput) -> GetFunctionCodeOutput:
        return self._dispatch(request, GetFunctionCodeOutput)

    def update_function(self, request: UpdateFunctionInput) -> UpdateFunctionOutput:
        return self._dispatch(request, UpdateFunctionOutput)

    def delete_function(self, request: DeleteFunctionInput) -> DeleteFunctionOutput:
        return self._dispatch(request, DeleteFunctionOutput)

    def list_functions(self, request: ListFunctionsInput) -> ListFunctionsOutput:
        return self._dispatch(request, ListFunctionsOutput)

    def invoke_function(self, request: InvokeFunctionInput) -> InvokeFunctionOutput:
        """
        Invokes a function and returns its raw output.

        :param request: the invocation
        :return: the output, ``payload`` holds the unmodified bytes returned by the function
        :raises FunctionExecutionError: if the function was invoked but failed
        """
        response = self._send_input(request)
        output = InvokeFunctionOutput(payload=response.get_data(), header=Headers(response.headers))

        error_type = output.get_error_type()
        if error_type:
            message = _function_error_message(output.payload) or error_type
            raise FunctionExecutionError(
                message,
                payload=output.payload,
                code=error_type,
                status_code=response.status_code,
                request_id=output.get_request_id(),
            )
        return output

    # triggers

    def create_trigger(self, request: CreateTriggerInput) -> CreateTriggerOutput:
        return self._dispatch(request, CreateTriggerOutput)

    def get_trigger(self, request: GetTriggerInput) -> GetTriggerOutput:
        return self._dispatch(request, GetTriggerOutput)

    def update_trigger(self, request: UpdateTriggerInput) -> UpdateTriggerOutput:
        return self._dispatch(request, UpdateTriggerOutput)

    def delete_trigger(self, request: DeleteTriggerInput) -> DeleteTriggerOutput:
        return self._dispatch(request, DeleteTriggerOutput)

    def list_triggers(self, request: ListTriggersInput) -> ListTriggersOutput:
        return self._dispatch(request, ListTriggersOutput)

    # tags

    def tag_resource(self, request: TagResourceInput) -> TagResourceOutput:
        return self._dispatch(request, TagResourceOutput)

    def untag_resource(self, request: UnTagResourceInput) -> UnTagResourceOutput:
        return self._dispatch(request, UnTagResourceOutput)

    def get_resource_tags(self, request: GetResourceTagsInput) -> GetResourceTagsOutput:
        return self._dispatch(request, GetResourceTagsOutput)

    # raw HTTP

    def do_http_request(self, request: Request) -> Response:
        """
        Signs and sends an arbitrary request to the endpoint, e.g., to call a function through an HTTP trigger. The
        response is returned as is, error status codes are not raised.

        :param request: the request, with a path relative to the endpoint
        :return: the response
        """
        return self._send(request)

    def proxy_request(
        self,
        method: str,
        service_name: str,
        function_name: str,
        path: str = "/",
        headers: Dict[str, str] = None,
        query: Union[Dict[str, str], List[Tuple[str, str]]] = None,
        body: Union[str, bytes] = None,
        qualifier: str = None,
    ) -> Response:
        """
        Calls a function with an HTTP trigger through the ``/proxy`` path of the API.

        :param method: the HTTP method
        :param service_name: the service of the function
        :param function_name: the function
        :param path: the path passed to the function
        :param headers: additional request headers
        :param query: the query parameters
        :param body: the request body
        :param qualifier: the version or alias of the service
        :return: the response of the function
        """
        service = f"{service_name}.{qualifier}" if qualifier else service_name
        if not path.startswith("/"):
            path = "/" + path
        raw_path = "/%s/proxy/%s/%s%s" % (
            self.api_version,
            quote(service, safe=""),
            quote(function_name, safe=""),
            path,
        )
        request = Request(
            method=method,
            path=unquote(raw_path),
            headers=headers or {},
            body=body,
            query_string=urlencode(query or {}, doseq=True),
            raw_path=raw_path,
        )
        return self.do_http_request(request)

    # dispatching

    def _dispatch(self, request: RequestInput, output_cls: Type[O]) -> O:
        response = self._send_input(request)
        data = response.get_data()
        if not data:
            return output_cls.from_response({}, response.headers)
        try:
            document = json.loads(data)
        except ValueError as e:
            raise ServerError(
                f"Unable to parse response: {truncate(to_str(data, errors='replace'))}",
                status_code=response.status_code,
                request_id=response.headers.get(HEADER_REQUEST_ID),
            ) from e
        return output_cls.from_response(document, response.headers)

    def _send_input(self, request: RequestInput) -> Response:
        serialized = request.serialize(self.api_version)
        http_request = Request(
            method=serialized.method,
            path=unquote(serialized.path),
            headers=serialized.headers,
            body=serialized.body,
            query_string=urlencode(serialized.query),
            raw_path=serialized.path,
        )
        response = self._send(http_request)
        if response.status_code >= 400:
            raise self._error_for(response)
        return response

    def _send(self, request: Request) -> Response:
        LOG.debug("Sending %s %s", request.method, request.full_path)
        response = self._http_client.request(request, server=self.endpoint)
        REQUEST_LOG.debug(
            "%s %s => %d (request id %s)",
            request.method,
            request.full_path,
            response.status_code,
            response.headers.get(HEADER_REQUEST_ID),
            extra={
                "request_headers": dict(request.headers),
                "response_headers": dict(response.headers),
            },
        )
        return response

    @staticmethod
    def _error_for(response: Response) -> FcError:
        request_id = response.headers.get(HEADER_REQUEST_ID)
        data = response.get_data()
        code, message = None, None
        try:
            document = json.loads(data) if data else {}
        except ValueError:
            document = {}
        if isinstance(document, dict):
            code = document.get("ErrorCode")
            message = document.get("ErrorMessage")
        if not message:
            message = truncate(to_str(data, errors="replace")) or f"HTTP {response.status_code}"

        LOG.debug(
            "FC request %s failed with status %d: %s %s",
            request_id,
            response.status_code,
            code,
            message,
        )
        return get_fc_error(response.status_code, code, message, request_id)


def _function_error_message(payload: bytes) -> Optional[str]:
    try:
        document = json.loads(payload)
    except ValueError:
        return truncate(to_str(payload, errors="replace")) or None
    if isinstance(document, dict):
        return document.get("errorMessage") or document.get("ErrorMessage")
    return None
