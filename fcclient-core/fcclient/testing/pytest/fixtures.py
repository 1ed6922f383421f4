import logging
import re
from typing import Callable, Dict, List, Tuple

import pytest
from pytest_httpserver import HTTPServer

from fcclient.api.core import FcError
from fcclient.api.functions import (
    Code,
    CreateFunctionInput,
    CreateFunctionOutput,
    DeleteFunctionInput,
    ListFunctionsInput,
)
from fcclient.api.services import (
    CreateServiceInput,
    CreateServiceOutput,
    DeleteServiceInput,
    ListServicesInput,
)
from fcclient.api.tags import UnTagResourceInput
from fcclient.api.triggers import DeleteTriggerInput, ListTriggersInput
from fcclient.client import Client
from fcclient.constants import EVENTBRIDGE_TRIGGER_ENABLED, HEADER_ENABLE_EVENTBRIDGE_TRIGGER
from fcclient.testing.backend import FcBackend
from fcclient.testing.config import (
    TEST_ACCESS_KEY_ID,
    TEST_ACCESS_KEY_SECRET,
    TEST_ACCOUNT_ID,
    TEST_REGION,
    is_live_target,
)
from fcclient.utils.archives import create_zip_content
from fcclient.utils.strings import random_letters

LOG = logging.getLogger(__name__)

# source of the function deployed by ``fc_create_function``, as index.py of a python3 function
HELLO_WORLD_SOURCE = '''\
def handler(event, context):
    return "hello world"


def http_handler(environ, start_response):
    start_response("200 OK", [("Content-Type", "text/plain")])
    return [b"Hello world!\\n"]
'''
HELLO_WORLD_HANDLER = "index.handler"
HELLO_WORLD_HTTP_HANDLER = "index.http_handler"
HELLO_WORLD_RUNTIME = "python3.9"


def hello_world_archive(tmp_path) -> bytes:
    source = tmp_path / "index.py"
    source.write_text(HELLO_WORLD_SOURCE)
    return create_zip_content(source)


@pytest.fixture
def fc_backend(httpserver: HTTPServer) -> FcBackend:
    """
    An in-memory FC emulator served by pytest-httpserver. The functions deployed by ``fc_create_function`` answer
    the way the hello world source does on a live endpoint.
    """
    backend = FcBackend(TEST_ACCESS_KEY_ID, TEST_ACCESS_KEY_SECRET, TEST_REGION, TEST_ACCOUNT_ID)
    backend.register_handler(HELLO_WORLD_HANDLER, lambda event, context: "hello world")
    backend.register_http_handler(HELLO_WORLD_HTTP_HANDLER, lambda request: "Hello world!\n")
    httpserver.expect_request(re.compile(r"^/.*")).respond_with_handler(backend)
    return backend


@pytest.fixture
def fc_emulator_client(fc_backend, httpserver: HTTPServer) -> Client:
    """A client of the ``fc_backend`` emulator."""
    with Client(
        httpserver.url_for("/"),
        access_key_id=TEST_ACCESS_KEY_ID,
        access_key_secret=TEST_ACCESS_KEY_SECRET,
    ) as client:
        yield client


@pytest.fixture
def fc_client(request) -> Client:
    """
    A client of the live endpoint configured in ``fcclient.config`` when testing against a live endpoint, or of the
    ``fc_backend`` emulator otherwise.
    """
    if is_live_target():
        with Client.from_config() as client:
            yield client
    else:
        yield request.getfixturevalue("fc_emulator_client")


@pytest.fixture
def fc_clear_service(fc_client):
    """
    Returns a function that deletes a service with all its functions, triggers and tags.
    """

    def _clear(service_name: str):
        eventbridge = {HEADER_ENABLE_EVENTBRIDGE_TRIGGER: EVENTBRIDGE_TRIGGER_ENABLED}
        functions = fc_client.list_functions(ListFunctionsInput(service_name).with_limit(100))
        for function in functions.functions:
            triggers = fc_client.list_triggers(
                ListTriggersInput(service_name, function.function_name).with_headers(eventbridge)
            )
            for trigger in triggers.triggers:
                fc_client.delete_trigger(
                    DeleteTriggerInput(
                        service_name, function.function_name, trigger.trigger_name
                    ).with_headers(eventbridge)
                )
            fc_client.delete_function(DeleteFunctionInput(service_name, function.function_name))

        try:
            fc_client.untag_resource(
                UnTagResourceInput(f"services/{service_name}").with_tag_keys([]).with_all(True)
            )
        except FcError as e:
            LOG.debug("error removing tags of service %s: %s", service_name, e)
        fc_client.delete_service(DeleteServiceInput(service_name))

    yield _clear


@pytest.fixture
def fc_create_service(fc_client, fc_clear_service):
    """
    Factory that creates services and deletes them, including their functions and triggers, after the test.
    """
    service_names = []

    def factory(
        service_name: str = None, request: CreateServiceInput = None
    ) -> CreateServiceOutput:
        request = request or CreateServiceInput()
        if service_name or not request.service_name:
            request = request.with_service_name(
                service_name or f"test-service-{random_letters(8)}"
            )
        output = fc_client.create_service(request)
        service_names.append(output.service_name)
        return output

    yield factory

    # cleanup
    for service_name in service_names:
        try:
            fc_clear_service(service_name)
        except FcError as e:
            LOG.debug("error cleaning up service %s: %s", service_name, e)


@pytest.fixture
def fc_cleanup_services(fc_client, fc_clear_service):
    """
    Returns a function that deletes all services whose name starts with the given prefix, and calls it again after
    the test.
    """
    prefixes = []

    def _cleanup(prefix: str):
        prefixes.append(prefix)
        services = fc_client.list_services(ListServicesInput().with_limit(100).with_prefix(prefix))
        for service in services.services:
            fc_clear_service(service.service_name)

    yield _cleanup

    for prefix in prefixes:
        try:
            _cleanup(prefix)
        except FcError as e:
            LOG.debug("error cleaning up services with prefix %s: %s", prefix, e)


@pytest.fixture
def fc_create_function(fc_client, tmp_path):
    """
    Factory that creates functions, by default python functions running ``HELLO_WORLD_SOURCE``, and deletes them
    after the test.
    """
    functions: List[Tuple[str, str]] = []

    def factory(
        service_name: str,
        function_name: str = None,
        handler: str = HELLO_WORLD_HANDLER,
        code: Code = None,
        **attributes,
    ) -> CreateFunctionOutput:
        request = (
            CreateFunctionInput(service_name)
            .with_function_name(function_name or f"test-function-{random_letters(8)}")
            .with_runtime(attributes.pop("runtime", HELLO_WORLD_RUNTIME))
            .with_handler(handler)
            .with_code(code or Code().with_zip_file(hello_world_archive(tmp_path)))
        )
        for key, value in attributes.items():
            request = getattr(request, f"with_{key}")(value)
        output = fc_client.create_function(request)
        functions.append((service_name, output.function_name))
        return output

    yield factory

    # cleanup
    eventbridge: Dict[str, str] = {HEADER_ENABLE_EVENTBRIDGE_TRIGGER: EVENTBRIDGE_TRIGGER_ENABLED}
    for service_name, function_name in functions:
        try:
            triggers = fc_client.list_triggers(
                ListTriggersInput(service_name, function_name).with_headers(eventbridge)
            )
            for trigger in triggers.triggers:
                fc_client.delete_trigger(
                    DeleteTriggerInput(service_name, function_name, trigger.trigger_name).with_headers(
                        eventbridge
                    )
                )
            fc_client.delete_function(DeleteFunctionInput(service_name, function_name))
        except FcError as e:
            LOG.debug("error cleaning up function %s/%s: %s", service_name, function_name, e)


@pytest.fixture
def fc_invoke_handler(fc_backend) -> Callable[[str, Callable], None]:
    """Registers emulator handlers for functions the test deploys with custom handler names."""

    def _register(handler: str, invocation_handler: Callable):
        fc_backend.register_handler(handler, invocation_handler)

    return _register
