import binascii
import dataclasses
import os
from typing import Dict, List, Optional, Union

from fcclient.constants import (
    APPLICATION_OCTET_STREAM,
    HEADER_ERROR_TYPE,
    HEADER_IF_MATCH,
    HEADER_INVOCATION_TYPE,
    HEADER_LOG_RESULT,
    HEADER_LOG_TYPE,
)
from fcclient.utils.archives import load_code_archive
from fcclient.utils.strings import base64_decode, base64_encode, to_bytes, to_str

from .core import (
    LOCATION_HEADER,
    LOCATION_PAYLOAD,
    LOCATION_URI,
    ListInput,
    LogDecodeError,
    RequestInput,
    ResponseOutput,
    Shape,
    member,
)
from .services import _qualified_service


class LogType(str):
    None_ = "None"
    Tail = "Tail"


class InvocationType(str):
    Sync = "Sync"
    Async = "Async"


@dataclasses.dataclass(frozen=True)
class Code(Shape):
    """
    The code of a function: either an object in an OSS bucket, or a zip archive uploaded with the request.
    """

    oss_bucket_name: Optional[str] = None
    oss_object_name: Optional[str] = None
    zip_file: Optional[str] = None

    def with_oss_bucket_name(self, bucket_name: str) -> "Code":
        return self._replace(oss_bucket_name=bucket_name)

    def with_oss_object_name(self, object_name: str) -> "Code":
        return self._replace(oss_object_name=object_name)

    def with_zip_file(self, content: bytes) -> "Code":
        return self._replace(zip_file=base64_encode(content))

    def with_files(self, *paths: Union[str, os.PathLike]) -> "Code":
        """
        Uploads local code. A single zip archive is sent as is, any other files or directories are zipped first.

        :param paths: the zip archive, or the files and directories making up the function code
        :return: a new Code
        """
        return self.with_zip_file(load_code_archive(*paths))


@dataclasses.dataclass(frozen=True)
class FunctionMetadata(Shape):
    function_id: Optional[str] = None
    function_name: Optional[str] = None
    description: Optional[str] = None
    runtime: Optional[str] = None
    handler: Optional[str] = None
    initializer: Optional[str] = None
    timeout: Optional[int] = None
    initialization_timeout: Optional[int] = None
    memory_size: Optional[int] = None
    instance_concurrency: Optional[int] = None
    instance_type: Optional[str] = None
    ca_port: Optional[int] = None
    environment_variables: Optional[Dict[str, str]] = None
    code_checksum: Optional[str] = None
    code_size: Optional[int] = None
    created_time: Optional[str] = None
    last_modified_time: Optional[str] = None


@dataclasses.dataclass(frozen=True)
class _FunctionAttributesInput(RequestInput):
    _: dataclasses.KW_ONLY
    description: Optional[str] = None
    runtime: Optional[str] = None
    handler: Optional[str] = None
    initializer: Optional[str] = None
    timeout: Optional[int] = None
    initialization_timeout: Optional[int] = None
    memory_size: Optional[int] = None
    instance_concurrency: Optional[int] = None
    instance_type: Optional[str] = None
    ca_port: Optional[int] = None
    environment_variables: Optional[Dict[str, str]] = None
    code: Optional[Code] = member(shape=Code)

    def with_description(self, description: str):
        return self._replace(description=description)

    def with_runtime(self, runtime: str):
        return self._replace(runtime=runtime)

    def with_handler(self, handler: str):
        return self._replace(handler=handler)

    def with_initializer(self, initializer: str):
        return self._replace(initializer=initializer)

    def with_timeout(self, timeout: int):
        return self._replace(timeout=timeout)

    def with_initialization_timeout(self, timeout: int):
        return self._replace(initialization_timeout=timeout)

    def with_memory_size(self, memory_size: int):
        return self._replace(memory_size=memory_size)

    def with_instance_concurrency(self, instance_concurrency: int):
        return self._replace(instance_concurrency=instance_concurrency)

    def with_instance_type(self, instance_type: str):
        return self._replace(instance_type=instance_type)

    def with_ca_port(self, ca_port: int):
        return self._replace(ca_port=ca_port)

    def with_environment_variables(self, environment_variables: Dict[str, str]):
        return self._replace(environment_variables=dict(environment_variables))

    def with_code(self, code: Code):
        return self._replace(code=code)


@dataclasses.dataclass(frozen=True)
class CreateFunctionInput(_FunctionAttributesInput):
    http_method = "POST"
    request_uri = "/services/{service_name}/functions"

    service_name: str = member(location=LOCATION_URI)
    function_name: Optional[str] = None

    def with_function_name(self, function_name: str) -> "CreateFunctionInput":
        return self._replace(function_name=function_name)


@dataclasses.dataclass(frozen=True)
class CreateFunctionOutput(FunctionMetadata, ResponseOutput):
    pass


@dataclasses.dataclass(frozen=True)
class GetFunctionInput(RequestInput):
    request_uri = "/services/{service_name}/functions/{function_name}"

    service_name: str = member(location=LOCATION_URI)
    function_name: str = member(location=LOCATION_URI)
    qualifier: Optional[str] = member(location=LOCATION_URI)

    def with_qualifier(self, qualifier: str) -> "GetFunctionInput":
        return self._replace(qualifier=qualifier)

    def _uri_params(self, params):
        return _qualified_service(params)


@dataclasses.dataclass(frozen=True)
class GetFunctionOutput(FunctionMetadata, ResponseOutput):
    pass


@dataclasses.dataclass(frozen=True)
class GetFunctionCodeInput(GetFunctionInput):
    request_uri = "/services/{service_name}/functions/{function_name}/code"


@dataclasses.dataclass(frozen=True)
class GetFunctionCodeOutput(ResponseOutput):
    url: Optional[str] = None
    checksum: Optional[str] = None


@dataclasses.dataclass(frozen=True)
class UpdateFunctionInput(_FunctionAttributesInput):
    http_method = "PUT"
    request_uri = "/services/{service_name}/functions/{function_name}"

    service_name: str = member(location=LOCATION_URI)
    function_name: str = member(location=LOCATION_URI)
    if_match: Optional[str] = member(name=HEADER_IF_MATCH, location=LOCATION_HEADER, kw_only=True)

    def with_if_match(self, etag: str) -> "UpdateFunctionInput":
        return self._replace(if_match=etag)


@dataclasses.dataclass(frozen=True)
class UpdateFunctionOutput(FunctionMetadata, ResponseOutput):
    pass


@dataclasses.dataclass(frozen=True)
class DeleteFunctionInput(RequestInput):
    http_method = "DELETE"
    request_uri = "/services/{service_name}/functions/{function_name}"

    service_name: str = member(location=LOCATION_URI)
    function_name: str = member(location=LOCATION_URI)
    if_match: Optional[str] = member(name=HEADER_IF_MATCH, location=LOCATION_HEADER, kw_only=True)

    def with_if_match(self, etag: str) -> "DeleteFunctionInput":
        return self._replace(if_match=etag)


@dataclasses.dataclass(frozen=True)
class DeleteFunctionOutput(ResponseOutput):
    pass


@dataclasses.dataclass(frozen=True)
class ListFunctionsInput(ListInput):
    request_uri = "/services/{service_name}/functions"

    service_name: str = member(location=LOCATION_URI)
    qualifier: Optional[str] = member(location=LOCATION_URI)

    def with_qualifier(self, qualifier: str) -> "ListFunctionsInput":
        return self._replace(qualifier=qualifier)

    def _uri_params(self, params):
        return _qualified_service(params)


@dataclasses.dataclass(frozen=True)
class ListFunctionsOutput(ResponseOutput):
    functions: List[FunctionMetadata] = member(shape=FunctionMetadata, default_factory=list)
    next_token: Optional[str] = None


@dataclasses.dataclass(frozen=True)
class InvokeFunctionInput(RequestInput):
    """
    Invokes a function. The payload is posted verbatim as the event of the function.

    Use ``with_log_type(LogType.Tail)`` to receive the last lines of the function log with the response, and
    ``with_invocation_type(InvocationType.Async)`` to queue the invocation instead of waiting for its result.
    """

    http_method = "POST"
    request_uri = "/services/{service_name}/functions/{function_name}/invocations"
    content_type = APPLICATION_OCTET_STREAM

    service_name: str = member(location=LOCATION_URI)
    function_name: str = member(location=LOCATION_URI)
    qualifier: Optional[str] = member(location=LOCATION_URI, kw_only=True)
    payload: Optional[bytes] = member(location=LOCATION_PAYLOAD, kw_only=True)
    log_type: Optional[str] = member(name=HEADER_LOG_TYPE, location=LOCATION_HEADER, kw_only=True)
    invocation_type: Optional[str] = member(
        name=HEADER_INVOCATION_TYPE, location=LOCATION_HEADER, kw_only=True
    )

    def with_payload(self, payload: Union[str, bytes]) -> "InvokeFunctionInput":
        return self._replace(payload=to_bytes(payload))

    def with_qualifier(self, qualifier: str) -> "InvokeFunctionInput":
        return self._replace(qualifier=qualifier)

    def with_log_type(self, log_type: str) -> "InvokeFunctionInput":
        return self._replace(log_type=log_type)

    def with_invocation_type(self, invocation_type: str) -> "InvokeFunctionInput":
        return self._replace(invocation_type=invocation_type)

    def _uri_params(self, params):
        return _qualified_service(params)

    def _body(self) -> Optional[bytes]:
        return self.payload if self.payload is not None else b""


@dataclasses.dataclass(frozen=True)
class InvokeFunctionOutput(ResponseOutput):
    payload: bytes = b""

    def get_log_result(self) -> Optional[str]:
        """
        Returns the log tail of a ``Tail`` invocation, which the service sends base64 encoded.

        :return: the decoded log, or None if the response carries no log
        :raises LogDecodeError: if the log is not valid base64
        """
        log_result = self.header.get(HEADER_LOG_RESULT)
        if log_result is None:
            return None
        try:
            return to_str(base64_decode(log_result, strict=True), errors="replace")
        except (binascii.Error, ValueError) as e:
            raise LogDecodeError(
                f"Unable to decode log result: {e}", request_id=self.get_request_id()
            ) from e

    def get_error_type(self) -> Optional[str]:
        return self.header.get(HEADER_ERROR_TYPE)
