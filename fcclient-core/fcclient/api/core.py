"""
Base types of the FC API: wire shapes, request inputs (fluent, copy-on-write builders), response outputs and the
exceptions raised for service errors.

Shapes are frozen dataclasses. Every field maps to one member of the wire representation, which is described by the
field's metadata (see ``member``). A field set to ``None`` is *unset* and never serialized, any other value,
including empty strings, empty lists and ``False``, is sent as is.
"""
import dataclasses
import logging
from typing import Any, ClassVar, Dict, List, NamedTuple, Optional, Tuple, Type, TypeVar
from urllib.parse import quote

from werkzeug.datastructures import Headers

from fcclient.constants import (
    APPLICATION_JSON,
    HEADER_CONTENT_TYPE,
    HEADER_ETAG,
    HEADER_REQUEST_ID,
)
from fcclient.utils.json import canonical_json
from fcclient.utils.strings import first_char_to_lower, snake_to_camel_case, to_bytes

LOG = logging.getLogger(__name__)

S = TypeVar("S", bound="Shape")

# locations of a member in the HTTP request
LOCATION_BODY = "body"
LOCATION_URI = "uri"
LOCATION_QUERY = "querystring"
LOCATION_HEADER = "header"
LOCATION_PAYLOAD = "payload"


def member(
    name: str = None,
    shape: Type["Shape"] = None,
    location: str = LOCATION_BODY,
    default: Any = None,
    **kwargs,
):
    """
    Declares a field of a shape.

    :param name: the name of the member on the wire, defaults to the lowerCamelCase version of the field name
    :param shape: the shape class of nested documents (or of the items of a list of documents)
    :param location: where the member is placed in a request (body, uri, querystring, header, payload)
    :param default: the default value of the field, ``None`` meaning unset
    :return: a dataclass field
    """
    if "default_factory" not in kwargs:
        kwargs["default"] = default
    return dataclasses.field(
        metadata={"name": name, "shape": shape, "location": location},
        **kwargs,
    )


def wire_name(field: dataclasses.Field) -> str:
    return field.metadata.get("name") or first_char_to_lower(snake_to_camel_case(field.name))


def serialize_value(value: Any) -> Any:
    if isinstance(value, Shape):
        return value.to_dict()
    if isinstance(value, (list, tuple, set, frozenset)):
        return [serialize_value(item) for item in value]
    if isinstance(value, dict):
        return {key: serialize_value(item) for key, item in value.items()}
    return value


def _parse_value(shape: Optional[Type["Shape"]], value: Any) -> Any:
    if shape is None or value is None:
        return value
    if isinstance(value, list):
        return [shape.from_dict(item) for item in value]
    return shape.from_dict(value)


class Shape:
    """Base class of all wire shapes."""

    def to_dict(self) -> Dict[str, Any]:
        """
        Serializes all set body members of the shape into a JSON compatible dictionary.

        :return: the wire representation of the shape
        """
        result = {}
        for field in dataclasses.fields(self):
            if field.metadata.get("location", LOCATION_BODY) != LOCATION_BODY:
                continue
            value = getattr(self, field.name)
            if value is None:
                continue
            result[wire_name(field)] = serialize_value(value)
        return result

    @classmethod
    def from_dict(cls: Type[S], data: Optional[Dict[str, Any]], **kwargs) -> S:
        """
        Creates a shape from its wire representation. Unknown members are ignored.

        :param data: the JSON document
        :param kwargs: additional constructor arguments
        :return: the shape
        """
        data = data or {}
        for field in dataclasses.fields(cls):
            if field.name in kwargs or not field.init:
                continue
            name = wire_name(field)
            if name in data:
                kwargs[field.name] = _parse_value(field.metadata.get("shape"), data[name])
        return cls(**kwargs)

    def _replace(self: S, **changes) -> S:
        return dataclasses.replace(self, **changes)


class SerializedRequest(NamedTuple):
    method: str
    path: str
    query: List[Tuple[str, str]]
    headers: Dict[str, str]
    body: Optional[bytes]


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


@dataclasses.dataclass(frozen=True)
class RequestInput(Shape):
    """
    Base class of the input of an API operation.

    Subclasses declare the HTTP method and the URI template of the operation, the template placeholders refer to
    the names of the fields located in the URI. All ``with_*`` methods return a new input and leave the original
    one untouched, so one input can serve as the template of several requests.
    """

    http_method: ClassVar[str] = "GET"
    request_uri: ClassVar[str] = "/"
    content_type: ClassVar[str] = APPLICATION_JSON

    headers: Optional[Dict[str, str]] = dataclasses.field(
        default=None, kw_only=True, metadata={"location": None}
    )

    def with_header(self, key: str, value: str):
        headers = dict(self.headers or {})
        headers[key] = value
        return self._replace(headers=headers)

    def with_headers(self, headers: Dict[str, str]):
        merged = dict(self.headers or {})
        merged.update(headers)
        return self._replace(headers=merged)

    def _uri_params(self, params: Dict[str, Any]) -> Dict[str, Any]:
        return params

    def _query_params(self, params: List[Tuple[str, str]]) -> List[Tuple[str, str]]:
        return params

    def _body(self) -> Optional[bytes]:
        document = self.to_dict()
        if document or self.http_method in ("POST", "PUT"):
            return to_bytes(canonical_json(document))
        return None

    def serialize(self, api_version: str) -> SerializedRequest:
        """
        Turns this input into the components of an HTTP request.

        :param api_version: the API version which prefixes the request path
        :return: a SerializedRequest
        """
        uri_params = {}
        query = []
        headers = dict(self.headers or {})

        for field in dataclasses.fields(self):
            location = field.metadata.get("location", LOCATION_BODY)
            value = getattr(self, field.name)
            if value is None:
                continue
            if location == LOCATION_URI:
                uri_params[field.name] = value
            elif location == LOCATION_QUERY:
                query.append((wire_name(field), _query_value(value)))
            elif location == LOCATION_HEADER:
                headers[wire_name(field)] = _query_value(value)

        uri_params = {
            key: quote(str(value), safe="") for key, value in self._uri_params(uri_params).items()
        }
        path = f"/{api_version}{self.request_uri.format(**uri_params)}"
        body = self._body()
        if body is not None and not any(k.lower() == "content-type" for k in headers):
            headers[HEADER_CONTENT_TYPE] = self.content_type

        return SerializedRequest(
            method=self.http_method,
            path=path,
            query=self._query_params(query),
            headers=headers,
            body=body,
        )


@dataclasses.dataclass(frozen=True)
class ListInput(RequestInput):
    """Common paging and filtering parameters of list operations."""

    limit: Optional[int] = member(location=LOCATION_QUERY, kw_only=True)
    prefix: Optional[str] = member(location=LOCATION_QUERY, kw_only=True)
    start_key: Optional[str] = member(location=LOCATION_QUERY, kw_only=True)
    next_token: Optional[str] = member(location=LOCATION_QUERY, kw_only=True)

    def with_limit(self, limit: int):
        return self._replace(limit=limit)

    def with_prefix(self, prefix: str):
        return self._replace(prefix=prefix)

    def with_start_key(self, start_key: str):
        return self._replace(start_key=start_key)

    def with_next_token(self, next_token: str):
        return self._replace(next_token=next_token)


@dataclasses.dataclass(frozen=True)
class ResponseOutput(Shape):
    """Base class of the output of an API operation, which keeps the HTTP response headers."""

    header: Headers = dataclasses.field(
        default_factory=Headers, kw_only=True, compare=False, metadata={"location": None}
    )

    @classmethod
    def from_response(cls: Type[S], data: Optional[Dict[str, Any]], headers) -> S:
        return cls.from_dict(data, header=Headers(list(headers.items())))

    def get_request_id(self) -> Optional[str]:
        return self.header.get(HEADER_REQUEST_ID)

    def get_etag(self) -> Optional[str]:
        return self.header.get(HEADER_ETAG)


class FcError(Exception):
    """
    An error returned by the Function Compute service, or detected by the client while encoding a request or
    decoding a response.
    """

    code: str = "FcError"
    status_code: Optional[int] = None

    def __init__(
        self,
        message: str,
        code: str = None,
        status_code: int = None,
        request_id: str = None,
    ):
        self.message = message
        if code:
            self.code = code
        if status_code is not None:
            self.status_code = status_code
        self.request_id = request_id
        super().__init__(self.message)

    def __str__(self):
        parts = [f"{self.code}: {self.message}"]
        if self.status_code is not None:
            parts.append(f"status={self.status_code}")
        if self.request_id:
            parts.append(f"request_id={self.request_id}")
        return ", ".join(parts)


class ValidationError(FcError):
    """The request was rejected as malformed or conflicting."""

    code = "InvalidArgument"
    status_code = 400


class ResourceConflictError(ValidationError):
    """The resource already exists, or is still referenced by other resources."""

    code = "ResourceConflict"
    status_code = 409


class PreconditionFailedError(FcError):
    """The ``If-Match`` precondition did not match the current ETag of the resource."""

    code = "PreconditionFailed"
    status_code = 412


class ResourceNotFoundError(FcError):
    """The referenced service, function or trigger does not exist."""

    code = "ResourceNotFound"
    status_code = 404


class AccessDeniedError(FcError):
    code = "AccessDenied"
    status_code = 403


class ServerError(FcError):
    code = "InternalServerError"
    status_code = 500


class FunctionExecutionError(FcError):
    """The function was invoked, but its execution failed. The raw function output is kept in ``payload``."""

    code = "FunctionExecutionError"

    def __init__(self, message: str, payload: bytes = None, **kwargs):
        super().__init__(message, **kwargs)
        self.payload = payload


class LogDecodeError(FcError):
    """The log tail of an invocation is not valid base64."""

    code = "LogDecodeError"


class TriggerTypeMismatchError(FcError):
    """The trigger configuration does not match the trigger type."""

    code = "TriggerTypeMismatch"


_ERRORS_BY_CODE: Dict[str, Type[FcError]] = {
    "PreconditionFailed": PreconditionFailedError,
    "ServiceNotFound": ResourceNotFoundError,
    "FunctionNotFound": ResourceNotFoundError,
    "TriggerNotFound": ResourceNotFoundError,
    "ResourceNotFound": ResourceNotFoundError,
    "ServiceAlreadyExists": ResourceConflictError,
    "FunctionAlreadyExists": ResourceConflictError,
    "TriggerAlreadyExists": ResourceConflictError,
    "ServiceNotEmpty": ResourceConflictError,
    "FunctionNotEmpty": ResourceConflictError,
}

_ERRORS_BY_STATUS: Dict[int, Type[FcError]] = {
    400: ValidationError,
    401: AccessDeniedError,
    403: AccessDeniedError,
    404: ResourceNotFoundError,
    409: ResourceConflictError,
    412: PreconditionFailedError,
}


def get_fc_error(
    status_code: int, code: Optional[str], message: str, request_id: Optional[str]
) -> FcError:
    """
    Maps an error response to the matching exception. The error code reported by the service takes precedence
    over the HTTP status code.

    :param status_code: the HTTP status code
    :param code: the ``ErrorCode`` of the response body
    :param message: the ``ErrorMessage`` of the response body
    :param request_id: the request ID of the failed request
    :return: an FcError
    """
    error_cls = _ERRORS_BY_CODE.get(code or "")
    if error_cls is None:
        if status_code >= 500:
            error_cls = ServerError
        else:
            error_cls = _ERRORS_BY_STATUS.get(status_code, ValidationError)
    return error_cls(message, code=code, status_code=status_code, request_id=request_id)
