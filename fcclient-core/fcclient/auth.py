"""
Request signing for the FC API.

The ``Authorization`` header of a request is ``FC <access key id>:<signature>``, where the signature is the base64
encoded HMAC-SHA256 of the canonical string of the request::

    METHOD
    Content-MD5
    Content-Type
    Date
    x-fc-header-1:value       (all x-fc-* headers, lower case and sorted)
    /path                     (unescaped)
    key1=value1               (sorted query parameters, only if there are any)
"""
import base64
import hashlib
import hmac
import logging
from typing import Iterable, Mapping, NamedTuple, Optional, Tuple, Union
from urllib.parse import unquote

from fcclient.constants import (
    FC_HEADER_PREFIX,
    HEADER_CONTENT_MD5,
    HEADER_CONTENT_TYPE,
    HEADER_DATE,
)
from fcclient.utils.strings import to_bytes, to_str

LOG = logging.getLogger(__name__)

QueryParameters = Union[Mapping[str, Union[str, Iterable[str]]], Iterable[Tuple[str, str]]]


class Credentials(NamedTuple):
    access_key_id: str
    access_key_secret: str
    security_token: Optional[str] = None


def _header(headers: Mapping[str, str], name: str) -> str:
    name = name.lower()
    for key, value in headers.items():
        if key.lower() == name:
            return value
    return ""


def _query_items(queries: Optional[QueryParameters]) -> list[str]:
    if not queries:
        return []
    items = queries.items() if isinstance(queries, Mapping) else queries
    result = []
    for key, value in items:
        if isinstance(value, (list, tuple)):
            result.extend(f"{key}={v}" for v in value)
        else:
            result.append(f"{key}={value}")
    return sorted(result)


class Signer:
    """Signs FC API requests with the given credentials."""

    def __init__(self, credentials: Credentials):
        self.credentials = credentials

    def string_to_sign(
        self,
        method: str,
        path: str,
        headers: Mapping[str, str],
        queries: QueryParameters = None,
    ) -> str:
        """
        Builds the canonical string of a request.

        :param method: the HTTP method
        :param path: the request path, escaped or not
        :param headers: the request headers, which must already contain the Date header
        :param queries: the query parameters
        :return: the string to sign
        """
        fc_headers = sorted(
            (key.lower().strip(), str(value).strip())
            for key, value in headers.items()
            if key.lower().startswith(FC_HEADER_PREFIX)
        )
        canonical_headers = "".join(f"{key}:{value}\n" for key, value in fc_headers)

        resource = unquote(path)
        query_items = _query_items(queries)
        if query_items:
            resource = resource + "\n" + "\n".join(query_items)

        return "\n".join(
            [
                method.upper(),
                _header(headers, HEADER_CONTENT_MD5),
                _header(headers, HEADER_CONTENT_TYPE),
                _header(headers, HEADER_DATE),
                canonical_headers + resource,
            ]
        )

    def signature(self, string_to_sign: str) -> str:
        digest = hmac.new(
            to_bytes(self.credentials.access_key_secret),
            to_bytes(string_to_sign),
            hashlib.sha256,
        ).digest()
        return to_str(base64.b64encode(digest))

    def authorization(
        self,
        method: str,
        path: str,
        headers: Mapping[str, str],
        queries: QueryParameters = None,
    ) -> str:
        """
        Returns the value of the Authorization header for the given request.
        """
        string_to_sign = self.string_to_sign(method, path, headers, queries)
        LOG.debug("String to sign: %r", string_to_sign)
        return f"FC {self.credentials.access_key_id}:{self.signature(string_to_sign)}"
