import abc
import email.utils
import logging
from typing import Callable, Dict, Optional
from urllib.parse import urlparse

import requests
from werkzeug.datastructures import Headers

from fcclient.auth import Signer
from fcclient.constants import (
    HEADER_AUTHORIZATION,
    HEADER_CONTENT_MD5,
    HEADER_DATE,
    HEADER_SECURITY_TOKEN,
    HEADER_USER_AGENT,
)
from fcclient.utils.strings import md5_base64

from .request import Request, get_raw_base_url, get_raw_current_url, get_raw_path, restore_payload
from .response import Response

LOG = logging.getLogger(__name__)

# headers which are recomputed by the transport for the destination
HOP_HEADERS = ("host", "content-length", "transfer-encoding", "connection")


class HttpClient(abc.ABC):
    """
    An HTTP client that can make http requests using werkzeug's request object.
    """

    def request(self, request: Request, server: str | None = None) -> Response:
        """
        Make the given HTTP as a client.

        :param request: the request to make
        :param server: the URL to send the request to, which defaults to the host component of the original Request.
        :return: the response.
        """
        raise NotImplementedError

    def close(self):
        """
        Close any underlying resources the client may need.
        """
        pass

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()


class _VerifyRespectingSession(requests.Session):
    """
    A class which wraps requests.Session to circumvent https://github.com/psf/requests/issues/3829.
    This ensures that if `REQUESTS_CA_BUNDLE` or `CURL_CA_BUNDLE` are set, the request does not perform the TLS
    verification if `session.verify` is set to `False.
    """

    def merge_environment_settings(self, url, proxies, stream, verify, *args, **kwargs):
        if self.verify is False:
            verify = False

        return super(_VerifyRespectingSession, self).merge_environment_settings(
            url, proxies, stream, verify, *args, **kwargs
        )


class SimpleRequestsClient(HttpClient):
    """
    Makes the given HTTP request with the requests library and buffers the whole response, performing exactly one
    round-trip per request.
    """

    session: requests.Session
    timeout: Optional[float]

    def __init__(self, session: requests.Session = None, timeout: float = None):
        self.session = session or _VerifyRespectingSession()
        self.timeout = timeout

    @staticmethod
    def _get_destination_url(request: Request, server: str | None = None) -> str:
        if server:
            # accepts "http://localhost:5000" or "localhost:5000"
            if "://" in server:
                parts = urlparse(server)
                scheme, server = parts.scheme, parts.netloc
            else:
                scheme = request.scheme
            return get_raw_current_url(scheme, server, request.root_path, get_raw_path(request))

        return get_raw_base_url(request)

    def _prepare_headers(self, request: Request) -> Dict[str, str]:
        headers = {k: v for k, v in request.headers.items() if k.lower() not in HOP_HEADERS}
        # urllib3 would otherwise add "Accept-Encoding: gzip,deflate" to the signed request
        if not request.headers.get("accept-encoding"):
            headers["Accept-Encoding"] = "identity"
        return headers

    def request(self, request: Request, server: str | None = None) -> Response:
        """
        Makes the given HTTP request as a client.

        :param request: the request to perform
        :param server: the URL to send the request to, which defaults to the host component of the original Request.
        :return: the response, with the body fully read
        """
        url = self._get_destination_url(request, server)
        headers = self._prepare_headers(request)

        response = self.session.request(
            method=request.method,
            # use raw base url to preserve path url encoding
            url=url,
            # request.args are only the url parameters
            params=[(k, v) for k, v in request.args.items(multi=True)],
            headers=headers,
            data=restore_payload(request),
            timeout=self.timeout,
        )

        response_headers = Headers(list(response.headers.items()))
        response_headers.pop("Content-Length", None)
        response_headers.pop("Content-Encoding", None)
        response_headers.pop("Transfer-Encoding", None)

        return Response(
            response=response.content,
            status=response.status_code,
            headers=response_headers,
        )

    def close(self):
        self.session.close()


class SigningRequestsClient(SimpleRequestsClient):
    """
    A SimpleRequestsClient which adds the common FC headers (``Date``, ``User-Agent``, ``Content-MD5`` and the
    security token) to every request and signs it.
    """

    def __init__(
        self,
        signer: Signer,
        session: requests.Session = None,
        timeout: float = None,
        user_agent: str = None,
        date_factory: Callable[[], str] = None,
    ):
        super().__init__(session=session, timeout=timeout)
        self.signer = signer
        self.user_agent = user_agent
        self.date_factory = date_factory or (lambda: email.utils.formatdate(usegmt=True))

    def _prepare_headers(self, request: Request) -> Dict[str, str]:
        headers = super()._prepare_headers(request)
        lower_keys = {key.lower() for key in headers}

        if HEADER_DATE.lower() not in lower_keys:
            headers[HEADER_DATE] = self.date_factory()
        if self.user_agent and HEADER_USER_AGENT.lower() not in lower_keys:
            headers[HEADER_USER_AGENT] = self.user_agent
        if self.signer.credentials.security_token:
            headers[HEADER_SECURITY_TOKEN] = self.signer.credentials.security_token

        body = restore_payload(request)
        if body and HEADER_CONTENT_MD5.lower() not in lower_keys:
            headers[HEADER_CONTENT_MD5] = md5_base64(body)

        headers[HEADER_AUTHORIZATION] = self.signer.authorization(
            request.method,
            get_raw_path(request),
            headers,
            list(request.args.items(multi=True)),
        )
        return headers
