from json import JSONEncoder
from typing import Any, Optional, Type

from rolo import Response as RoloResponse

from fcclient.constants import HEADER_REQUEST_ID
from fcclient.utils.json import CustomEncoder


class Response(RoloResponse):
    """
    An HTTP Response object, which extends werkzeug's Response object with the JSON conventions of the FC API.
    """

    def set_json(self, doc: Any, cls: Type[JSONEncoder] = CustomEncoder):
        """
        Serializes the given dictionary using the ``CustomEncoder`` into a json response, and sets the mimetype
        automatically to ``application/json``.

        :param doc: the response dictionary to be serialized as JSON
        :param cls: the json encoder used
        """
        return super().set_json(doc, cls or CustomEncoder)

    @classmethod
    def for_error(
        cls, status: int, code: str, message: str, request_id: Optional[str] = None
    ) -> "Response":
        """
        Creates an error response in the format of the FC API, ``{"ErrorCode": ..., "ErrorMessage": ...}``.

        :param status: the HTTP status code
        :param code: the error code
        :param message: the human-readable error message
        :param request_id: the request ID, set as ``X-Fc-Request-Id`` header if given
        :return: a new Response
        """
        response = cls(status=status)
        response.set_json({"ErrorCode": code, "ErrorMessage": message})
        if request_id:
            response.headers[HEADER_REQUEST_ID] = request_id
        return response
