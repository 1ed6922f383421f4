"""Tools for formatting fc-client logs."""
import logging
from functools import lru_cache
from typing import Dict, Iterable, Optional

MAX_THREAD_NAME_LEN = 12
MAX_NAME_LEN = 26

LOG_FORMAT = f"%(asctime)s.%(msecs)03d %(fc_level)5s --- [%(fc_thread){MAX_THREAD_NAME_LEN}s] %(fc_name)-{MAX_NAME_LEN}s : %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"

CUSTOM_LEVEL_NAMES = {
    50: "FATAL",
    40: "ERROR",
    30: "WARN",
    20: "INFO",
    10: "DEBUG",
}

# headers which are never written to the logs in clear text
SENSITIVE_HEADERS = ("authorization", "x-fc-security-token")


class DefaultFormatter(logging.Formatter):
    """
    A formatter that uses ``LOG_FORMAT`` and ``LOG_DATE_FORMAT``.
    """

    def __init__(self, fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT):
        super(DefaultFormatter, self).__init__(fmt=fmt, datefmt=datefmt)


class AddFormattedAttributes(logging.Filter):
    """
    Filter that adds three attributes to a log record:

    - fc_level: the abbreviated loglevel that's max 5 characters long
    - fc_name: the abbreviated name of the logger (e.g., `f.http.client`), trimmed to ``MAX_NAME_LEN``
    - fc_thread: the abbreviated thread name (prefix trimmed, .e.g, ``omeThread-108``)
    """

    max_name_len: int
    max_thread_len: int

    def __init__(self, max_name_len: int = None, max_thread_len: int = None):
        super(AddFormattedAttributes, self).__init__()
        self.max_name_len = max_name_len if max_name_len else MAX_NAME_LEN
        self.max_thread_len = max_thread_len if max_thread_len else MAX_THREAD_NAME_LEN

    def filter(self, record):
        record.fc_level = CUSTOM_LEVEL_NAMES.get(record.levelno, record.levelname)
        record.fc_name = self._get_compressed_logger_name(record.name)
        record.fc_thread = record.threadName[-self.max_thread_len :]
        return True

    @lru_cache(maxsize=256)
    def _get_compressed_logger_name(self, name):
        return compress_logger_name(name, self.max_name_len)


def compress_logger_name(name: str, length: int) -> str:
    """
    Creates a short version of a logger name. For example ``my.very.long.logger.name`` with length=17 turns into
    ``m.v.l.logger.name``.

    :param name: the logger name
    :param length: the max length of the logger name
    :return: the compressed name
    """
    if len(name) <= length:
        return name

    parts = name.split(".")
    parts.reverse()

    new_parts = []

    # we start by assuming that all parts are collapsed
    # x.x.x requires 5 = 2n - 1 characters
    cur_length = (len(parts) * 2) - 1

    for i in range(len(parts)):
        # try to expand the current part and calculate the resulting length
        part = parts[i]
        next_len = cur_length + (len(part) - 1)

        if next_len > length:
            # add only the first letter of all remaining parts
            new_parts += [p[0] for p in parts[i:]]

            # if this is the first item we would display nothing, so display as much as possible of it
            if i == 0:
                remaining = length - cur_length
                if remaining > 0:
                    new_parts[0] = part[: (remaining + 1)]

            break

        new_parts.append(part)
        cur_length = next_len

    new_parts.reverse()
    return ".".join(new_parts)


class TraceLoggingFormatter(logging.Formatter):
    """
    Formatter for the ``fcclient.request`` logger, which appends the request and response headers that the
    dispatcher attaches to each record as ``extra`` attributes.
    """

    trace_log_format = (
        LOG_FORMAT + "; request(headers=%(request_headers)s); response(headers=%(response_headers)s)"
    )

    def __init__(self):
        super().__init__(fmt=self.trace_log_format, datefmt=LOG_DATE_FORMAT)


class MaskSensitiveHeadersFilter(logging.Filter):
    """
    Filter that replaces the values of sensitive headers (signatures, security tokens) in the ``request_headers``
    and ``response_headers`` attributes of a log record.
    """

    sensitive_headers: set[str]

    def __init__(self, sensitive_headers: Optional[Iterable[str]] = None):
        super().__init__()
        self.sensitive_headers = {
            h.lower() for h in (sensitive_headers if sensitive_headers else SENSITIVE_HEADERS)
        }

    def filter(self, record):
        for attribute in ("request_headers", "response_headers"):
            headers = getattr(record, attribute, None)
            if headers is None:
                setattr(record, attribute, {})
                continue
            setattr(record, attribute, self.mask(dict(headers)))
        return True

    def mask(self, headers: Dict[str, str]) -> Dict[str, str]:
        return {
            key: "******" if key.lower() in self.sensitive_headers else value
            for key, value in headers.items()
        }
