import logging
import sys
import warnings

from fcclient import config, constants

from .format import (
    AddFormattedAttributes,
    DefaultFormatter,
    MaskSensitiveHeadersFilter,
    TraceLoggingFormatter,
)

# default log levels of third party and internal loggers, the levels of the ``fcclient`` root logger are set
# separately

default_log_levels = {
    "charset_normalizer": logging.WARNING,
    "requests": logging.WARNING,
    "urllib3": logging.WARNING,
    "werkzeug": logging.WARNING,
    "rolo": logging.WARNING,
    "fcclient.request": logging.INFO,
}

trace_log_levels = {
    "rolo": logging.DEBUG,
    "urllib3": logging.DEBUG,
    "fcclient.request": logging.DEBUG,
}


def get_log_level_from_config():
    # overriding the log level if FC_LOG has been set
    if config.FC_LOG:
        log_level = str(config.FC_LOG).upper()
        if log_level.lower() in constants.TRACE_LOG_LEVELS:
            log_level = "DEBUG"
        log_level = logging._nameToLevel[log_level]
        return log_level

    return logging.DEBUG if config.DEBUG else logging.INFO


def setup_logging_from_config():
    log_level = get_log_level_from_config()
    setup_logging(log_level)

    if config.is_trace_logging_enabled():
        for name, level in trace_log_levels.items():
            logging.getLogger(name).setLevel(level)
        setup_request_trace_logging(log_level)


def create_default_handler(log_level: int):
    log_handler = logging.StreamHandler(stream=sys.stderr)
    log_handler.setLevel(log_level)
    log_handler.setFormatter(DefaultFormatter())
    log_handler.addFilter(AddFormattedAttributes())
    return log_handler


def setup_logging(log_level=logging.INFO) -> None:
    """
    Configures the python logging environment for fc-client.

    :param log_level: the optional log level.
    """
    # create a default handler for the root logger (basically logging.basicConfig but explicit)
    log_handler = create_default_handler(log_level)

    # replace any existing handlers
    logging.basicConfig(level=log_level, handlers=[log_handler])

    # disable some logs and warnings
    warnings.filterwarnings("ignore")
    logging.captureWarnings(True)

    # set log levels of loggers
    logging.root.setLevel(log_level)
    logging.getLogger("fcclient").setLevel(log_level)
    for logger, level in default_log_levels.items():
        logging.getLogger(logger).setLevel(level)


def setup_request_trace_logging(log_level=logging.DEBUG) -> None:
    """
    Attaches a dedicated handler to the ``fcclient.request`` logger which prints the (masked) request and response
    headers of every API call.

    :param log_level: the log level of the trace handler
    """
    logger = logging.getLogger("fcclient.request")
    log_handler = logging.StreamHandler(stream=sys.stderr)
    log_handler.setLevel(log_level)
    log_handler.setFormatter(TraceLoggingFormatter())
    log_handler.addFilter(AddFormattedAttributes())
    log_handler.addFilter(MaskSensitiveHeadersFilter())
    logger.addHandler(log_handler)
    logger.propagate = False
