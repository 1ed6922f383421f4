from rolo.request import (
    Request,
    dummy_wsgi_environment,
    get_raw_base_url,
    get_raw_current_url,
    get_raw_path,
    restore_payload,
)

__all__ = [
    "dummy_wsgi_environment",
    "Request",
    "get_raw_path",
    "get_raw_base_url",
    "get_raw_current_url",
    "restore_payload",
]
