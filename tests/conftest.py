import pytest

pytest_plugins = [
    "fcclient.testing.pytest.fixtures",
]


def pytest_collection_modifyitems(config, items):
    from fcclient.testing.config import is_live_target

    if is_live_target():
        return
    for item in items:
        if "live" in item.keywords:
            item.add_marker(pytest.mark.skip(reason="requires a live Function Compute endpoint"))


def pytest_configure(config):
    from fcclient.logging.setup import setup_logging_from_config

    setup_logging_from_config()
