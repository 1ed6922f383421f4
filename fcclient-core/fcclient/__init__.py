"""Python client for the Function Compute (FC) HTTP API."""

from fcclient.version import __version__

__all__ = ["__version__"]
