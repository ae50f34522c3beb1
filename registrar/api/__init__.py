"""
API module exposing the records engine over HTTP.
"""

from .rest_api import RegistrarRestAPI

__all__ = [
    "RegistrarRestAPI",
]
