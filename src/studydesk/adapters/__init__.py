"""Adapters - I/O implementations of ports."""

from .json_store import JsonRecordStore
from .local_files import LocalFileStore
from .identity import AuthenticationError, ConfigIdentityProvider
from .quotable_api import QuotableAdapter

__all__ = [
    "JsonRecordStore",
    "LocalFileStore",
    "AuthenticationError",
    "ConfigIdentityProvider",
    "QuotableAdapter",
]
