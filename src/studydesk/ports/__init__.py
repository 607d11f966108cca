"""Ports - interfaces/protocols for external dependencies."""

from .record_store import RecordStore
from .file_store import FileStore
from .identity import IdentityProvider
from .quote_source import QuoteSource

__all__ = [
    "RecordStore",
    "FileStore",
    "IdentityProvider",
    "QuoteSource",
]
