"""Pydantic schemas for search hits and API responses."""

from metasearch.schemas.files import SearchHit, FileMetadataResponse
from metasearch.schemas.common import ErrorResponse

__all__ = [
    "SearchHit",
    "FileMetadataResponse",
    "ErrorResponse"
]
