"""Service layer for metadata reconciliation and queries."""

from metasearch.services.reconciler import MetadataReconciler, merge, from_offchain
from metasearch.services.query_service import FileQueryService

__all__ = [
    "MetadataReconciler",
    "merge",
    "from_offchain",
    "FileQueryService",
]
