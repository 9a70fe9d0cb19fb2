"""Domain records for search hits, chain records and normalized file metadata."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union

from common.keys import PublicKey


@dataclass(frozen=True)
class OffchainRecord:
    """
    A file metadata hit from the search index.

    The chain-mirrored fields are optional because the indexed document
    shape has changed over time; only `id` is needed to join against the
    chain.
    """
    id: PublicKey
    filename: str
    content_type: str
    uploaded_at: datetime
    download_counter: int
    descriptions: str
    uploader: Optional[PublicKey] = None
    big_brother: Optional[PublicKey] = None
    servicer: Optional[PublicKey] = None
    owner: Optional[PublicKey] = None
    attester: Optional[PublicKey] = None
    transfer_fee: Optional[bytes] = None
    download_fee: Optional[bytes] = None
    size: Optional[int] = None
    hash: Optional[bytes] = None


@dataclass(frozen=True)
class OnchainRecord:
    """
    A file record as stored on chain, before any field decoding.

    Account ids stay in the chain's textual form and fees stay integers.
    """
    uploader: str
    big_brother: str
    servicer: str
    owner: str
    transfer_fee: int
    size: int
    hash: Union[str, bytes]
    download_fee: Optional[int] = None
    attester: Optional[str] = None


@dataclass(frozen=True)
class FileMetadata:
    """
    Normalized file metadata returned to callers.
    """
    id: PublicKey
    uploader: PublicKey
    big_brother: PublicKey
    servicer: PublicKey
    owner: PublicKey
    attester: Optional[PublicKey]
    transfer_fee: bytes
    download_fee: bytes
    size: int
    hash: bytes
    filename: str
    content_type: str
    uploaded_at: datetime
    download_counter: int
    descriptions: str
