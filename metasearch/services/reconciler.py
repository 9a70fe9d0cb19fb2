"""Reconciliation of search-index hits with authoritative on-chain records."""

from typing import Optional

from common.keys import InvalidPublicKey, PublicKey
from common.logging_config import get_logger
from metasearch.domain import FileMetadata, OffchainRecord, OnchainRecord
from metasearch.exceptions import (
    MetadataDecodeError,
    MissingOnchainRecord,
    PublicKeyDecodeError,
)
from metasearch.utils import encode_fee, encode_optional_fee, parse_hash

logger = get_logger(__name__)


def reconstruct_key(value, field: str) -> PublicKey:
    """
    Turn an on-chain account id back into a public key.

    Raises:
        PublicKeyDecodeError: If the account id is not a 32-byte key
    """
    try:
        return PublicKey.parse(value)
    except InvalidPublicKey as e:
        raise PublicKeyDecodeError(f"Cannot reconstruct {field} public key: {e}") from e


def merge(off: OffchainRecord, on: OnchainRecord) -> FileMetadata:
    """
    Merge an off-chain hit with its on-chain record.

    Chain values win for every field the chain holds; filename, content
    type, upload time, download counter and descriptions come from the
    index, and the identity key always comes from the index.

    Raises:
        PublicKeyDecodeError: If an on-chain account id is malformed
        MetadataDecodeError: If a fee, size or hash value is malformed
    """
    if isinstance(on.size, bool) or not isinstance(on.size, int) or on.size < 0:
        raise MetadataDecodeError(f"Invalid on-chain size: {on.size!r}")

    attester = reconstruct_key(on.attester, "attester") if on.attester is not None else None

    return FileMetadata(
        id=off.id,
        uploader=reconstruct_key(on.uploader, "uploader"),
        big_brother=reconstruct_key(on.big_brother, "big_brother"),
        servicer=reconstruct_key(on.servicer, "servicer"),
        owner=reconstruct_key(on.owner, "owner"),
        attester=attester,
        transfer_fee=encode_fee(on.transfer_fee),
        download_fee=encode_optional_fee(on.download_fee),
        size=on.size,
        hash=parse_hash(on.hash),
        filename=off.filename,
        content_type=off.content_type,
        uploaded_at=off.uploaded_at,
        download_counter=off.download_counter,
        descriptions=off.descriptions,
    )


def from_offchain(off: OffchainRecord) -> FileMetadata:
    """
    Build file metadata from an indexed hit alone.

    Raises:
        MetadataDecodeError: If the hit lacks one of the chain-mirrored fields
    """
    required = ("uploader", "big_brother", "servicer", "owner", "transfer_fee", "size", "hash")
    missing = [name for name in required if getattr(off, name) is None]
    if missing:
        raise MetadataDecodeError(
            f"Indexed record {off.id} is missing fields: {', '.join(missing)}"
        )

    return FileMetadata(
        id=off.id,
        uploader=off.uploader,
        big_brother=off.big_brother,
        servicer=off.servicer,
        owner=off.owner,
        attester=off.attester,
        transfer_fee=off.transfer_fee,
        download_fee=off.download_fee if off.download_fee is not None else encode_optional_fee(None),
        size=off.size,
        hash=off.hash,
        filename=off.filename,
        content_type=off.content_type,
        uploaded_at=off.uploaded_at,
        download_counter=off.download_counter,
        descriptions=off.descriptions,
    )


class MetadataReconciler:
    """
    Fetches the on-chain counterpart of a hit and merges the two.

    Every call does one chain lookup; results are never cached.
    """

    def __init__(self, session):
        self.session = session

    async def reconcile(self, off: OffchainRecord) -> FileMetadata:
        """
        Reconcile one hit with the chain.

        Raises:
            MissingOnchainRecord: If the chain has no record for the hit's key
            ChainTransportError: If the chain lookup fails
            MetadataDecodeError: If the on-chain record cannot be decoded
        """
        on: Optional[OnchainRecord] = await self.session.fetch_by_key(off.id)
        if on is None:
            logger.warning(f"No on-chain record for indexed file {off.id}")
            raise MissingOnchainRecord(off.id)
        return merge(off, on)
