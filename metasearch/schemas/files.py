"""Pydantic schemas for file metadata search hits and responses."""

from datetime import datetime, timezone
from typing import Optional

from pydantic import AwareDatetime, BaseModel, Field

from common.keys import PublicKey
from metasearch.domain import FileMetadata, OffchainRecord
from metasearch.utils import fee_from_hex, parse_hash


def _optional_key(value: Optional[str]) -> Optional[PublicKey]:
    return PublicKey.parse(value) if value is not None else None


class SearchHit(BaseModel):
    """A file metadata document as stored in the search index."""
    id: str
    filename: str
    content_type: str
    uploaded_at: AwareDatetime
    download_counter: int = Field(ge=0)
    descriptions: str = ""
    uploader: Optional[str] = None
    big_brother: Optional[str] = None
    servicer: Optional[str] = None
    owner: Optional[str] = None
    attester: Optional[str] = None
    transfer_fee: Optional[str] = None
    download_fee: Optional[str] = None
    size: Optional[int] = Field(default=None, ge=0)
    hash: Optional[str] = None

    def to_domain(self) -> OffchainRecord:
        """
        Decode the indexed document into an OffchainRecord.

        Raises:
            InvalidPublicKey: If a key field is malformed
            MetadataDecodeError: If a fee or hash field is malformed
        """
        return OffchainRecord(
            id=PublicKey.parse(self.id),
            filename=self.filename,
            content_type=self.content_type,
            uploaded_at=self.uploaded_at.astimezone(timezone.utc),
            download_counter=self.download_counter,
            descriptions=self.descriptions,
            uploader=_optional_key(self.uploader),
            big_brother=_optional_key(self.big_brother),
            servicer=_optional_key(self.servicer),
            owner=_optional_key(self.owner),
            attester=_optional_key(self.attester),
            transfer_fee=fee_from_hex(self.transfer_fee) if self.transfer_fee is not None else None,
            download_fee=fee_from_hex(self.download_fee) if self.download_fee is not None else None,
            size=self.size,
            hash=parse_hash(self.hash) if self.hash is not None else None,
        )


class FileMetadataResponse(BaseModel):
    """Response model for one normalized file metadata record."""
    id: str
    uploader: str
    big_brother: str
    servicer: str
    owner: str
    attester: Optional[str] = None
    transfer_fee: str
    download_fee: str
    size: int
    hash: str
    filename: str
    content_type: str
    uploaded_at: datetime
    download_counter: int
    descriptions: str

    @classmethod
    def from_domain(cls, record: FileMetadata) -> "FileMetadataResponse":
        return cls(
            id=record.id.to_ss58(),
            uploader=record.uploader.to_ss58(),
            big_brother=record.big_brother.to_ss58(),
            servicer=record.servicer.to_ss58(),
            owner=record.owner.to_ss58(),
            attester=record.attester.to_ss58() if record.attester is not None else None,
            transfer_fee=record.transfer_fee.hex(),
            download_fee=record.download_fee.hex(),
            size=record.size,
            hash=record.hash.hex(),
            filename=record.filename,
            content_type=record.content_type,
            uploaded_at=record.uploaded_at,
            download_counter=record.download_counter,
            descriptions=record.descriptions,
        )
