"""Field codecs shared by the search and chain sides."""

from typing import Optional, Union

from common.constants import FEE_LENGTH, FEE_MAX, HASH_LENGTH
from metasearch.exceptions import MetadataDecodeError


ZERO_FEE: bytes = bytes(FEE_LENGTH)


def encode_fee(value: int) -> bytes:
    """
    Encode a fixed-point fee as the 16 little-endian bytes of a u128.

    Raises:
        MetadataDecodeError: If the value does not fit in a u128
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise MetadataDecodeError(f"Fee must be an integer, got {value!r}")
    if value < 0 or value > FEE_MAX:
        raise MetadataDecodeError(f"Fee {value} is outside the u128 range")
    return value.to_bytes(FEE_LENGTH, "little")


def encode_optional_fee(value: Optional[int]) -> bytes:
    """An absent fee encodes as zero."""
    if value is None:
        return ZERO_FEE
    return encode_fee(value)


def decode_fee(raw: bytes) -> int:
    if len(raw) != FEE_LENGTH:
        raise MetadataDecodeError(f"Fee must be {FEE_LENGTH} bytes, got {len(raw)}")
    return int.from_bytes(raw, "little")


def _from_hex(value: str, length: int, field: str) -> bytes:
    hex_str = value[2:] if value.startswith(("0x", "0X")) else value
    try:
        raw = bytes.fromhex(hex_str)
    except ValueError as e:
        raise MetadataDecodeError(f"Invalid hex for {field}: {value!r}") from e
    if len(raw) != length:
        raise MetadataDecodeError(f"{field} must be {length} bytes, got {len(raw)}")
    return raw


def fee_from_hex(value: str) -> bytes:
    return _from_hex(value, FEE_LENGTH, "fee")


def parse_hash(value: Union[str, bytes, bytearray, list]) -> bytes:
    """
    Decode a 32-byte content hash from hex text or a byte sequence.

    Raises:
        MetadataDecodeError: If the value is not exactly 32 bytes
    """
    if isinstance(value, str):
        return _from_hex(value, HASH_LENGTH, "hash")
    if isinstance(value, (list, tuple)):
        try:
            value = bytes(value)
        except (TypeError, ValueError) as e:
            raise MetadataDecodeError(f"Invalid byte list for hash: {e}") from e
    if isinstance(value, (bytes, bytearray)):
        if len(value) != HASH_LENGTH:
            raise MetadataDecodeError(f"hash must be {HASH_LENGTH} bytes, got {len(value)}")
        return bytes(value)
    raise MetadataDecodeError(f"Unsupported hash value: {value!r}")
