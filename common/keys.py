"""Public key type shared by the search index and the chain."""

from dataclasses import dataclass

from substrateinterface.utils.ss58 import ss58_decode, ss58_encode

from common.constants import PUBLIC_KEY_LENGTH, SS58_FORMAT


class InvalidPublicKey(ValueError):
    """
    Raised when a value cannot be reconstructed into a public key.
    """
    pass


@dataclass(frozen=True)
class PublicKey:
    """
    A 32-byte public key.

    The same bytes identify a file in the search index and the matching
    account on chain, so conversion between the two is an identity on the
    raw bytes.
    """
    raw: bytes

    def __post_init__(self):
        if not isinstance(self.raw, (bytes, bytearray)):
            raise InvalidPublicKey(f"Public key must be bytes, got {type(self.raw).__name__}")
        if len(self.raw) != PUBLIC_KEY_LENGTH:
            raise InvalidPublicKey(
                f"Public key must be {PUBLIC_KEY_LENGTH} bytes, got {len(self.raw)}"
            )
        object.__setattr__(self, "raw", bytes(self.raw))

    @classmethod
    def from_hex(cls, value: str) -> "PublicKey":
        hex_str = value[2:] if value.startswith(("0x", "0X")) else value
        try:
            return cls(bytes.fromhex(hex_str))
        except ValueError as e:
            raise InvalidPublicKey(f"Invalid hex public key {value!r}: {e}") from e

    @classmethod
    def from_ss58(cls, address: str) -> "PublicKey":
        try:
            decoded = ss58_decode(address)
        except ValueError as e:
            raise InvalidPublicKey(f"Invalid SS58 address {address!r}: {e}") from e
        return cls.from_hex(decoded)

    @classmethod
    def parse(cls, value) -> "PublicKey":
        """
        Reconstruct a public key from any of its stored forms.

        Args:
            value: PublicKey, raw bytes, hex string (with or without 0x) or
                   SS58 address

        Returns:
            PublicKey instance

        Raises:
            InvalidPublicKey: If the value does not describe a 32-byte key
        """
        if isinstance(value, PublicKey):
            return value
        if isinstance(value, (bytes, bytearray)):
            return cls(bytes(value))
        if not isinstance(value, str):
            raise InvalidPublicKey(f"Unsupported public key value: {value!r}")

        value = value.strip()
        if value.startswith(("0x", "0X")) or len(value) == PUBLIC_KEY_LENGTH * 2:
            return cls.from_hex(value)
        return cls.from_ss58(value)

    def to_ss58(self, ss58_format: int = SS58_FORMAT) -> str:
        return ss58_encode(self.raw, ss58_format=ss58_format)

    def to_hex(self) -> str:
        return "0x" + self.raw.hex()

    def as_account_id(self) -> str:
        """Render the key in the account-id form used for storage lookups."""
        return self.to_ss58()

    def __str__(self) -> str:
        return self.to_ss58()
