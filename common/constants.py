"""Project-wide constants (index names, listening address, chain layout)."""

INDEX_MAINNET: str = "mainnet_files"
INDEX_TESTNET: str = "testnet_files"

SERVICE_HOST: str = "0.0.0.0"
SERVICE_PORT: int = 8686

PUBLIC_KEY_LENGTH: int = 32
HASH_LENGTH: int = 32
FEE_LENGTH: int = 16  # u128, little-endian
FEE_MAX: int = (1 << (FEE_LENGTH * 8)) - 1

SS58_FORMAT: int = 42

CHAIN_STORAGE_MODULE: str = "Files"
CHAIN_STORAGE_FUNCTION: str = "Metadata"

SECURE_SCHEMES = ("wss://", "https://")
