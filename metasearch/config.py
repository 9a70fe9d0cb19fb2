"""Configuration settings for the metadata query service."""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from common.constants import INDEX_MAINNET, INDEX_TESTNET, SECURE_SCHEMES
from metasearch.exceptions import ConfigurationError


ENV_STORE_KEY = "STORE_KEY"
ENV_STORE_URL = "STORE_URL"
ENV_RPC_MAINNET_URL = "RPC_MAINNET_URL"
ENV_RPC_TESTNET_URL = "RPC_TESTNET_URL"


def is_secure_endpoint(url: str) -> bool:
    """Whether the endpoint URL asks for an encrypted transport."""
    return url.lower().startswith(SECURE_SCHEMES)


@dataclass(frozen=True)
class Settings:
    """
    Process-wide configuration, loaded once at startup and never mutated.

    When both chain endpoints are set the service reconciles every search
    hit with its on-chain record; otherwise hits are returned as indexed.
    """
    store_key: str
    store_url: str
    rpc_mainnet_url: Optional[str] = None
    rpc_testnet_url: Optional[str] = None

    def __post_init__(self):
        if bool(self.rpc_mainnet_url) != bool(self.rpc_testnet_url):
            raise ConfigurationError(
                f"{ENV_RPC_MAINNET_URL} and {ENV_RPC_TESTNET_URL} must be set together"
            )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """
        Build settings from environment variables.

        Raises:
            ConfigurationError: If a required variable is missing
        """
        if environ is None:
            environ = os.environ

        missing = [name for name in (ENV_STORE_KEY, ENV_STORE_URL) if not environ.get(name)]
        if missing:
            raise ConfigurationError(f"Missing required environment variables: {', '.join(missing)}")

        return cls(
            store_key=environ[ENV_STORE_KEY],
            store_url=environ[ENV_STORE_URL],
            rpc_mainnet_url=environ.get(ENV_RPC_MAINNET_URL) or None,
            rpc_testnet_url=environ.get(ENV_RPC_TESTNET_URL) or None,
        )

    @property
    def enrich_with_chain(self) -> bool:
        return bool(self.rpc_mainnet_url and self.rpc_testnet_url)

    def index_for(self, mainnet: bool) -> str:
        return INDEX_MAINNET if mainnet else INDEX_TESTNET

    def rpc_url_for(self, mainnet: bool) -> str:
        if not self.enrich_with_chain:
            raise ConfigurationError("Chain endpoints are not configured")
        return self.rpc_mainnet_url if mainnet else self.rpc_testnet_url

    def __repr__(self) -> str:
        return (
            f"Settings(store_url={self.store_url!r}, store_key=***, "
            f"rpc_mainnet_url={self.rpc_mainnet_url!r}, rpc_testnet_url={self.rpc_testnet_url!r})"
        )
