"""Chain client abstraction for fetching authoritative file records from a Substrate node."""

from typing import Any, Callable, Mapping, Optional

from fastapi.concurrency import run_in_threadpool
from substrateinterface import SubstrateInterface
from substrateinterface.exceptions import BlockNotFound, SubstrateRequestException
from substrateinterface.exceptions import ConfigurationError as SubstrateConfigurationError
from websocket import WebSocketException

from common.constants import CHAIN_STORAGE_FUNCTION, CHAIN_STORAGE_MODULE, SS58_FORMAT
from common.keys import PublicKey
from common.logging_config import get_logger
from metasearch.config import is_secure_endpoint
from metasearch.domain import OnchainRecord
from metasearch.exceptions import ChainTransportError, MetadataDecodeError

logger = get_logger(__name__)

CHAIN_ERRORS = (
    SubstrateRequestException,
    BlockNotFound,
    SubstrateConfigurationError,
    WebSocketException,
    OSError,
    ValueError,
)

REQUIRED_FIELDS = ("uploader", "big_brother", "servicer", "owner", "transfer_fee", "size", "hash")


def onchain_record_from_storage(value: Mapping[str, Any]) -> OnchainRecord:
    """
    Extract an OnchainRecord from a decoded storage value.

    Raises:
        MetadataDecodeError: If a required field is absent
    """
    if not isinstance(value, Mapping):
        raise MetadataDecodeError(f"Unexpected on-chain value: {value!r}")

    missing = [name for name in REQUIRED_FIELDS if value.get(name) is None]
    if missing:
        raise MetadataDecodeError(f"On-chain record is missing fields: {', '.join(missing)}")

    return OnchainRecord(
        uploader=value["uploader"],
        big_brother=value["big_brother"],
        servicer=value["servicer"],
        owner=value["owner"],
        attester=value.get("attester"),
        transfer_fee=value["transfer_fee"],
        download_fee=value.get("download_fee"),
        size=value["size"],
        hash=value["hash"],
    )


class ChainSession:
    """
    An open connection to one chain node.

    Lookups always read at the latest finalized block. Calls are blocking
    in the underlying library and run in the thread pool.
    """

    def __init__(
        self,
        substrate: SubstrateInterface,
        url: str,
        module: str = CHAIN_STORAGE_MODULE,
        storage_function: str = CHAIN_STORAGE_FUNCTION
    ):
        self.substrate = substrate
        self.url = url
        self.module = module
        self.storage_function = storage_function

    def _query(self, account_id: str):
        block_hash = self.substrate.get_chain_finalised_head()
        return self.substrate.query(
            module=self.module,
            storage_function=self.storage_function,
            params=[account_id],
            block_hash=block_hash,
        )

    async def fetch_by_key(self, key: PublicKey) -> Optional[OnchainRecord]:
        """
        Fetch the on-chain record stored under a file key.

        Args:
            key: File identity key

        Returns:
            OnchainRecord, or None when the chain holds no record for the key

        Raises:
            ChainTransportError: If the RPC call fails
            MetadataDecodeError: If the stored value lacks required fields
        """
        account_id = key.as_account_id()
        try:
            result = await run_in_threadpool(self._query, account_id)
        except CHAIN_ERRORS as e:
            logger.error(f"Chain query failed for {account_id} on {self.url}: {e}")
            raise ChainTransportError(f"Chain query failed: {e}") from e

        value = getattr(result, "value", result)
        if value is None:
            logger.debug(f"No on-chain record for {account_id}")
            return None

        return onchain_record_from_storage(value)

    async def close(self):
        try:
            await run_in_threadpool(self.substrate.close)
        except CHAIN_ERRORS as e:
            logger.warning(f"Error closing chain session to {self.url}: {e}")


class ChainConnector:
    """
    Opens chain sessions.

    Endpoints with a wss:// or https:// scheme get an encrypted session,
    the rest a plaintext one.
    """

    def __init__(
        self,
        ss58_format: int = SS58_FORMAT,
        substrate_factory: Callable[..., SubstrateInterface] = SubstrateInterface
    ):
        self.ss58_format = ss58_format
        self._substrate_factory = substrate_factory

    def _open(self, url: str) -> SubstrateInterface:
        return self._substrate_factory(url=url, ss58_format=self.ss58_format)

    async def connect(self, url: str) -> ChainSession:
        """
        Establish a session with a chain node.

        Raises:
            ChainTransportError: If the node cannot be reached
        """
        transport = "secure" if is_secure_endpoint(url) else "plaintext"
        try:
            substrate = await run_in_threadpool(self._open, url)
        except CHAIN_ERRORS as e:
            logger.error(f"Failed to open {transport} chain session to {url}: {e}")
            raise ChainTransportError(f"Cannot connect to chain node: {e}") from e

        logger.info(f"Opened {transport} chain session to {url}")
        return ChainSession(substrate, url)
