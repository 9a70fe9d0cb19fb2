"""File metadata query orchestration."""

from typing import List

from common.logging_config import get_logger
from metasearch.chain_client import ChainConnector
from metasearch.config import Settings
from metasearch.domain import FileMetadata
from metasearch.search_client import SearchClient
from metasearch.services.reconciler import MetadataReconciler, from_offchain

logger = get_logger(__name__)


class FileQueryService:
    def __init__(
        self,
        settings: Settings,
        search_client: SearchClient,
        chain_connector: ChainConnector
    ):
        self.settings = settings
        self.search_client = search_client
        self.chain_connector = chain_connector

    async def query(self, search: str, mainnet: bool) -> List[FileMetadata]:
        """
        Look up file metadata by keyword.

        Args:
            search: Free-text search term
            mainnet: True for the mainnet index and chain, False for testnet

        Returns:
            Records in the same order as the search hits

        Raises:
            MetadataServiceError: On the first failure; no partial results
        """
        index = self.settings.index_for(mainnet)
        hits = await self.search_client.search(index, search)

        if not self.settings.enrich_with_chain:
            return [from_offchain(hit) for hit in hits]

        if not hits:
            logger.info(f"No hits in {index} for {search!r}, skipping chain lookup")
            return []

        session = await self.chain_connector.connect(self.settings.rpc_url_for(mainnet))
        try:
            reconciler = MetadataReconciler(session)
            results = []
            for hit in hits:
                results.append(await reconciler.reconcile(hit))
        finally:
            await session.close()

        logger.info(f"Reconciled {len(results)} records from {index} for {search!r}")
        return results
