"""HTTP client for querying file metadata from the Meilisearch index."""

from typing import List, Optional

import httpx
from pydantic import ValidationError

from common.keys import InvalidPublicKey
from common.logging_config import get_logger
from metasearch.domain import OffchainRecord
from metasearch.exceptions import MetadataDecodeError, StoreConnectionBroken
from metasearch.schemas.files import SearchHit

logger = get_logger(__name__)


class SearchClient:
    """
    Meilisearch client for keyword lookups.

    A fresh HTTP client is opened per search; nothing is cached between
    requests.
    """

    def __init__(
        self,
        store_url: str,
        store_key: str,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize search client.

        Args:
            store_url: Base URL of the Meilisearch instance
            store_key: API key sent as a bearer token
            transport: Optional httpx transport (used by tests)
        """
        self.store_url = store_url.rstrip('/')
        self._store_key = store_key
        self._transport = transport

    def _build_client(self) -> httpx.AsyncClient:
        try:
            return httpx.AsyncClient(
                base_url=self.store_url,
                headers={'Authorization': f'Bearer {self._store_key}'},
                transport=self._transport,
            )
        except (httpx.InvalidURL, ValueError, TypeError) as e:
            raise StoreConnectionBroken(f"Cannot create search client for {self.store_url}: {e}") from e

    async def search(self, index: str, query: str) -> List[OffchainRecord]:
        """
        Run a free-text query against an index.

        Args:
            index: Index uid (e.g. 'mainnet_files')
            query: Free-text search term

        Returns:
            Decoded hits in index ranking order

        Raises:
            StoreConnectionBroken: If the index is unreachable, answers with an
                error status, or returns a hit that cannot be decoded
        """
        logger.debug(f"Searching index {index} for {query!r}")

        async with self._build_client() as client:
            try:
                response = await client.post(f'/indexes/{index}/search', json={'q': query})
                response.raise_for_status()
                payload = response.json()
            except httpx.HTTPStatusError as e:
                logger.error(f"Search index {index} returned status {e.response.status_code}")
                raise StoreConnectionBroken(
                    f"Search index returned status {e.response.status_code}"
                ) from e
            except httpx.HTTPError as e:
                logger.error(f"Search index {index} unreachable: {e}")
                raise StoreConnectionBroken(f"Search index unreachable: {e}") from e
            except ValueError as e:
                raise StoreConnectionBroken(f"Search index returned invalid JSON: {e}") from e

        hits = payload.get('hits') if isinstance(payload, dict) else None
        if not isinstance(hits, list):
            raise StoreConnectionBroken("Search response has no hit list")

        records = []
        for position, hit in enumerate(hits):
            try:
                records.append(SearchHit.model_validate(hit).to_domain())
            except (ValidationError, InvalidPublicKey, MetadataDecodeError) as e:
                logger.error(f"Undecodable hit at position {position} in index {index}: {e}")
                raise StoreConnectionBroken(f"Undecodable search hit at position {position}") from e

        logger.info(f"Search on {index} returned {len(records)} hits")
        return records
