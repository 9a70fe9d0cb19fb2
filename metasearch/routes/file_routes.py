"""File metadata query routes."""

from typing import List, Literal

from fastapi import APIRouter, Depends, Query, Request

from metasearch.chain_client import ChainConnector
from metasearch.config import Settings
from metasearch.schemas.files import FileMetadataResponse
from metasearch.search_client import SearchClient
from metasearch.services.query_service import FileQueryService

router = APIRouter(tags=["Files"])


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_search_client(settings: Settings = Depends(get_settings)) -> SearchClient:
    return SearchClient(settings.store_url, settings.store_key)


def get_chain_connector() -> ChainConnector:
    return ChainConnector()


def get_query_service(
    settings: Settings = Depends(get_settings),
    search_client: SearchClient = Depends(get_search_client),
    chain_connector: ChainConnector = Depends(get_chain_connector)
) -> FileQueryService:
    return FileQueryService(settings, search_client, chain_connector)


@router.get("/", response_model=List[FileMetadataResponse])
async def get_file_info(
    search: str = Query(..., description="Free-text search term"),
    mainnet: Literal["true", "false"] = Query(..., description="true for mainnet, false for testnet"),
    query_service: FileQueryService = Depends(get_query_service)
):
    """
    Look up file metadata by keyword.

    Parameters:
        - search: Free-text search term
        - mainnet: Selects the mainnet or testnet index (and chain node)

    Returns:
        - List of file metadata records in search ranking order

    Raises:
        - 400: Missing or invalid query parameters
        - 500: Search index or chain unreachable, or a hit has no on-chain record
    """
    records = await query_service.query(search, mainnet == "true")
    return [FileMetadataResponse.from_domain(record) for record in records]
