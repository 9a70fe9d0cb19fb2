"""Tests for the query orchestration."""

import pytest

from metasearch.exceptions import ChainTransportError, MissingOnchainRecord, StoreConnectionBroken
from metasearch.services.query_service import FileQueryService

from conftest import (
    FakeChainConnector,
    FakeSearchClient,
    make_key,
    make_offchain,
    make_onchain,
)


@pytest.mark.asyncio
async def test_zero_hits_skips_chain(enriched_settings):
    search = FakeSearchClient()
    connector = FakeChainConnector()
    service = FileQueryService(enriched_settings, search, connector)

    assert await service.query('nothing', True) == []
    assert connector.urls == []


@pytest.mark.asyncio
async def test_network_selector(enriched_settings):
    hits = [make_offchain(1)]
    search = FakeSearchClient({'mainnet_files': hits, 'testnet_files': hits})
    connector = FakeChainConnector({make_key(1): make_onchain(1)})
    service = FileQueryService(enriched_settings, search, connector)

    await service.query('invoice', True)
    await service.query('invoice', False)

    assert search.calls == [('mainnet_files', 'invoice'), ('testnet_files', 'invoice')]
    assert connector.urls == ['wss://mainnet.chain.test', 'ws://testnet.chain.test:9944']


@pytest.mark.asyncio
async def test_order_matches_hits_with_one_session(enriched_settings):
    seeds = [5, 2, 9, 1]
    hits = [make_offchain(seed) for seed in seeds]
    connector = FakeChainConnector({make_key(seed): make_onchain(seed) for seed in seeds})
    service = FileQueryService(enriched_settings, FakeSearchClient({'testnet_files': hits}), connector)

    results = await service.query('invoice', False)

    assert [r.id for r in results] == [make_key(seed) for seed in seeds]
    assert [r.size for r in results] == [4096 + seed for seed in seeds]
    assert len(connector.sessions) == 1
    assert connector.sessions[0].fetched == [make_key(seed) for seed in seeds]
    assert connector.sessions[0].closed is True


@pytest.mark.asyncio
async def test_missing_record_aborts_request(enriched_settings):
    """Hit A has a chain record, hit B does not: the whole request fails."""
    hits = [make_offchain(1), make_offchain(2)]
    connector = FakeChainConnector({make_key(1): make_onchain(1, transfer_fee=1)})
    service = FileQueryService(enriched_settings, FakeSearchClient({'testnet_files': hits}), connector)

    with pytest.raises(MissingOnchainRecord):
        await service.query('invoice', False)

    assert connector.sessions[0].closed is True


@pytest.mark.asyncio
async def test_first_failure_stops_lookups(enriched_settings):
    hits = [make_offchain(1), make_offchain(2), make_offchain(3)]
    connector = FakeChainConnector({make_key(1): make_onchain(1), make_key(3): make_onchain(3)})
    service = FileQueryService(enriched_settings, FakeSearchClient({'mainnet_files': hits}), connector)

    with pytest.raises(MissingOnchainRecord):
        await service.query('invoice', True)

    assert connector.sessions[0].fetched == [make_key(1), make_key(2)]


@pytest.mark.asyncio
async def test_search_failure_propagates(enriched_settings):
    search = FakeSearchClient(error=StoreConnectionBroken('down'))
    connector = FakeChainConnector()
    service = FileQueryService(enriched_settings, search, connector)

    with pytest.raises(StoreConnectionBroken):
        await service.query('invoice', True)

    assert connector.urls == []


@pytest.mark.asyncio
async def test_chain_connect_failure_propagates(enriched_settings):
    connector = FakeChainConnector(error=ChainTransportError('refused'))
    service = FileQueryService(
        enriched_settings,
        FakeSearchClient({'mainnet_files': [make_offchain(1)]}),
        connector
    )

    with pytest.raises(ChainTransportError):
        await service.query('invoice', True)


@pytest.mark.asyncio
async def test_plain_variant_returns_indexed_records(plain_settings):
    hits = [
        make_offchain(seed, big_brother=make_key(1), servicer=make_key(2), owner=make_key(3),
                      transfer_fee=bytes(16))
        for seed in (3, 1, 2)
    ]
    connector = FakeChainConnector()
    service = FileQueryService(plain_settings, FakeSearchClient({'mainnet_files': hits}), connector)

    results = await service.query('invoice', True)

    assert [r.id for r in results] == [make_key(3), make_key(1), make_key(2)]
    assert connector.urls == []
