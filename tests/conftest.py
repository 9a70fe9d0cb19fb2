"""Shared pytest fixtures for all tests."""

from datetime import datetime, timezone

import pytest

from common.keys import PublicKey
from metasearch.config import Settings
from metasearch.domain import OffchainRecord, OnchainRecord


def make_key(seed: int) -> PublicKey:
    """Deterministic 32-byte key for tests."""
    return PublicKey(bytes([seed]) * 32)


def make_offchain(seed: int, **overrides) -> OffchainRecord:
    fields = dict(
        id=make_key(seed),
        filename=f"invoice-{seed}.pdf",
        content_type="application/pdf",
        uploaded_at=datetime(2024, 3, 1, 12, 0, seed, tzinfo=timezone.utc),
        download_counter=seed * 10,
        descriptions=f"Invoice number {seed}",
        size=1,
        hash=bytes(32),
        uploader=make_key(200),
    )
    fields.update(overrides)
    return OffchainRecord(**fields)


def make_onchain(seed: int, **overrides) -> OnchainRecord:
    fields = dict(
        uploader=make_key(seed + 100).to_ss58(),
        big_brother=make_key(seed + 101).to_ss58(),
        servicer=make_key(seed + 102).to_ss58(),
        owner=make_key(seed + 103).to_ss58(),
        attester=None,
        transfer_fee=1,
        download_fee=None,
        size=4096 + seed,
        hash="0x" + bytes([seed]).hex() * 32,
    )
    fields.update(overrides)
    return OnchainRecord(**fields)


def make_hit(seed: int, **overrides) -> dict:
    """A search-index document shaped like the stored JSON."""
    hit = {
        "id": make_key(seed).to_ss58(),
        "filename": f"invoice-{seed}.pdf",
        "content_type": "application/pdf",
        "uploaded_at": f"2024-03-01T12:00:{seed:02d}Z",
        "download_counter": seed * 10,
        "descriptions": f"Invoice number {seed}",
    }
    hit.update(overrides)
    return hit


def make_full_hit(seed: int, **overrides) -> dict:
    """A search-index document that also mirrors every chain field."""
    hit = make_hit(
        seed,
        uploader=make_key(seed + 100).to_ss58(),
        big_brother=make_key(seed + 101).to_ss58(),
        servicer=make_key(seed + 102).to_ss58(),
        owner=make_key(seed + 103).to_ss58(),
        transfer_fee=(5).to_bytes(16, "little").hex(),
        download_fee=(7).to_bytes(16, "little").hex(),
        size=512,
        hash=bytes([seed]).hex() * 32,
    )
    hit.update(overrides)
    return hit


class FakeSearchClient:
    """In-memory stand-in for SearchClient keyed by index name."""

    def __init__(self, hits_by_index=None, error=None):
        self.hits_by_index = hits_by_index or {}
        self.error = error
        self.calls = []

    async def search(self, index, query):
        self.calls.append((index, query))
        if self.error is not None:
            raise self.error
        return list(self.hits_by_index.get(index, []))


class FakeChainSession:
    """Chain session backed by a dict of PublicKey -> OnchainRecord."""

    def __init__(self, records, error=None):
        self.records = records
        self.error = error
        self.fetched = []
        self.closed = False

    async def fetch_by_key(self, key):
        self.fetched.append(key)
        if self.error is not None:
            raise self.error
        return self.records.get(key)

    async def close(self):
        self.closed = True


class FakeChainConnector:
    """Records every session it opens."""

    def __init__(self, records=None, error=None, fetch_error=None):
        self.records = records or {}
        self.error = error
        self.fetch_error = fetch_error
        self.urls = []
        self.sessions = []

    async def connect(self, url):
        self.urls.append(url)
        if self.error is not None:
            raise self.error
        session = FakeChainSession(self.records, error=self.fetch_error)
        self.sessions.append(session)
        return session


@pytest.fixture
def plain_settings():
    """Settings without chain endpoints."""
    return Settings(store_key="test-store-key", store_url="http://search.test")


@pytest.fixture
def enriched_settings():
    """Settings with both chain endpoints configured."""
    return Settings(
        store_key="test-store-key",
        store_url="http://search.test",
        rpc_mainnet_url="wss://mainnet.chain.test",
        rpc_testnet_url="ws://testnet.chain.test:9944",
    )
