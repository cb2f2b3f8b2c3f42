"""Shared fixtures for spl_airdrop tests."""

from __future__ import annotations

import pytest
from pytest_metadata.plugin import metadata_key

from spl_airdrop.api.handler import AirdropHandler
from spl_airdrop.models.config import AirdropConfig, ClaimStoreKind
from spl_airdrop.storage.memory import MemoryClaimStore
from spl_airdrop.storage.sqlite import SQLiteClaimStore

from tests.factories import TEST_MINT, TEST_SECRET, TEST_SENDER
from tests.mocks import MockQueries, MockSessionFactory, MockSubmitter, RecordingLoader

DEVNET_RPC = "https://api.devnet.solana.com"

TOKEN_AMOUNT = 25_000
TOKEN_DECIMALS = 6


# ── Report metadata ──────────────────────────────────────────────


def pytest_configure(config):
    """Add network info to the HTML report Environment table."""
    meta = config.stash.setdefault(metadata_key, {})
    meta["Network"] = "Solana (mocked ledger)"
    meta["Token Mint"] = TEST_MINT
    meta["Sender Account"] = TEST_SENDER


def make_test_config(**overrides) -> AirdropConfig:
    """Build an AirdropConfig suitable for testing."""
    defaults = dict(
        sender_secret=TEST_SECRET,
        token_mint=TEST_MINT,
        token_amount=TOKEN_AMOUNT,
        token_decimals=TOKEN_DECIMALS,
        token_symbol="DUCK",
        rpc_url=DEVNET_RPC,
        rpc_retries=1,
        retry_backoff=0.0,
        claim_store=ClaimStoreKind.MEMORY,
        db_path=":memory:",
    )
    defaults.update(overrides)
    return AirdropConfig(**defaults)


@pytest.fixture
def test_config():
    """Default AirdropConfig for tests."""
    return make_test_config()


@pytest.fixture
def config_loader(test_config):
    return RecordingLoader(test_config)


@pytest.fixture
def memory_store():
    return MemoryClaimStore()


@pytest.fixture
async def store():
    """Initialized in-memory SQLiteClaimStore."""
    s = SQLiteClaimStore(":memory:")
    await s.initialize()
    yield s
    await s.close()


@pytest.fixture
def mock_queries():
    """Sender funded for plenty of claims, recipients without token accounts."""
    q = MockQueries()
    q.set_balance(TEST_SENDER, 1_000_000 * 10**TOKEN_DECIMALS)
    return q


@pytest.fixture
def mock_submitter():
    return MockSubmitter(succeed=True)


@pytest.fixture
def sessions(mock_queries, mock_submitter):
    return MockSessionFactory(mock_queries, mock_submitter)


@pytest.fixture
def handler(config_loader, memory_store, sessions):
    """AirdropHandler wired to mocked ledger components and the memory store."""
    return AirdropHandler(
        config_loader=config_loader,
        claim_store=memory_store,
        session_factory=sessions,
    )
