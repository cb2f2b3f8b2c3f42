"""Devnet fixtures: live RPC reachability and a real session."""

from __future__ import annotations

import os

import httpx
import pytest

from spl_airdrop.solana.connection import open_session
from tests.conftest import DEVNET_RPC, make_test_config
from tests.factories import TEST_KEYPAIR

RPC_URL = os.environ.get("DEVNET_RPC_URL", DEVNET_RPC)


@pytest.fixture(scope="session")
def devnet_reachable():
    """Skip devnet tests unless the RPC answers getHealth."""
    try:
        r = httpx.post(
            RPC_URL,
            json={"jsonrpc": "2.0", "id": 1, "method": "getHealth"},
            timeout=5,
        )
        if r.status_code == 200:
            return True
        pytest.skip(f"Devnet RPC not available at {RPC_URL}")
    except (httpx.ConnectError, httpx.TimeoutException):
        pytest.skip(f"Devnet RPC not available at {RPC_URL}")


@pytest.fixture
async def devnet_session(devnet_reachable):
    session = open_session(make_test_config(rpc_url=RPC_URL, rpc_retries=3), TEST_KEYPAIR)
    yield session
    await session.close()
