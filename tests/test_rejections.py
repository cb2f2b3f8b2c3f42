"""Client-side rejections: bad input, prior claims, insufficient funds."""

from __future__ import annotations

import pytest

from spl_airdrop.errors import (
    ALREADY_CLAIMED,
    ALREADY_HAS_TOKENS,
    INSUFFICIENT_TOKEN_BALANCE,
    INVALID_WALLET,
    METHOD_NOT_ALLOWED,
    WALLET_REQUIRED,
)
from tests.conftest import TOKEN_AMOUNT, TOKEN_DECIMALS
from tests.factories import TEST_SENDER, make_request, make_wallet


# ── Method ────────────────────────────────────────────────────────


@pytest.mark.parametrize("method", ["GET", "PUT", "DELETE", "PATCH"])
async def test_reject_non_post_method(handler, config_loader, method):
    result = await handler.handle(method, make_request())

    assert result.status == 405
    assert result.error == METHOD_NOT_ALLOWED
    assert config_loader.calls == 0


# ── Missing / malformed address ───────────────────────────────────


@pytest.mark.parametrize("payload", [None, {}, {"walletAddress": ""}, {"wallet": "x"}, ["x"]])
async def test_reject_missing_wallet(handler, config_loader, sessions, payload):
    """No walletAddress → 400 before configuration or ledger are touched."""
    result = await handler.handle("POST", payload)

    assert result.status == 400
    assert result.error == WALLET_REQUIRED
    assert config_loader.calls == 0
    assert sessions.opened == []


@pytest.mark.parametrize(
    "address",
    [
        "not-a-wallet",
        "0OIl0OIl0OIl0OIl0OIl0OIl0OIl0OIl",  # characters outside base-58
        "11111111111111111111111111111111111111111111111111",  # too long
        "3Kz9",  # too short
        12345,
    ],
)
async def test_reject_malformed_wallet(handler, sessions, mock_queries, mock_submitter, address):
    """Malformed address → 400, no balance or transfer calls."""
    result = await handler.handle("POST", {"walletAddress": address})

    assert result.status == 400
    assert result.error == INVALID_WALLET
    assert sessions.opened == []
    assert mock_queries.balance_calls == []
    assert mock_submitter.transfer_calls == []


# ── Already claimed / already holds tokens ────────────────────────


async def test_reject_already_claimed_in_store(handler, memory_store, mock_submitter, config_loader):
    """Wallet recorded in the claim store → already_claimed, nothing else runs."""
    wallet = make_wallet(5)
    await memory_store.confirm(wallet, "prior_sig", TOKEN_AMOUNT)

    result = await handler.handle("POST", make_request(wallet))

    assert result.status == 400
    assert result.error == ALREADY_CLAIMED
    assert config_loader.calls == 0
    assert mock_submitter.transfer_calls == []


async def test_second_request_rejected_after_success(handler, mock_submitter):
    wallet = make_wallet(6)

    first = await handler.handle("POST", make_request(wallet))
    second = await handler.handle("POST", make_request(wallet))

    assert first.status == 200
    assert second.status == 400
    assert second.error == ALREADY_CLAIMED
    assert len(mock_submitter.transfer_calls) == 1


async def test_reject_wallet_with_token_balance(handler, mock_queries, mock_submitter):
    """Recipient already holds the token on-chain → already_has_tokens."""
    wallet = make_wallet(7)
    mock_queries.set_balance(wallet, 1)

    result = await handler.handle("POST", make_request(wallet))

    assert result.status == 400
    assert result.error == ALREADY_HAS_TOKENS
    assert mock_submitter.transfer_calls == []


# ── Sender funds ──────────────────────────────────────────────────


async def test_reject_insufficient_sender_balance(handler, mock_queries, mock_submitter):
    """Sender holds less than one claim's worth → insufficient_token_balance."""
    mock_queries.set_balance(TEST_SENDER, TOKEN_AMOUNT * 10**TOKEN_DECIMALS - 1)

    result = await handler.handle("POST", make_request(make_wallet(8)))

    assert result.status == 400
    assert result.error == INSUFFICIENT_TOKEN_BALANCE
    assert mock_submitter.transfer_calls == []


async def test_exact_sender_balance_is_enough(handler, mock_queries):
    mock_queries.set_balance(TEST_SENDER, TOKEN_AMOUNT * 10**TOKEN_DECIMALS)

    result = await handler.handle("POST", make_request(make_wallet(9)))

    assert result.status == 200


# ── Address canonical form ────────────────────────────────────────


@pytest.mark.parametrize("padding", [" {} ", "\t{}\n", "{}  "])
async def test_padded_address_matches_prior_claim(handler, mock_submitter, padding):
    """Surrounding whitespace does not make a claimed wallet look new."""
    wallet = make_wallet(10)
    first = await handler.handle("POST", make_request(wallet))

    second = await handler.handle("POST", make_request(padding.format(wallet)))

    assert first.status == 200
    assert second.status == 400
    assert second.error == ALREADY_CLAIMED
    assert len(mock_submitter.transfer_calls) == 1


async def test_padded_first_claim_recorded_canonically(handler, memory_store):
    wallet = make_wallet(11)

    result = await handler.handle("POST", make_request(f"  {wallet}  "))

    assert result.status == 200
    assert await memory_store.is_claimed(wallet)
    assert await memory_store.get_claim(f"  {wallet}  ") is None


async def test_whitespace_only_address(handler, config_loader):
    result = await handler.handle("POST", {"walletAddress": "   "})

    assert result.status == 400
    assert result.error == WALLET_REQUIRED
    assert config_loader.calls == 0
