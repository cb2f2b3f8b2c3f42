"""Token account queries against a Solana RPC node."""

from __future__ import annotations

import logging

from solana.rpc.async_api import AsyncClient
from solana.rpc.commitment import Confirmed
from solders.pubkey import Pubkey
from spl.token.instructions import get_associated_token_address

from spl_airdrop.models.records import TokenBalance
from spl_airdrop.solana.retry import RetryPolicy

log = logging.getLogger(__name__)

LAMPORTS_PER_SOL = 1_000_000_000


def token_account_address(owner: Pubkey, mint: Pubkey) -> Pubkey:
    """Deterministic associated token account for (owner, mint)."""
    return get_associated_token_address(owner, mint)


class SolanaTokenQueries:
    """Read-only lookups used to decide whether and how to transfer.

    Transient transport failures are retried per the RetryPolicy; anything
    the node itself rejects is raised to the caller unchanged.
    """

    def __init__(self, client: AsyncClient, retry: RetryPolicy | None = None) -> None:
        self._client = client
        self._retry = retry or RetryPolicy()

    async def get_token_balance(self, token_account: Pubkey) -> TokenBalance:
        resp = await self._retry.run(
            "getTokenAccountBalance",
            lambda: self._client.get_token_account_balance(
                token_account, commitment=Confirmed,
            ),
        )
        value = resp.value
        return TokenBalance(
            amount=int(value.amount),
            decimals=value.decimals,
            ui_amount=value.ui_amount,
        )

    async def account_exists(self, address: Pubkey) -> bool:
        resp = await self._retry.run(
            "getAccountInfo",
            lambda: self._client.get_account_info(address, commitment=Confirmed),
        )
        return resp.value is not None

    async def get_sol_balance(self, address: Pubkey) -> int:
        """Native balance in lamports."""
        resp = await self._retry.run(
            "getBalance",
            lambda: self._client.get_balance(address, commitment=Confirmed),
        )
        return resp.value
