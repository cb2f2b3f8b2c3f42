"""TokenQueries protocol - read-only ledger lookups used before a transfer."""

from __future__ import annotations

from typing import Protocol

from solders.pubkey import Pubkey

from spl_airdrop.models.records import TokenBalance


class TokenQueries(Protocol):
    """Reads token balances and account state at confirmed commitment."""

    async def get_token_balance(self, token_account: Pubkey) -> TokenBalance:
        """Balance of an SPL token account. Raises if the account cannot be read."""
        ...

    async def account_exists(self, address: Pubkey) -> bool:
        """Whether any account is stored at ``address``."""
        ...

    async def get_sol_balance(self, address: Pubkey) -> int:
        """Native balance in lamports."""
        ...
