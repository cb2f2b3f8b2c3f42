"""Per-request ledger session over a single RPC client."""

from __future__ import annotations

from dataclasses import dataclass

from solana.rpc.async_api import AsyncClient
from solana.rpc.commitment import Confirmed
from solders.keypair import Keypair

from spl_airdrop.interfaces.queries import TokenQueries
from spl_airdrop.interfaces.submitter import TransferSubmitter
from spl_airdrop.models.config import AirdropConfig
from spl_airdrop.solana.queries import SolanaTokenQueries
from spl_airdrop.solana.retry import RetryPolicy
from spl_airdrop.solana.submitter import SplTransferSubmitter


@dataclass
class LedgerSession:
    """Queries and submitter sharing one connection."""

    queries: TokenQueries
    submitter: TransferSubmitter
    client: AsyncClient | None = None

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        if self.client is not None:
            await self.client.close()
            self.client = None


def open_session(cfg: AirdropConfig, keypair: Keypair) -> LedgerSession:
    """Connect to ``cfg.rpc_url`` at confirmed commitment."""
    client = AsyncClient(cfg.rpc_url, commitment=Confirmed)
    retry = RetryPolicy(attempts=cfg.rpc_retries, backoff=cfg.retry_backoff)
    return LedgerSession(
        queries=SolanaTokenQueries(client, retry),
        submitter=SplTransferSubmitter(client, keypair, retry),
        client=client,
    )
