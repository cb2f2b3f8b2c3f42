"""Configuration models for the airdrop service."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

# Environment variable names for the settings every request needs
ENV_SENDER_SECRET = "SENDER_PRIVATE_KEY"
ENV_TOKEN_MINT = "TOKEN_MINT_ADDRESS"
ENV_RPC_URL = "RPC_URL"
ENV_TOKEN_AMOUNT = "TOKEN_AMOUNT"

DEFAULT_TOKEN_AMOUNT = 25_000


class ClaimStoreKind(str, Enum):
    """Backend used to remember which wallets already claimed."""

    MEMORY = "memory"  # Process-local set, lost on restart
    SQLITE = "sqlite"  # Durable ledger with atomic reservation


@dataclass
class AirdropConfig:
    """Complete airdrop service configuration."""

    # Sender / token
    sender_secret: str = ""  # loaded from env var SENDER_PRIVATE_KEY
    token_mint: str = ""
    token_amount: int = DEFAULT_TOKEN_AMOUNT  # whole tokens per claim
    token_decimals: int = 6
    token_symbol: str = "DUCK"

    # Solana
    rpc_url: str = ""
    cluster: str = ""  # explorer cluster; inferred from rpc_url when empty
    explorer_base: str = "https://solscan.io"
    rpc_retries: int = 3  # attempts per read, transient failures only
    retry_backoff: float = 0.5  # seconds, multiplied by the attempt number

    # Storage
    claim_store: ClaimStoreKind = ClaimStoreKind.SQLITE
    db_path: str = "~/.spl_airdrop/claims.db"

    # Server
    host: str = "0.0.0.0"
    port: int = 8080
    route: str = "/api/airdrop"
    log_level: str = "info"

    @property
    def raw_amount(self) -> int:
        """Transfer amount in the mint's smallest unit."""
        return self.token_amount * 10 ** self.token_decimals

    def missing_setting(self) -> str | None:
        """Name of the first required environment variable without a value."""
        required = (
            (ENV_SENDER_SECRET, self.sender_secret),
            (ENV_TOKEN_MINT, self.token_mint),
            (ENV_RPC_URL, self.rpc_url),
        )
        for name, value in required:
            if not value:
                return name
        return None
