"""Record types for ledger reads, transfer results and claim bookkeeping."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class TokenBalance:
    """Balance of a single SPL token account."""

    amount: int  # raw units
    decimals: int
    ui_amount: float | None = None


@dataclass
class TransferResult:
    """Result of submitting the airdrop transaction."""

    success: bool
    signature: str | None = None
    error: str | None = None
    error_kind: str | None = None  # "already_in_use", "blockhash_expired", etc.
    created_account: bool = False


@dataclass
class ClaimRecord:
    """A wallet's claim as persisted in the claim store."""

    wallet_address: str
    status: str = "pending"  # pending | completed | failed
    signature: str | None = None
    amount: int | None = None  # whole tokens
    error: str | None = None
    created_at: str = ""
    updated_at: str = ""


@dataclass
class AirdropResponse:
    """HTTP-level outcome of one airdrop request."""

    status: int
    body: dict[str, Any] | None = None

    @property
    def error(self) -> str | None:
        if self.body is None:
            return None
        return self.body.get("error")
