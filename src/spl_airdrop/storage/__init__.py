"""Claim store implementations."""

from __future__ import annotations

from spl_airdrop.interfaces.store import ClaimStore
from spl_airdrop.models.config import AirdropConfig, ClaimStoreKind
from spl_airdrop.storage.memory import MemoryClaimStore
from spl_airdrop.storage.sqlite import SQLiteClaimStore


def make_claim_store(cfg: AirdropConfig) -> ClaimStore:
    """Build the claim store selected by ``cfg.claim_store``."""
    if cfg.claim_store == ClaimStoreKind.MEMORY:
        return MemoryClaimStore()
    return SQLiteClaimStore(cfg.db_path)


__all__ = ["MemoryClaimStore", "SQLiteClaimStore", "make_claim_store"]
