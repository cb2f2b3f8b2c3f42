"""Data models for the spl_airdrop service."""

from spl_airdrop.models.config import AirdropConfig, ClaimStoreKind
from spl_airdrop.models.records import (
    AirdropResponse,
    ClaimRecord,
    TokenBalance,
    TransferResult,
)

__all__ = [
    "AirdropConfig", "ClaimStoreKind",
    "AirdropResponse", "ClaimRecord", "TokenBalance", "TransferResult",
]
