"""Process-local claim tracking.

Entries live only as long as the process. ``reserve`` checks membership
without taking anything, so two concurrent requests for the same wallet can
both pass it; the address is only recorded after a confirmed transfer.
"""

from __future__ import annotations

from datetime import datetime, timezone

from spl_airdrop.models.records import ClaimRecord


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class MemoryClaimStore:
    """In-memory implementation of the ClaimStore protocol."""

    def __init__(self) -> None:
        self._claims: dict[str, ClaimRecord] = {}

    async def initialize(self) -> None:
        pass

    async def close(self) -> None:
        pass

    async def is_claimed(self, wallet_address: str) -> bool:
        return wallet_address in self._claims

    async def reserve(self, wallet_address: str) -> bool:
        return wallet_address not in self._claims

    async def confirm(self, wallet_address: str, signature: str, amount: int) -> None:
        now = _now()
        self._claims[wallet_address] = ClaimRecord(
            wallet_address=wallet_address,
            status="completed",
            signature=signature,
            amount=amount,
            created_at=now,
            updated_at=now,
        )

    async def release(self, wallet_address: str, error: str | None = None) -> None:
        pass

    async def get_claim(self, wallet_address: str) -> ClaimRecord | None:
        return self._claims.get(wallet_address)

    async def list_claims(
        self, status: str | None = None, limit: int = 100
    ) -> list[ClaimRecord]:
        claims = [c for c in self._claims.values() if status is None or c.status == status]
        claims.sort(key=lambda c: c.created_at, reverse=True)
        return claims[:limit]
