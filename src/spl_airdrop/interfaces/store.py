"""ClaimStore protocol - remembers which wallets have received the airdrop."""

from __future__ import annotations

from typing import Protocol

from spl_airdrop.models.records import ClaimRecord


class ClaimStore(Protocol):
    """Tracks claims per wallet address.

    ``reserve`` is called right before submission and ``confirm`` or
    ``release`` right after it. Whether ``reserve`` is atomic across
    concurrent requests depends on the implementation.
    """

    async def initialize(self) -> None:
        ...

    async def close(self) -> None:
        ...

    async def is_claimed(self, wallet_address: str) -> bool:
        """True if the wallet has a pending or completed claim."""
        ...

    async def reserve(self, wallet_address: str) -> bool:
        """Claim the right to transfer to this wallet. False if already taken."""
        ...

    async def confirm(self, wallet_address: str, signature: str, amount: int) -> None:
        """Record a confirmed transfer."""
        ...

    async def release(self, wallet_address: str, error: str | None = None) -> None:
        """Give up a reservation after a failed transfer."""
        ...

    async def get_claim(self, wallet_address: str) -> ClaimRecord | None:
        ...

    async def list_claims(
        self, status: str | None = None, limit: int = 100
    ) -> list[ClaimRecord]:
        ...
