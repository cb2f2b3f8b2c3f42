"""TransferSubmitter protocol - builds and submits the airdrop transaction."""

from __future__ import annotations

from typing import Protocol

from solders.pubkey import Pubkey

from spl_airdrop.models.records import TransferResult


class TransferSubmitter(Protocol):
    """Signs with the custodial key, submits, and waits for confirmation."""

    @property
    def sender(self) -> Pubkey:
        """Public key of the custodial wallet (fee payer and token authority)."""
        ...

    async def submit_airdrop(
        self,
        mint: Pubkey,
        recipient: Pubkey,
        raw_amount: int,
        decimals: int,
        create_recipient_account: bool,
    ) -> TransferResult:
        """Transfer ``raw_amount`` of ``mint`` to the recipient's token account."""
        ...
