"""SPL transfer submitter - builds, signs and confirms the airdrop transaction."""

from __future__ import annotations

import logging

from solana.rpc.async_api import AsyncClient
from solana.rpc.commitment import Confirmed
from solana.rpc.core import TransactionExpiredBlockheightExceededError, UnconfirmedTxError
from solana.rpc.types import TxOpts
from solders.instruction import Instruction
from solders.keypair import Keypair
from solders.message import Message
from solders.pubkey import Pubkey
from solders.transaction import Transaction
from spl.token.constants import TOKEN_PROGRAM_ID
from spl.token.instructions import (
    TransferCheckedParams,
    create_associated_token_account,
    transfer_checked,
)

from spl_airdrop.errors import is_already_in_use
from spl_airdrop.models.records import TransferResult
from spl_airdrop.solana.queries import token_account_address
from spl_airdrop.solana.retry import RetryPolicy

log = logging.getLogger(__name__)


def _classify_error(exc: Exception) -> str:
    """Try to extract a meaningful error classification from a ledger error."""
    msg = str(exc)
    if is_already_in_use(msg):
        return "already_in_use"
    if isinstance(exc, TransactionExpiredBlockheightExceededError) or "Blockhash not found" in msg:
        return "blockhash_expired"
    if isinstance(exc, UnconfirmedTxError):
        return "unconfirmed"
    if "insufficient funds" in msg or "insufficient lamports" in msg:
        return "insufficient_funds"
    return "unknown"


def build_airdrop_instructions(
    sender: Pubkey,
    mint: Pubkey,
    recipient: Pubkey,
    raw_amount: int,
    decimals: int,
    create_recipient_account: bool,
) -> list[Instruction]:
    """Optional ATA creation (paid by the sender) followed by transfer_checked."""
    source = token_account_address(sender, mint)
    dest = token_account_address(recipient, mint)

    instructions = []
    if create_recipient_account:
        instructions.append(
            create_associated_token_account(payer=sender, owner=recipient, mint=mint)
        )
    instructions.append(
        transfer_checked(
            TransferCheckedParams(
                program_id=TOKEN_PROGRAM_ID,
                source=source,
                mint=mint,
                dest=dest,
                owner=sender,
                amount=raw_amount,
                decimals=decimals,
            )
        )
    )
    return instructions


class SplTransferSubmitter:
    """Submits the airdrop as a single legacy transaction.

    The blockhash fetch is retried on transient failures. The send itself is
    attempted once: a resend after an ambiguous failure could land twice.
    """

    def __init__(
        self,
        client: AsyncClient,
        keypair: Keypair,
        retry: RetryPolicy | None = None,
    ) -> None:
        self._client = client
        self._keypair = keypair
        self._retry = retry or RetryPolicy()

    @property
    def sender(self) -> Pubkey:
        return self._keypair.pubkey()

    async def submit_airdrop(
        self,
        mint: Pubkey,
        recipient: Pubkey,
        raw_amount: int,
        decimals: int,
        create_recipient_account: bool,
    ) -> TransferResult:
        """Build, sign, and submit the transfer, waiting for confirmation."""
        instructions = build_airdrop_instructions(
            self.sender, mint, recipient, raw_amount, decimals, create_recipient_account,
        )
        log.info(
            "Submitting airdrop to %s (%d raw units, create_account=%s)",
            recipient, raw_amount, create_recipient_account,
        )

        try:
            latest = await self._retry.run(
                "getLatestBlockhash",
                lambda: self._client.get_latest_blockhash(commitment=Confirmed),
            )
            blockhash = latest.value.blockhash
            message = Message.new_with_blockhash(instructions, self.sender, blockhash)
            tx = Transaction([self._keypair], message, blockhash)

            resp = await self._client.send_transaction(
                tx,
                opts=TxOpts(
                    skip_confirmation=False,
                    skip_preflight=False,
                    preflight_commitment=Confirmed,
                    last_valid_block_height=latest.value.last_valid_block_height,
                ),
            )
            signature = str(resp.value)
            log.info("Airdrop to %s confirmed (sig=%s)", recipient, signature[:16])
            return TransferResult(
                success=True,
                signature=signature,
                created_account=create_recipient_account,
            )

        except Exception as exc:
            error_kind = _classify_error(exc)
            log.error("Airdrop to %s failed: %s (%s)", recipient, error_kind, exc)
            return TransferResult(
                success=False,
                error=str(exc),
                error_kind=error_kind,
            )
