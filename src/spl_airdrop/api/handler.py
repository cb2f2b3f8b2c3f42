"""Airdrop request handler - validates, checks ledger state, transfers, reports."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from solders.keypair import Keypair
from solders.pubkey import Pubkey

from spl_airdrop.errors import (
    ALREADY_CLAIMED,
    ALREADY_CLAIMED_OR_HAS_BALANCE,
    ALREADY_HAS_TOKENS,
    INSUFFICIENT_TOKEN_BALANCE,
    INTERNAL_ERROR,
    INVALID_WALLET,
    METHOD_NOT_ALLOWED,
    WALLET_REQUIRED,
    AirdropError,
    ConfigError,
    InvalidRequestError,
    LedgerError,
    PreflightRejected,
    is_already_in_use,
)
from spl_airdrop.interfaces.store import ClaimStore
from spl_airdrop.models.config import AirdropConfig
from spl_airdrop.models.records import AirdropResponse
from spl_airdrop.solana.connection import LedgerSession, open_session
from spl_airdrop.solana.explorer import explorer_tx_url
from spl_airdrop.solana.keys import decode_secret_key
from spl_airdrop.solana.queries import token_account_address

log = logging.getLogger(__name__)

ConfigLoader = Callable[[], AirdropConfig]
SessionFactory = Callable[[AirdropConfig, Keypair], LedgerSession]


def _error(status: int, error: str) -> AirdropResponse:
    return AirdropResponse(status=status, body={"error": error})


class AirdropHandler:
    """Runs one airdrop request start to finish.

    Every ledger interaction happens inside a single request; nothing is
    queued. Configuration is resolved per request through ``config_loader``
    so a changed environment takes effect without a restart.
    """

    def __init__(
        self,
        config_loader: ConfigLoader,
        claim_store: ClaimStore,
        session_factory: SessionFactory = open_session,
    ) -> None:
        self._load_config = config_loader
        self._claims = claim_store
        self._open_session = session_factory

    async def handle(self, method: str, payload: Any) -> AirdropResponse:
        """Entry point for every HTTP method hitting the airdrop route."""
        method = method.upper()
        if method == "OPTIONS":
            return AirdropResponse(status=200)
        if method != "POST":
            log.info("Method not allowed: %s", method)
            return _error(405, METHOD_NOT_ALLOWED)

        try:
            return await self._airdrop(payload)
        except AirdropError as exc:
            log.info("Airdrop rejected (%d): %s", exc.status, exc.error)
            return _error(exc.status, exc.error)
        except Exception as exc:
            log.error("Airdrop error: %s", exc, exc_info=True)
            message = str(exc)
            if is_already_in_use(message):
                return _error(400, ALREADY_CLAIMED_OR_HAS_BALANCE)
            return _error(500, message or INTERNAL_ERROR)

    async def _airdrop(self, payload: Any) -> AirdropResponse:
        wallet_address = payload.get("walletAddress") if isinstance(payload, dict) else None
        if isinstance(wallet_address, str):
            wallet_address = wallet_address.strip()
        if not wallet_address:
            raise InvalidRequestError(WALLET_REQUIRED)

        # Cheap bookkeeping check; the reservation below is the real gate
        if isinstance(wallet_address, str) and await self._claims.is_claimed(wallet_address):
            raise PreflightRejected(ALREADY_CLAIMED)

        recipient = _parse_pubkey(wallet_address)
        # Claim store keys are always the canonical base-58 form
        wallet_address = str(recipient)

        cfg = self._load_config()
        if missing := cfg.missing_setting():
            raise ConfigError.missing(missing)
        log.debug(
            "Config: mint=%s rpc=%s amount=%d decimals=%d",
            cfg.token_mint, cfg.rpc_url, cfg.token_amount, cfg.token_decimals,
        )

        keypair = decode_secret_key(cfg.sender_secret)
        try:
            mint = Pubkey.from_string(cfg.token_mint)
        except Exception as exc:
            raise ConfigError(f"Invalid TOKEN_MINT_ADDRESS: {exc}") from exc

        session = self._open_session(cfg, keypair)
        try:
            return await self._transfer(cfg, session, wallet_address, recipient, mint)
        finally:
            await session.close()

    async def _transfer(
        self,
        cfg: AirdropConfig,
        session: LedgerSession,
        wallet_address: str,
        recipient: Pubkey,
        mint: Pubkey,
    ) -> AirdropResponse:
        queries = session.queries
        submitter = session.submitter
        recipient_ata = token_account_address(recipient, mint)

        await self._check_recipient_balance(session, recipient_ata, wallet_address)

        # Sender funds
        sender_ata = token_account_address(submitter.sender, mint)
        try:
            sender_balance = await queries.get_token_balance(sender_ata)
        except Exception as exc:
            log.error("Error checking sender balance: %s", exc)
            raise LedgerError(f"Cannot check sender token balance: {exc}") from exc
        log.info("Sender balance: %d raw units", sender_balance.amount)
        if sender_balance.amount < cfg.raw_amount:
            raise PreflightRejected(INSUFFICIENT_TOKEN_BALANCE)

        # An unreadable account is treated as absent; creation then fails
        # on-chain with "already in use" if it did exist.
        try:
            create_account = not await queries.account_exists(recipient_ata)
        except Exception as exc:
            log.info("Recipient token account lookup failed, will create it: %s", exc)
            create_account = True

        if not await self._claims.reserve(wallet_address):
            raise PreflightRejected(ALREADY_CLAIMED)

        result = await submitter.submit_airdrop(
            mint=mint,
            recipient=recipient,
            raw_amount=cfg.raw_amount,
            decimals=cfg.token_decimals,
            create_recipient_account=create_account,
        )
        if not result.success or not result.signature:
            await self._claims.release(wallet_address, result.error)
            if result.error_kind == "already_in_use" or is_already_in_use(result.error):
                raise PreflightRejected(ALREADY_CLAIMED_OR_HAS_BALANCE)
            raise LedgerError(result.error or INTERNAL_ERROR)

        await self._claims.confirm(wallet_address, result.signature, cfg.token_amount)
        log.info("Airdropped %d %s to %s", cfg.token_amount, cfg.token_symbol, wallet_address)

        return AirdropResponse(
            status=200,
            body={
                "success": True,
                "signature": result.signature,
                "amount": cfg.token_amount,
                "message": f"Successfully airdropped {cfg.token_amount} {cfg.token_symbol} tokens",
                "explorerUrl": explorer_tx_url(result.signature, cfg),
            },
        )

    async def _check_recipient_balance(
        self, session: LedgerSession, recipient_ata: Pubkey, wallet_address: str,
    ) -> None:
        """Advisory: reject wallets that already hold the token.

        A missing token account is the normal case for a first claim, and any
        other failure here is logged and ignored.
        """
        try:
            balance = await session.queries.get_token_balance(recipient_ata)
        except Exception as exc:
            log.info("Recipient has no readable token account yet (%s), proceeding", exc)
            return
        log.info("Recipient %s current balance: %d raw units", wallet_address, balance.amount)
        if balance.amount > 0:
            raise PreflightRejected(ALREADY_HAS_TOKENS)


def _parse_pubkey(value: Any) -> Pubkey:
    if not isinstance(value, str):
        raise InvalidRequestError(INVALID_WALLET)
    try:
        return Pubkey.from_string(value)
    except Exception as exc:
        raise InvalidRequestError(INVALID_WALLET) from exc
