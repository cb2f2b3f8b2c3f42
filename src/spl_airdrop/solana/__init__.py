"""Solana integration components."""

from spl_airdrop.solana.connection import LedgerSession, open_session
from spl_airdrop.solana.keys import decode_secret_key
from spl_airdrop.solana.queries import SolanaTokenQueries, token_account_address
from spl_airdrop.solana.submitter import SplTransferSubmitter

__all__ = [
    "LedgerSession", "open_session",
    "decode_secret_key",
    "SolanaTokenQueries", "token_account_address",
    "SplTransferSubmitter",
]
