"""Error taxonomy surfaced to airdrop callers.

Each error carries the HTTP status and the public ``error`` string that goes
into the JSON body. Machine-checkable codes are module constants; other
errors carry a human-readable message.
"""

from __future__ import annotations

ALREADY_CLAIMED = "already_claimed"
ALREADY_HAS_TOKENS = "already_has_tokens"
INSUFFICIENT_TOKEN_BALANCE = "insufficient_token_balance"
ALREADY_CLAIMED_OR_HAS_BALANCE = "already_claimed_or_has_balance"

METHOD_NOT_ALLOWED = "Method not allowed"
WALLET_REQUIRED = "Wallet address is required"
INVALID_WALLET = "Invalid wallet address format"
INTERNAL_ERROR = "Internal server error during airdrop"

# Substring the ledger reports when an account being created already exists
ALREADY_IN_USE = "already in use"


class AirdropError(Exception):
    """Base class for every failure that ends an airdrop request."""

    status = 500

    def __init__(self, error: str) -> None:
        super().__init__(error)
        self.error = error


class InvalidRequestError(AirdropError):
    """Malformed or missing request input."""

    status = 400


class ConfigError(AirdropError):
    """A required setting is missing or unusable."""

    status = 500

    @classmethod
    def missing(cls, name: str) -> ConfigError:
        return cls(f"Missing {name} environment variable")


class KeyDecodeError(AirdropError):
    """The sender secret could not be turned into a keypair."""

    status = 500


class PreflightRejected(AirdropError):
    """On-chain or bookkeeping state rules the airdrop out before submission."""

    status = 400


class LedgerError(AirdropError):
    """A ledger read or the submission itself failed."""

    status = 500


def is_already_in_use(message: str | None) -> bool:
    """True when a ledger error says an account being created already exists."""
    return bool(message) and ALREADY_IN_USE in message
