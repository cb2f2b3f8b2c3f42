"""Sender secret key decoding."""

from __future__ import annotations

import json

import base58
from solders.keypair import Keypair

from spl_airdrop.errors import KeyDecodeError


def decode_secret_key(secret: str) -> Keypair:
    """Build the custodial keypair from its textual secret.

    Accepts either the JSON byte array written by ``solana-keygen``
    (``[12, 34, ...]``, 64 values) or the base-58 string most wallets export.
    Raises KeyDecodeError describing what went wrong.
    """
    text = secret.strip()
    try:
        if text.startswith("["):
            values = json.loads(text)
            if not isinstance(values, list):
                raise ValueError("expected a JSON array of byte values")
            raw = bytes(values)
        else:
            raw = base58.b58decode(text)
        return Keypair.from_bytes(raw)
    except Exception as exc:
        raise KeyDecodeError(f"Invalid sender private key format: {exc}") from exc
