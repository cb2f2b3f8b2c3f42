"""Configuration loading: TOML file + environment variables."""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path

try:
    import tomllib  # Python 3.11+
except ModuleNotFoundError:
    import tomli as tomllib  # type: ignore[no-redef]

from spl_airdrop.errors import ConfigError
from spl_airdrop.models.config import (
    ENV_RPC_URL,
    ENV_SENDER_SECRET,
    ENV_TOKEN_AMOUNT,
    ENV_TOKEN_MINT,
    AirdropConfig,
    ClaimStoreKind,
)


def load_config(
    config_path: str | Path | None = None,
    env_prefix: str = "AIRDROP_",
    environ: Mapping[str, str] | None = None,
) -> AirdropConfig:
    """Load airdrop configuration from a TOML file and the environment.

    Priority (highest wins):
        1. Environment variables (SENDER_PRIVATE_KEY, AIRDROP_PORT, etc.)
        2. TOML config file
        3. Defaults from AirdropConfig

    The four settings the endpoint documents (SENDER_PRIVATE_KEY,
    TOKEN_MINT_ADDRESS, RPC_URL, TOKEN_AMOUNT) are read without a prefix.
    Missing required values are not an error here; callers check
    ``missing_setting()`` so the message can name the variable.
    """
    env = os.environ if environ is None else environ

    raw: dict = {}
    if config_path is not None:
        p = Path(config_path).expanduser()
        if p.exists():
            with open(p, "rb") as f:
                raw = tomllib.load(f)

    cfg = AirdropConfig()

    # ── Token section ──────────────────────────────────────
    token = raw.get("token", {})
    if v := token.get("mint"):
        cfg.token_mint = str(v)
    if v := token.get("amount"):
        cfg.token_amount = _int_setting("token.amount", v)
    if (v := token.get("decimals")) is not None:
        cfg.token_decimals = _int_setting("token.decimals", v)
    if v := token.get("symbol"):
        cfg.token_symbol = str(v)

    # ── Solana section ─────────────────────────────────────
    solana = raw.get("solana", {})
    if v := solana.get("rpc_url"):
        cfg.rpc_url = str(v)
    if v := solana.get("sender_secret"):
        cfg.sender_secret = str(v)
    if v := solana.get("cluster"):
        cfg.cluster = str(v)
    if v := solana.get("explorer_base"):
        cfg.explorer_base = str(v)
    if v := solana.get("rpc_retries"):
        cfg.rpc_retries = _int_setting("solana.rpc_retries", v)
    if (v := solana.get("retry_backoff")) is not None:
        cfg.retry_backoff = float(v)

    # ── Storage section ────────────────────────────────────
    storage = raw.get("storage", {})
    if v := storage.get("claim_store"):
        cfg.claim_store = _store_kind(v)
    if v := storage.get("db_path"):
        cfg.db_path = str(v)

    # ── Server section ─────────────────────────────────────
    server = raw.get("server", {})
    if v := server.get("host"):
        cfg.host = str(v)
    if v := server.get("port"):
        cfg.port = _int_setting("server.port", v)
    if v := server.get("route"):
        cfg.route = str(v)
    if v := server.get("log_level"):
        cfg.log_level = str(v)

    # ── Environment variable overrides (highest priority) ──
    if secret := env.get(ENV_SENDER_SECRET):
        cfg.sender_secret = secret
    if mint := env.get(ENV_TOKEN_MINT):
        cfg.token_mint = mint
    if rpc := env.get(ENV_RPC_URL):
        cfg.rpc_url = rpc
    if amount := env.get(ENV_TOKEN_AMOUNT):
        cfg.token_amount = _int_setting(ENV_TOKEN_AMOUNT, amount)

    if v := env.get(f"{env_prefix}TOKEN_DECIMALS"):
        cfg.token_decimals = _int_setting(f"{env_prefix}TOKEN_DECIMALS", v)
    if v := env.get(f"{env_prefix}TOKEN_SYMBOL"):
        cfg.token_symbol = v
    if v := env.get(f"{env_prefix}CLUSTER"):
        cfg.cluster = v
    if v := env.get(f"{env_prefix}CLAIM_STORE"):
        cfg.claim_store = _store_kind(v)
    if v := env.get(f"{env_prefix}DB_PATH"):
        cfg.db_path = v
    if v := env.get(f"{env_prefix}HOST"):
        cfg.host = v
    if v := env.get(f"{env_prefix}PORT"):
        cfg.port = _int_setting(f"{env_prefix}PORT", v)

    # Expand ~ in paths
    if cfg.db_path != ":memory:":
        cfg.db_path = str(Path(cfg.db_path).expanduser())

    return cfg


def _int_setting(name: str, value: object) -> int:
    try:
        parsed = int(str(value).strip())
    except ValueError:
        raise ConfigError(f"Invalid {name} value: {value!r}") from None
    if parsed < 0:
        raise ConfigError(f"Invalid {name} value: {value!r}")
    return parsed


def _store_kind(value: object) -> ClaimStoreKind:
    try:
        return ClaimStoreKind(str(value).lower())
    except ValueError:
        raise ConfigError(f"Unknown claim store: {value!r}") from None
