"""Block explorer links for submitted transactions."""

from __future__ import annotations

from spl_airdrop.models.config import AirdropConfig

MAINNET = "mainnet"
TEST_CLUSTERS = ("devnet", "testnet")


def resolve_cluster(cfg: AirdropConfig) -> str:
    """Explorer cluster: explicit setting first, else inferred from the RPC URL."""
    if cfg.cluster:
        return cfg.cluster
    url = cfg.rpc_url.lower()
    for name in TEST_CLUSTERS:
        if name in url:
            return name
    return MAINNET


def explorer_tx_url(signature: str, cfg: AirdropConfig) -> str:
    base = cfg.explorer_base.rstrip("/")
    return f"{base}/tx/{signature}?cluster={resolve_cluster(cfg)}"
