"""Configuration loading from TOML and the environment."""

from __future__ import annotations

import pytest

from spl_airdrop.config import load_config
from spl_airdrop.errors import ConfigError
from spl_airdrop.models.config import DEFAULT_TOKEN_AMOUNT, ClaimStoreKind
from tests.conftest import DEVNET_RPC
from tests.factories import TEST_MINT, TEST_SECRET


ENV = {
    "SENDER_PRIVATE_KEY": TEST_SECRET,
    "TOKEN_MINT_ADDRESS": TEST_MINT,
    "RPC_URL": DEVNET_RPC,
}


def test_defaults_from_environment():
    cfg = load_config(environ=ENV)

    assert cfg.sender_secret == TEST_SECRET
    assert cfg.token_mint == TEST_MINT
    assert cfg.rpc_url == DEVNET_RPC
    assert cfg.token_amount == DEFAULT_TOKEN_AMOUNT == 25_000
    assert cfg.token_decimals == 6
    assert cfg.raw_amount == 25_000 * 10**6
    assert cfg.claim_store == ClaimStoreKind.SQLITE
    assert cfg.missing_setting() is None


def test_empty_environment_reports_first_missing():
    cfg = load_config(environ={})

    assert cfg.missing_setting() == "SENDER_PRIVATE_KEY"
    cfg.sender_secret = TEST_SECRET
    assert cfg.missing_setting() == "TOKEN_MINT_ADDRESS"
    cfg.token_mint = TEST_MINT
    assert cfg.missing_setting() == "RPC_URL"


def test_token_amount_override():
    cfg = load_config(environ={**ENV, "TOKEN_AMOUNT": "100"})

    assert cfg.token_amount == 100
    assert cfg.raw_amount == 100 * 10**6


@pytest.mark.parametrize("value", ["lots", "-5", "1.5"])
def test_invalid_token_amount(value):
    with pytest.raises(ConfigError, match="TOKEN_AMOUNT"):
        load_config(environ={**ENV, "TOKEN_AMOUNT": value})


def test_toml_file(tmp_path):
    path = tmp_path / "airdrop.toml"
    path.write_text(
        """
[token]
mint = "MintFromFile"
amount = 500
decimals = 9
symbol = "QUACK"

[solana]
rpc_url = "https://api.testnet.solana.com"
cluster = "custom"

[storage]
claim_store = "memory"
db_path = "~/claims.db"

[server]
host = "127.0.0.1"
port = 9000
route = "/airdrop"
"""
    )

    cfg = load_config(path, environ={})

    assert cfg.token_mint == "MintFromFile"
    assert cfg.token_amount == 500
    assert cfg.token_decimals == 9
    assert cfg.token_symbol == "QUACK"
    assert cfg.rpc_url == "https://api.testnet.solana.com"
    assert cfg.cluster == "custom"
    assert cfg.claim_store == ClaimStoreKind.MEMORY
    assert not cfg.db_path.startswith("~")
    assert (cfg.host, cfg.port, cfg.route) == ("127.0.0.1", 9000, "/airdrop")


def test_environment_beats_file(tmp_path):
    path = tmp_path / "airdrop.toml"
    path.write_text('[token]\nmint = "MintFromFile"\namount = 500\n')

    cfg = load_config(
        path,
        environ={**ENV, "TOKEN_AMOUNT": "7", "AIRDROP_CLAIM_STORE": "memory", "AIRDROP_PORT": "8181"},
    )

    assert cfg.token_mint == TEST_MINT
    assert cfg.token_amount == 7
    assert cfg.claim_store == ClaimStoreKind.MEMORY
    assert cfg.port == 8181


def test_missing_file_uses_defaults(tmp_path):
    cfg = load_config(tmp_path / "absent.toml", environ=ENV)
    assert cfg.token_amount == 25_000


def test_unknown_claim_store():
    with pytest.raises(ConfigError, match="claim store"):
        load_config(environ={**ENV, "AIRDROP_CLAIM_STORE": "redis"})


def test_memory_db_path_untouched():
    cfg = load_config(environ={**ENV, "AIRDROP_DB_PATH": ":memory:"})
    assert cfg.db_path == ":memory:"
