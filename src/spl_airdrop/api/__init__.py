"""HTTP components - request handler and aiohttp application."""

from spl_airdrop.api.handler import AirdropHandler
from spl_airdrop.api.server import create_app, run_server

__all__ = ["AirdropHandler", "create_app", "run_server"]
