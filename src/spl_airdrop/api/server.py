"""aiohttp application exposing the airdrop endpoint."""

from __future__ import annotations

import asyncio
import json
import logging
import signal

from aiohttp import web

from spl_airdrop.api.handler import AirdropHandler, ConfigLoader, SessionFactory
from spl_airdrop.interfaces.store import ClaimStore
from spl_airdrop.models.config import AirdropConfig
from spl_airdrop.solana.connection import open_session
from spl_airdrop.storage import make_claim_store

log = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}

HANDLER_KEY = web.AppKey("airdrop_handler", AirdropHandler)
STORE_KEY = web.AppKey("claim_store", ClaimStore)


async def _read_payload(request: web.Request) -> object:
    """Parsed JSON body, or None when the body is absent or not JSON."""
    if not request.can_read_body:
        return None
    try:
        return json.loads(await request.text())
    except (json.JSONDecodeError, UnicodeDecodeError):
        log.info("Request body is not valid JSON")
        return None


async def airdrop_view(request: web.Request) -> web.Response:
    handler = request.app[HANDLER_KEY]
    payload = await _read_payload(request) if request.method == "POST" else None
    log.info("Airdrop API called: %s %s", request.method, request.path)

    result = await handler.handle(request.method, payload)

    if result.body is None:
        headers = {"Content-Type": "application/json", **CORS_HEADERS}
        return web.Response(status=result.status, headers=headers)
    return web.json_response(result.body, status=result.status, headers=CORS_HEADERS)


def create_app(
    cfg: AirdropConfig,
    config_loader: ConfigLoader | None = None,
    claim_store: ClaimStore | None = None,
    session_factory: SessionFactory = open_session,
) -> web.Application:
    """Build the web application.

    ``cfg`` supplies the route and claim store; request handling reloads
    configuration through ``config_loader`` (defaults to returning ``cfg``).
    """
    store = claim_store or make_claim_store(cfg)
    handler = AirdropHandler(
        config_loader=config_loader or (lambda: cfg),
        claim_store=store,
        session_factory=session_factory,
    )

    app = web.Application()
    app[STORE_KEY] = store
    app[HANDLER_KEY] = handler
    app.router.add_route("*", cfg.route, airdrop_view)

    async def _on_startup(app: web.Application) -> None:
        await app[STORE_KEY].initialize()
        log.info("Claim store ready (%s)", cfg.claim_store.value)

    async def _on_cleanup(app: web.Application) -> None:
        await app[STORE_KEY].close()

    app.on_startup.append(_on_startup)
    app.on_cleanup.append(_on_cleanup)
    return app


async def run_server(cfg: AirdropConfig, config_loader: ConfigLoader | None = None) -> None:
    """Serve until SIGINT/SIGTERM."""
    app = create_app(cfg, config_loader=config_loader)
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, cfg.host, cfg.port)
    await site.start()

    log.info("Airdrop endpoint listening on http://%s:%d%s", cfg.host, cfg.port, cfg.route)
    log.info("  Mint:        %s", cfg.token_mint or "(not set)")
    log.info("  RPC:         %s", cfg.rpc_url or "(not set)")
    log.info("  Amount:      %d %s", cfg.token_amount, cfg.token_symbol)
    log.info("  Claim store: %s", cfg.claim_store.value)

    stop = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop.set)
        except NotImplementedError:
            # Windows doesn't support add_signal_handler
            pass

    try:
        await stop.wait()
    finally:
        log.info("Stop requested")
        await runner.cleanup()
        log.info("Server shut down cleanly")
