"""
FastAPI application factory and default application instance.
"""
import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import settings
from credentials import CredentialStore
from oauth import OAuthClientConfig, OAuthManager
from protocol import ProtocolServer, SessionRouter
from providers import ProviderClients
from tools import build_tool_registry
from .endpoints import claim_router, health_router, mcp_router, oauth_router
from .exception_handlers import register_exception_handlers
from .middleware import log_requests_middleware
from .sweeper import run_sweeper

logger = logging.getLogger(__name__)

INSTRUCTIONS = (
    "Welcome to the GitHub-ClickUp automation assistant!\n\n"
    "To get started, authenticate with the services you need:\n"
    "1. Run `status_autenticacao` to see the login links and your session id.\n"
    "2. Log into GitHub and ClickUp; the front end claims each code for this session.\n"
    "3. Run `clickup_selecionar_workspace` before using the ClickUp tools."
)


def create_app(
    store: Optional[CredentialStore] = None,
    oauth_config: Optional[OAuthClientConfig] = None,
    providers: Optional[ProviderClients] = None,
    sweep_interval: Optional[float] = None,
    session_idle_timeout: Optional[float] = None,
) -> FastAPI:
    """Build the gateway application

    Every component shares the single ``CredentialStore`` passed in (or
    created here); nothing is kept in module globals.

    Args:
        store: Credential store, defaults to a new store with the configured TTL
        oauth_config: OAuth client registration, defaults to settings
        providers: Outbound HTTP configuration (tests inject a MockTransport)
        sweep_interval: Seconds between maintenance sweeps, 0 disables the sweeper
        session_idle_timeout: Idle seconds before a session is closed

    Returns:
        Configured FastAPI application
    """
    store = store or CredentialStore(pending_ttl=settings.PENDING_TTL_SECONDS)
    oauth_config = oauth_config or OAuthClientConfig.from_settings()
    providers = providers or ProviderClients()
    sweep_interval = settings.SWEEP_INTERVAL_SECONDS if sweep_interval is None else sweep_interval
    if session_idle_timeout is None:
        session_idle_timeout = settings.SESSION_IDLE_TIMEOUT_SECONDS

    oauth = OAuthManager(store, oauth_config, transport=providers.transport)
    registry = build_tool_registry(store, oauth, providers, settings.PUBLIC_BASE_URL)

    def server_factory() -> ProtocolServer:
        return ProtocolServer(registry, settings.SERVER_NAME, settings.SERVER_VERSION, INSTRUCTIONS)

    session_router = SessionRouter(server_factory, idle_timeout=session_idle_timeout)
    # Credentials live exactly as long as the session that claimed them
    session_router.on_close(store.discard_session)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        sweeper = None
        if sweep_interval > 0:
            sweeper = asyncio.create_task(run_sweeper(store, session_router, sweep_interval))
        logger.info(f"Gateway ready with {len(registry)} tools (GitHub flow: {oauth_config.github_flow})")

        yield

        if sweeper is not None:
            sweeper.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await sweeper
        await session_router.close_all()
        logger.info("Gateway stopped, all sessions closed")

    app = FastAPI(title="GitHub ClickUp MCP Gateway", version=settings.SERVER_VERSION, lifespan=lifespan)
    app.state.store = store
    app.state.session_router = session_router
    app.state.oauth = oauth
    app.state.registry = registry

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["mcp-session-id"],
    )
    app.middleware("http")(log_requests_middleware)
    register_exception_handlers(app)

    app.include_router(health_router)
    app.include_router(mcp_router)
    app.include_router(oauth_router)
    app.include_router(claim_router)

    logger.debug("FastAPI application initialized with all routers and middleware")
    return app


app = create_app()
