"""OAuth handshakes for GitHub and ClickUp"""

import logging
from typing import Optional

import httpx

from credentials import ClickUpCredential, CredentialBundle, CredentialStore, claim_session
from .authorization import AuthorizationURLBuilder, OAuthClientConfig
from .device_flow import DeviceAuthorization, DevicePollResult, finish_login, start_login
from .token_exchange import exchange_clickup_code, exchange_github_code

logger = logging.getLogger(__name__)


class OAuthManager:
    """Drives both providers' handshakes into the pending credential table

    This class orchestrates:
    - Consent URL construction
    - Code exchange (and ClickUp workspace discovery)
    - Writing results to the pending table, keyed by the provider's code
    - The GitHub device flow, which claims its result directly
    """

    def __init__(
        self,
        store: CredentialStore,
        config: OAuthClientConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.store = store
        self.config = config
        self.transport = transport
        self.urls = AuthorizationURLBuilder(config)

    # Redirect flow

    def github_authorize_url(self) -> str:
        return self.urls.github_authorize_url()

    def clickup_authorize_url(self) -> str:
        return self.urls.clickup_authorize_url()

    async def complete_github_callback(self, code: str) -> str:
        """Exchange a GitHub code and park the token under ``pending[code]``

        The exchange happens before the store is touched, so the pending
        merge is a single critical section.

        Returns:
            Front-end URL the browser should be sent to
        """
        access_token = await exchange_github_code(code, self.config, transport=self.transport)
        await self.store.store_pending(code, CredentialBundle(github=access_token))
        logger.info("GitHub credentials stored as pending")
        return self.urls.frontend_return_url("github", code)

    async def complete_clickup_callback(self, code: str) -> str:
        """Exchange a ClickUp code and park the credential under ``pending[code]``

        Returns:
            Front-end URL the browser should be sent to
        """
        credential: ClickUpCredential = await exchange_clickup_code(code, self.config, transport=self.transport)
        await self.store.store_pending(code, CredentialBundle(clickup=credential))
        logger.info("ClickUp credentials stored as pending")
        return self.urls.frontend_return_url("clickup", code)

    # Device flow

    async def start_device_login(self) -> DeviceAuthorization:
        return await start_login(self.config, transport=self.transport)

    async def finish_device_login(self, device_code: str, session_id: str) -> DevicePollResult:
        """Poll GitHub once and, on success, claim the token for ``session_id``

        The token goes through ``pending[device_code]`` and the normal claim
        so the session table keeps a single writer.
        """
        result = await finish_login(device_code, self.config, transport=self.transport)
        if not result.pending:
            await self.store.store_pending(device_code, CredentialBundle(github=result.access_token))
            await claim_session(self.store, device_code, session_id)
        return result


__all__ = [
    "AuthorizationURLBuilder",
    "DeviceAuthorization",
    "DevicePollResult",
    "OAuthClientConfig",
    "OAuthManager",
    "exchange_clickup_code",
    "exchange_github_code",
    "finish_login",
    "start_login",
]
