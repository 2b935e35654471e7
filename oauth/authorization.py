"""OAuth authorization URL construction for GitHub and ClickUp"""

from dataclasses import dataclass
from urllib.parse import urlencode

import settings


@dataclass(frozen=True)
class OAuthClientConfig:
    """Static OAuth client registration for both providers

    Attributes:
        github_client_id: GitHub OAuth App client id
        github_client_secret: GitHub OAuth App client secret
        clickup_client_id: ClickUp OAuth app client id
        clickup_client_secret: ClickUp OAuth app client secret
        github_callback_url: Fixed redirect URI registered with GitHub
        clickup_callback_url: Fixed redirect URI registered with ClickUp
        frontend_url: Where the browser is sent with the code after a callback
        github_flow: "redirect" or "device"
    """
    github_client_id: str = ""
    github_client_secret: str = ""
    clickup_client_id: str = ""
    clickup_client_secret: str = ""
    github_callback_url: str = ""
    clickup_callback_url: str = ""
    frontend_url: str = "http://localhost:5173"
    github_flow: str = "redirect"

    @classmethod
    def from_settings(cls) -> "OAuthClientConfig":
        return cls(
            github_client_id=settings.GITHUB_CLIENT_ID,
            github_client_secret=settings.GITHUB_CLIENT_SECRET,
            clickup_client_id=settings.CLICKUP_CLIENT_ID,
            clickup_client_secret=settings.CLICKUP_CLIENT_SECRET,
            github_callback_url=settings.GITHUB_CALLBACK_URL,
            clickup_callback_url=settings.CLICKUP_CALLBACK_URL,
            frontend_url=settings.FRONTEND_URL,
            github_flow=settings.GITHUB_AUTH_FLOW,
        )

    @property
    def github_uses_device_flow(self) -> bool:
        return self.github_flow == "device"


class AuthorizationURLBuilder:
    """Builds provider consent URLs and front-end return URLs"""

    def __init__(self, config: OAuthClientConfig):
        self.config = config

    def github_authorize_url(self) -> str:
        params = {
            "client_id": self.config.github_client_id,
            "redirect_uri": self.config.github_callback_url,
            "scope": settings.GITHUB_SCOPES,
        }
        return f"{settings.GITHUB_AUTHORIZE_URL}?{urlencode(params)}"

    def clickup_authorize_url(self) -> str:
        params = {
            "client_id": self.config.clickup_client_id,
            "redirect_uri": self.config.clickup_callback_url,
        }
        return f"{settings.CLICKUP_AUTHORIZE_URL}?{urlencode(params)}"

    def frontend_return_url(self, provider: str, code: str) -> str:
        """Front-end URL carrying ``code`` as ``?<provider>_auth_code=``"""
        return f"{self.config.frontend_url}/?{urlencode({f'{provider}_auth_code': code})}"
