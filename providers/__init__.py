"""
REST clients for the GitHub and ClickUp APIs.

``ProviderClients`` carries the transport and timeout shared by every client
so the application (and tests) configure outbound HTTP in one place.
"""
from dataclasses import dataclass
from typing import Optional

import httpx

from providers.base_provider import BaseProvider, build_timeout, send_request
from providers.github_provider import GitHubProvider
from providers.clickup_provider import ClickUpProvider

__all__ = [
    'BaseProvider',
    'ClickUpProvider',
    'GitHubProvider',
    'ProviderClients',
    'build_timeout',
    'send_request',
]


@dataclass
class ProviderClients:
    """Factory for per-token provider clients"""

    transport: Optional[httpx.AsyncBaseTransport] = None
    timeout: Optional[httpx.Timeout] = None

    def github(self, access_token: str) -> GitHubProvider:
        return GitHubProvider(access_token, transport=self.transport, timeout=self.timeout)

    def clickup(self, access_token: str) -> ClickUpProvider:
        return ClickUpProvider(access_token, transport=self.transport, timeout=self.timeout)
