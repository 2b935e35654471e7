"""Tools exposed over MCP and the authentication gate in front of them"""

from credentials import CredentialStore
from oauth import OAuthManager
from providers import ProviderClients
from .gate import CLICKUP, GITHUB, AuthenticationGate, AuthenticationPending, AuthRequirement, missing_providers
from .registry import NoArguments, Tool, ToolContext, ToolRegistry
from .results import ToolResult
from .auth_tools import register_auth_tools
from .github import register_github_tools
from .clickup import register_clickup_tools
from .integrations import register_integration_tools


def build_tool_registry(
    store: CredentialStore,
    oauth: OAuthManager,
    providers: ProviderClients,
    login_base_url: str,
) -> ToolRegistry:
    """Create the registry with every tool, each wrapped by the gate

    Args:
        store: Credential store read by the gate
        oauth: OAuth manager (device login, client config)
        providers: Factory for GitHub / ClickUp clients
        login_base_url: Public base URL used in "please log in" messages
    """
    gate = AuthenticationGate(
        store,
        login_urls={
            GITHUB: f"{login_base_url}/github/login",
            CLICKUP: f"{login_base_url}/clickup/login",
        },
    )
    registry = ToolRegistry()
    register_auth_tools(registry, gate, oauth)
    register_github_tools(registry, gate, providers)
    register_clickup_tools(registry, gate, providers, store)
    register_integration_tools(registry, gate, providers)
    return registry


__all__ = [
    "AuthRequirement",
    "AuthenticationGate",
    "AuthenticationPending",
    "NoArguments",
    "Tool",
    "ToolContext",
    "ToolRegistry",
    "ToolResult",
    "build_tool_registry",
    "missing_providers",
]
