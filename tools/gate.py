"""Authentication gate applied to every tool handler"""

import enum
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, List, Optional

from pydantic import BaseModel

from credentials import AuthState, CredentialBundle, CredentialStore
from errors import InternalError
from .registry import ToolContext, ToolHandler
from .results import ToolResult

logger = logging.getLogger(__name__)

GITHUB = "GitHub"
CLICKUP = "ClickUp"


class AuthRequirement(str, enum.Enum):
    """Credentials a tool needs before it may run"""

    NONE = "none"
    GITHUB = "github"
    CLICKUP = "clickup"
    BOTH = "both"

    @property
    def needs_github(self) -> bool:
        return self in (AuthRequirement.GITHUB, AuthRequirement.BOTH)

    @property
    def needs_clickup(self) -> bool:
        return self in (AuthRequirement.CLICKUP, AuthRequirement.BOTH)


@dataclass(frozen=True)
class AuthenticationPending:
    """Gate outcome naming the providers the session still has to log into

    Not an error: the client is expected to finish the login and retry.
    """
    missing: List[str]
    login_urls: Dict[str, str]

    def to_result(self) -> ToolResult:
        lines = [f"Authentication pending for: {', '.join(self.missing)}. Please log in."]
        for provider in self.missing:
            url = self.login_urls.get(provider)
            if url:
                lines.append(f"- {provider}: {url}")
        return ToolResult(text="\n".join(lines))


def missing_providers(requirement: AuthRequirement, bundle: CredentialBundle) -> List[str]:
    """Providers required by ``requirement`` that ``bundle`` does not cover

    ClickUp counts as present once a token exists, even before a workspace
    is selected; tools that need a workspace check it themselves.
    """
    missing = []
    if requirement.needs_github and bundle.github_state is not AuthState.READY:
        missing.append(GITHUB)
    if requirement.needs_clickup and bundle.clickup_state is AuthState.UNAUTHENTICATED:
        missing.append(CLICKUP)
    return missing


AuthenticatedHandler = Callable[[BaseModel, ToolContext, CredentialBundle], Awaitable[ToolResult]]


class AuthenticationGate:
    """Wraps tool handlers with a per-session credential check"""

    def __init__(self, store: CredentialStore, login_urls: Optional[Dict[str, str]] = None):
        """
        Args:
            store: Credential store read on every invocation
            login_urls: Provider name -> URL shown when that provider is missing
        """
        self.store = store
        self.login_urls = dict(login_urls or {})

    def wrap(self, requirement: AuthRequirement, handler: AuthenticatedHandler) -> ToolHandler:
        """Return a tool handler that runs ``handler`` only when ``requirement`` is met

        The bundle is read from the store at call time and passed to
        ``handler`` as-is; handlers never look credentials up themselves.
        """

        async def gated(arguments: BaseModel, context: ToolContext) -> ToolResult:
            if not context.session_id:
                logger.error(f"Tool invoked without a session id (request {context.request_id})")
                raise InternalError("Session id missing from the tool invocation context.")

            bundle = await self.store.get_session(context.session_id)
            missing = missing_providers(requirement, bundle)
            if missing:
                logger.info(f"Session {context.session_id} blocked by gate, missing {missing}")
                return AuthenticationPending(missing=missing, login_urls=self.login_urls).to_result()

            return await handler(arguments, context, bundle)

        gated.requirement = requirement
        gated.__name__ = getattr(handler, "__name__", "gated")
        return gated
