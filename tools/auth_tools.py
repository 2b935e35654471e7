"""Login and authentication status tools"""

import logging

from pydantic import BaseModel, Field

from credentials import AuthState, CredentialBundle
from oauth import OAuthManager
from .gate import CLICKUP, GITHUB, AuthenticationGate, AuthRequirement
from .guards import upstream_boundary
from .registry import NoArguments, ToolContext, ToolRegistry
from .results import ToolResult, text_result

logger = logging.getLogger(__name__)

_STATE_LABELS = {
    AuthState.UNAUTHENTICATED: "not logged in",
    AuthState.PARTIALLY_AUTHENTICATED: "logged in, no workspace selected",
    AuthState.READY: "ready",
}


class FinishDeviceLoginInput(BaseModel):
    deviceCode: str = Field(min_length=1, description="device_code returned by github_login.")


def register_auth_tools(registry: ToolRegistry, gate: AuthenticationGate, oauth: OAuthManager) -> None:
    """Register the status tool, plus the GitHub device login tools in device mode"""

    async def auth_status(arguments: NoArguments, context: ToolContext, tokens: CredentialBundle) -> ToolResult:
        lines = [
            f"{GITHUB}: {_STATE_LABELS[tokens.github_state]}",
            f"{CLICKUP}: {_STATE_LABELS[tokens.clickup_state]}",
        ]
        if tokens.github_state is AuthState.UNAUTHENTICATED:
            if oauth.config.github_uses_device_flow:
                lines.append("Run `github_login` to log into GitHub.")
            else:
                lines.append(f"Log into GitHub at {gate.login_urls.get(GITHUB)}")
        if tokens.clickup_state is AuthState.UNAUTHENTICATED:
            lines.append(f"Log into ClickUp at {gate.login_urls.get(CLICKUP)}")
        lines.append(f"Session id for claiming codes: {context.session_id}")
        return text_result("\n".join(lines))

    registry.register(
        "status_autenticacao",
        "Authentication status",
        "Shows which services this session is authenticated with and how to log in.",
        gate.wrap(AuthRequirement.NONE, auth_status),
    )

    if not oauth.config.github_uses_device_flow:
        return

    @upstream_boundary("❌ Could not start the GitHub login.")
    async def start_device_login(arguments: NoArguments, context: ToolContext, tokens: CredentialBundle) -> ToolResult:
        authorization = await oauth.start_device_login()
        return text_result(
            f"Open {authorization.verification_uri} and enter the code {authorization.user_code}.\n"
            f"Then run `github_finalizar_login` with deviceCode \"{authorization.device_code}\" "
            f"(the code expires in {authorization.expires_in // 60} minutes)."
        )

    @upstream_boundary("❌ GitHub login failed. Run `github_login` again.")
    async def finish_device_login(arguments: FinishDeviceLoginInput, context: ToolContext, tokens: CredentialBundle) -> ToolResult:
        result = await oauth.finish_device_login(arguments.deviceCode, context.session_id)
        if result.pending:
            wait = " GitHub asked to poll more slowly." if result.slow_down else ""
            return text_result(f"⏳ Login not completed yet. Approve the code in the browser and try again.{wait}")
        return text_result("✅ GitHub login complete.")

    registry.register(
        "github_login",
        "Start GitHub login",
        "Starts the GitHub device login and returns the code to enter in the browser.",
        gate.wrap(AuthRequirement.NONE, start_device_login),
    )
    registry.register(
        "github_finalizar_login",
        "Finish GitHub login",
        "Checks whether the GitHub device login was approved and attaches the token to this session.",
        gate.wrap(AuthRequirement.NONE, finish_device_login),
        input_model=FinishDeviceLoginInput,
    )
