"""ClickUp workspace and list tools"""

import logging

from pydantic import BaseModel, Field

from credentials import AuthState, CredentialBundle, CredentialStore
from providers import ProviderClients
from .gate import AuthenticationGate, AuthRequirement
from .guards import upstream_boundary
from .registry import NoArguments, ToolContext, ToolRegistry
from .results import ToolResult, text_result, workspace_required_result

logger = logging.getLogger(__name__)


class SelectWorkspaceInput(BaseModel):
    workspaceId: str = Field(min_length=1, description="Workspace id obtained after the ClickUp login.")


class ListListsInput(BaseModel):
    nomeDoEspaco: str = Field(min_length=1, description="Exact name of the ClickUp Space.")


def register_clickup_tools(
    registry: ToolRegistry,
    gate: AuthenticationGate,
    providers: ProviderClients,
    store: CredentialStore,
) -> None:
    """Register workspace listing/selection and list browsing"""

    async def list_workspaces(arguments: NoArguments, context: ToolContext, tokens: CredentialBundle) -> ToolResult:
        clickup = tokens.clickup
        if not clickup.workspaces:
            return text_result("Your ClickUp account has no workspaces.")
        lines = []
        for workspace in clickup.workspaces:
            marker = " (selected)" if workspace.id == clickup.selected_workspace_id else ""
            lines.append(f"- {workspace.name} (ID: {workspace.id}){marker}")
        return text_result("Available ClickUp workspaces:\n" + "\n".join(lines))

    @upstream_boundary("❌ Could not select the workspace.")
    async def select_workspace(arguments: SelectWorkspaceInput, context: ToolContext, tokens: CredentialBundle) -> ToolResult:
        updated = await store.select_clickup_workspace(context.session_id, arguments.workspaceId)
        workspace = updated.clickup.find_workspace(arguments.workspaceId)
        logger.info(f"Session {context.session_id} selected ClickUp workspace {workspace.id}")
        return text_result(f"✅ Workspace \"{workspace.name}\" (ID {workspace.id}) selected!")

    @upstream_boundary("❌ An error occurred while fetching the ClickUp lists.")
    async def list_lists(arguments: ListListsInput, context: ToolContext, tokens: CredentialBundle) -> ToolResult:
        if tokens.clickup_state is not AuthState.READY:
            return workspace_required_result()

        clickup = providers.clickup(tokens.clickup.access_token)
        space = await clickup.find_space(tokens.clickup.selected_workspace_id, arguments.nomeDoEspaco)
        if space is None:
            return text_result(f"❌ Space named \"{arguments.nomeDoEspaco}\" not found.")

        lists = await clickup.list_folderless_lists(space["id"])
        if not lists:
            return text_result(f"No lists found in space \"{arguments.nomeDoEspaco}\".")
        lines = "\n".join(f"- Name: \"{task_list['name']}\"" for task_list in lists)
        return text_result(f"Lists found in space \"{arguments.nomeDoEspaco}\":\n{lines}")

    registry.register(
        "clickup_listar_workspaces",
        "List ClickUp workspaces",
        "Shows the ClickUp workspaces available to the authenticated user.",
        gate.wrap(AuthRequirement.CLICKUP, list_workspaces),
    )
    registry.register(
        "clickup_selecionar_workspace",
        "Select ClickUp workspace",
        "Sets which ClickUp workspace the other tools use.",
        gate.wrap(AuthRequirement.CLICKUP, select_workspace),
        input_model=SelectWorkspaceInput,
    )
    registry.register(
        "clickup_listar_listas",
        "List lists of a ClickUp space",
        "Shows every task list inside a specific Space.",
        gate.wrap(AuthRequirement.CLICKUP, list_lists),
        input_model=ListListsInput,
    )
