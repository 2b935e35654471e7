"""Tools combining GitHub and ClickUp"""

import datetime
import logging
from typing import Optional

from pydantic import BaseModel, Field

from credentials import AuthState, CredentialBundle
from providers import ProviderClients
from .gate import AuthenticationGate, AuthRequirement
from .guards import upstream_boundary
from .registry import NoArguments, ToolContext, ToolRegistry
from .results import ToolResult, text_result, workspace_required_result

logger = logging.getLogger(__name__)

REPORT_DAYS = 7


class SyncIssueInput(BaseModel):
    repositorio: str = Field(pattern=r"^[\w.-]+/[\w.-]+$", description="Repository as owner/name.")
    titulo: str = Field(min_length=1, description="Title of the issue and of the task.")
    listaClickup: str = Field(min_length=1, description="Name of the ClickUp list that receives the task.")
    descricao: Optional[str] = Field(default=None, description="Description of the issue and task.")
    prioridade: Optional[int] = Field(default=None, ge=1, le=4, description="ClickUp priority, 1 (urgent) to 4 (low).")
    atribuidoPara: Optional[str] = Field(default=None, description="GitHub username to assign the issue to.")


def register_integration_tools(registry: ToolRegistry, gate: AuthenticationGate, providers: ProviderClients) -> None:
    """Register the cross-provider sync and the weekly report"""

    @upstream_boundary("❌ An error occurred during the synchronization.")
    async def sync_issue(arguments: SyncIssueInput, context: ToolContext, tokens: CredentialBundle) -> ToolResult:
        if tokens.clickup_state is not AuthState.READY:
            return workspace_required_result()

        clickup = providers.clickup(tokens.clickup.access_token)
        github = providers.github(tokens.github)

        logger.info(f"Looking up ClickUp list \"{arguments.listaClickup}\" for session {context.session_id}")
        target_list = await clickup.find_list(tokens.clickup.selected_workspace_id, arguments.listaClickup)
        if target_list is None:
            return text_result(f"❌ The list named \"{arguments.listaClickup}\" was not found.")

        assignees = [arguments.atribuidoPara] if arguments.atribuidoPara else None
        issue = await github.create_issue(arguments.repositorio, arguments.titulo, arguments.descricao, assignees)

        description = f"GitHub issue: {issue['html_url']}"
        if arguments.descricao:
            description = f"{arguments.descricao}\n\n{description}"
        task = await clickup.create_task(target_list["id"], arguments.titulo, description, arguments.prioridade)

        return text_result(
            "✅ Synchronized!\n"
            f"- GitHub issue #{issue['number']}: {issue['html_url']}\n"
            f"- ClickUp task in \"{target_list['name']}\": {task.get('url', task.get('id'))}"
        )

    @upstream_boundary("❌ Could not generate the weekly report.")
    async def weekly_report(arguments: NoArguments, context: ToolContext, tokens: CredentialBundle) -> ToolResult:
        if tokens.clickup_state is not AuthState.READY:
            return workspace_required_result()

        since = datetime.datetime.now(datetime.timezone.utc) - datetime.timedelta(days=REPORT_DAYS)
        since_date = since.date().isoformat()

        github = providers.github(tokens.github)
        login = (await github.get_user())["login"]
        commits = await github.search_commits(login, since_date)
        issues = await github.search_closed_issues(login, since_date)

        clickup = providers.clickup(tokens.clickup.access_token)
        clickup_user = await clickup.get_user()
        tasks = await clickup.list_completed_tasks(
            tokens.clickup.selected_workspace_id,
            clickup_user.get("id"),
            int(since.timestamp() * 1000),
        )

        lines = [f"Weekly activity report for {login} (since {since_date})", ""]
        lines.append(f"Commits: {len(commits)}")
        for commit in commits[:10]:
            message = commit.get("commit", {}).get("message", "").splitlines()[0:1]
            repo = commit.get("repository", {}).get("full_name", "?")
            lines.append(f"- [{repo}] {message[0] if message else ''}")
        lines.append("")
        lines.append(f"Closed issues: {len(issues)}")
        for issue in issues[:10]:
            lines.append(f"- #{issue.get('number')} {issue.get('title')}")
        lines.append("")
        lines.append(f"Completed ClickUp tasks: {len(tasks)}")
        for task in tasks[:10]:
            lines.append(f"- {task.get('name')}")
        return text_result("\n".join(lines))

    registry.register(
        "sincronizar_issue_para_clickup",
        "Create GitHub issue and ClickUp task",
        "Creates a GitHub issue and a matching task in a specific ClickUp list.",
        gate.wrap(AuthRequirement.BOTH, sync_issue),
        input_model=SyncIssueInput,
    )
    registry.register(
        "relatorio_semanal",
        "Weekly activity report",
        "Summarizes your commits, closed issues and completed tasks from the last 7 days.",
        gate.wrap(AuthRequirement.BOTH, weekly_report),
    )
