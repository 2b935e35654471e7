"""GitHub repository tools"""

import logging
from typing import Optional

from pydantic import BaseModel, Field

from credentials import CredentialBundle
from errors import UpstreamError
from providers import ProviderClients
from .gate import AuthenticationGate, AuthRequirement
from .guards import upstream_boundary
from .registry import NoArguments, ToolContext, ToolRegistry
from .results import ToolResult, error_result, text_result

logger = logging.getLogger(__name__)


class CreateRepositoryInput(BaseModel):
    nome: str = Field(min_length=1, description="Name of the new repository.")
    descricao: Optional[str] = Field(default=None, description="Short description.")
    privado: bool = Field(default=False, description="Whether the repository is private.")


def register_github_tools(registry: ToolRegistry, gate: AuthenticationGate, providers: ProviderClients) -> None:
    """Register the repository listing and creation tools"""

    @upstream_boundary("❌ Could not list your GitHub repositories.")
    async def list_repositories(arguments: NoArguments, context: ToolContext, tokens: CredentialBundle) -> ToolResult:
        repos = await providers.github(tokens.github).list_recent_repos(limit=10)
        if not repos:
            return text_result("You have no repositories yet.")
        lines = "\n".join(f"- {repo['full_name']}" for repo in repos)
        return text_result(f"Your {len(repos)} most recently pushed repositories:\n{lines}")

    async def create_repository(arguments: CreateRepositoryInput, context: ToolContext, tokens: CredentialBundle) -> ToolResult:
        github = providers.github(tokens.github)
        try:
            data = await github.create_repo(arguments.nome, arguments.descricao, arguments.privado)
        except UpstreamError as e:
            logger.error(f"Repository creation failed for session {context.session_id}: {e} - {e.body}")
            if e.upstream_status == 422:
                return error_result("❌ Creation failed. A repository with this name probably already exists.")
            return error_result("❌ An unexpected error occurred while creating the repository.")
        return text_result(f"✅ Repository \"{data['full_name']}\" created!\nURL: {data['html_url']}")

    registry.register(
        "github_meus_repositorios",
        "List GitHub repositories",
        "Lists the 10 most recently pushed repositories of the authenticated user.",
        gate.wrap(AuthRequirement.GITHUB, list_repositories),
    )
    registry.register(
        "github_criar_repositorio",
        "Create GitHub repository",
        "Creates a new repository for the authenticated user.",
        gate.wrap(AuthRequirement.GITHUB, create_repository),
        input_model=CreateRepositoryInput,
    )
