"""Data models for per-session GitHub and ClickUp credentials"""

import enum
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional, Tuple


class AuthState(str, enum.Enum):
    """Completeness of one provider's credential inside a bundle"""

    UNAUTHENTICATED = "unauthenticated"
    # ClickUp only: token present, no workspace selected yet
    PARTIALLY_AUTHENTICATED = "partially_authenticated"
    READY = "ready"


@dataclass(frozen=True)
class Workspace:
    """A ClickUp workspace (called "team" by the ClickUp API)

    Attributes:
        id: Workspace identifier
        name: Display name
    """
    id: str
    name: str

    @classmethod
    def from_team(cls, team: Dict[str, Any]) -> "Workspace":
        return cls(id=str(team.get("id", "")), name=str(team.get("name", "")))


@dataclass(frozen=True)
class ClickUpCredential:
    """ClickUp OAuth result

    Attributes:
        access_token: ClickUp OAuth access token
        selected_workspace_id: Workspace chosen by the user, None until selected
        workspaces: Workspaces discovered at token-exchange time
    """
    access_token: str
    selected_workspace_id: Optional[str] = None
    workspaces: Tuple[Workspace, ...] = ()

    @property
    def state(self) -> AuthState:
        if not self.access_token:
            return AuthState.UNAUTHENTICATED
        if self.selected_workspace_id is None:
            return AuthState.PARTIALLY_AUTHENTICATED
        return AuthState.READY

    def find_workspace(self, workspace_id: str) -> Optional[Workspace]:
        for workspace in self.workspaces:
            if workspace.id == workspace_id:
                return workspace
        return None

    def with_selected_workspace(self, workspace_id: str) -> "ClickUpCredential":
        return replace(self, selected_workspace_id=workspace_id)


@dataclass(frozen=True)
class CredentialBundle:
    """All credentials known for one pending code or one session

    Bundles are immutable; every change produces a new bundle, so a reader
    always sees a consistent snapshot.

    Attributes:
        github: GitHub OAuth access token
        clickup: ClickUp credential
    """
    github: Optional[str] = None
    clickup: Optional[ClickUpCredential] = None

    @property
    def github_state(self) -> AuthState:
        return AuthState.READY if self.github else AuthState.UNAUTHENTICATED

    @property
    def clickup_state(self) -> AuthState:
        if self.clickup is None:
            return AuthState.UNAUTHENTICATED
        return self.clickup.state

    @property
    def is_empty(self) -> bool:
        return self.github is None and self.clickup is None

    def merged_over(self, existing: "CredentialBundle") -> "CredentialBundle":
        """Merge this bundle over ``existing``

        A provider set here wins; a provider unset here keeps the value
        from ``existing``.

        Args:
            existing: Bundle already stored under the same key

        Returns:
            New merged bundle
        """
        return CredentialBundle(
            github=self.github if self.github else existing.github,
            clickup=self.clickup if self.clickup is not None else existing.clickup,
        )

    def describe(self) -> Dict[str, Any]:
        """Status information without exposing secrets"""
        status: Dict[str, Any] = {
            "github": self.github_state.value,
            "clickup": self.clickup_state.value,
        }
        if self.clickup is not None:
            status["clickup_workspace"] = self.clickup.selected_workspace_id
            status["clickup_workspaces"] = len(self.clickup.workspaces)
        return status


EMPTY_BUNDLE = CredentialBundle()


@dataclass
class PendingEntry:
    """A code-keyed bundle waiting to be claimed by a session

    Attributes:
        bundle: Credentials accumulated from the provider callbacks
        created_at: Monotonic timestamp of the first callback for this code
    """
    bundle: CredentialBundle
    created_at: float = field(default=0.0)
