"""
GitHub REST client used by the repository and integration tools.
"""
import logging
from typing import Any, Dict, List, Optional

import httpx

from settings import GITHUB_API_BASE
from providers.base_provider import BaseProvider

logger = logging.getLogger(__name__)


class GitHubProvider(BaseProvider):
    """Client for api.github.com authenticated with a user OAuth token"""

    name = "GitHub"

    def __init__(
        self,
        access_token: str,
        base_url: str = GITHUB_API_BASE,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: Optional[httpx.Timeout] = None,
    ):
        super().__init__(base_url, access_token, transport=transport, timeout=timeout)

    def _get_headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.access_token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }

    async def get_user(self) -> Dict[str, Any]:
        return await self.get("/user")

    async def list_recent_repos(self, limit: int = 10) -> List[Dict[str, Any]]:
        """Repositories of the authenticated user, most recently pushed first"""
        return await self.get("/user/repos", params={"sort": "pushed", "per_page": limit})

    async def create_repo(self, name: str, description: Optional[str] = None, private: bool = False) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"name": name, "private": private}
        if description:
            payload["description"] = description
        return await self.post("/user/repos", json=payload)

    async def create_issue(
        self,
        repo: str,
        title: str,
        body: Optional[str] = None,
        assignees: Optional[List[str]] = None,
    ) -> Dict[str, Any]:
        """Open an issue in ``repo`` ("owner/name")"""
        payload: Dict[str, Any] = {"title": title}
        if body:
            payload["body"] = body
        if assignees:
            payload["assignees"] = assignees
        return await self.post(f"/repos/{repo}/issues", json=payload)

    async def search_commits(self, login: str, since: str) -> List[Dict[str, Any]]:
        """Commits authored by ``login`` since the ISO date ``since``"""
        data = await self.get(
            "/search/commits",
            params={"q": f"author:{login} committer-date:>={since}", "sort": "committer-date", "per_page": 100},
        )
        return (data or {}).get("items", [])

    async def search_closed_issues(self, login: str, since: str) -> List[Dict[str, Any]]:
        """Issues involving ``login`` closed since the ISO date ``since``"""
        data = await self.get(
            "/search/issues",
            params={"q": f"involves:{login} type:issue is:closed closed:>={since}", "per_page": 100},
        )
        return (data or {}).get("items", [])
