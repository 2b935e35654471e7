"""
ClickUp REST client used by the workspace, list and integration tools.
"""
import logging
from typing import Any, Dict, List, Optional

import httpx

from settings import CLICKUP_API_BASE
from providers.base_provider import BaseProvider

logger = logging.getLogger(__name__)


class ClickUpProvider(BaseProvider):
    """Client for the ClickUp v2 API authenticated with a user OAuth token"""

    name = "ClickUp"

    def __init__(
        self,
        access_token: str,
        base_url: str = CLICKUP_API_BASE,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: Optional[httpx.Timeout] = None,
    ):
        super().__init__(base_url, access_token, transport=transport, timeout=timeout)

    def _get_headers(self) -> Dict[str, str]:
        # ClickUp OAuth tokens are sent without a scheme prefix
        return {
            "Authorization": self.access_token,
            "Content-Type": "application/json",
        }

    async def list_teams(self) -> List[Dict[str, Any]]:
        data = await self.get("/team")
        return (data or {}).get("teams", [])

    async def get_user(self) -> Dict[str, Any]:
        data = await self.get("/user")
        return (data or {}).get("user", {})

    async def list_spaces(self, team_id: str) -> List[Dict[str, Any]]:
        data = await self.get(f"/team/{team_id}/space")
        return (data or {}).get("spaces", [])

    async def list_folderless_lists(self, space_id: str) -> List[Dict[str, Any]]:
        data = await self.get(f"/space/{space_id}/list")
        return (data or {}).get("lists", [])

    async def list_folders(self, space_id: str) -> List[Dict[str, Any]]:
        data = await self.get(f"/space/{space_id}/folder")
        return (data or {}).get("folders", [])

    async def find_space(self, team_id: str, space_name: str) -> Optional[Dict[str, Any]]:
        """Space in ``team_id`` whose name matches ``space_name`` case-insensitively"""
        wanted = space_name.strip().lower()
        for space in await self.list_spaces(team_id):
            if str(space.get("name", "")).lower() == wanted:
                return space
        return None

    async def find_list(self, team_id: str, list_name: str) -> Optional[Dict[str, Any]]:
        """Search every space of the workspace for a list named ``list_name``

        Folderless lists of a space are checked before lists inside its folders.
        """
        wanted = list_name.strip().lower()
        for space in await self.list_spaces(team_id):
            for task_list in await self.list_folderless_lists(space["id"]):
                if str(task_list.get("name", "")).lower() == wanted:
                    return task_list
            for folder in await self.list_folders(space["id"]):
                for task_list in folder.get("lists", []):
                    if str(task_list.get("name", "")).lower() == wanted:
                        return task_list
        return None

    async def create_task(
        self,
        list_id: str,
        name: str,
        description: Optional[str] = None,
        priority: Optional[int] = None,
    ) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"name": name}
        if description:
            payload["description"] = description
        if priority is not None:
            payload["priority"] = priority
        return await self.post(f"/list/{list_id}/task", json=payload)

    async def list_completed_tasks(self, team_id: str, user_id: Any, since_ms: int) -> List[Dict[str, Any]]:
        """Tasks assigned to ``user_id`` closed after ``since_ms`` (epoch milliseconds)"""
        data = await self.get(
            f"/team/{team_id}/task",
            params={
                "include_closed": "true",
                "assignees[]": str(user_id),
                "date_done_gt": since_ms,
                "subtasks": "true",
            },
        )
        return (data or {}).get("tasks", [])
