"""Text results returned by tool handlers"""

from dataclasses import dataclass
from typing import List

from mcp import types


@dataclass(frozen=True)
class ToolResult:
    """Text content returned by a tool

    Attributes:
        text: Message shown to the client
        is_error: Marks a failed call (upstream failure, bad input)
    """
    text: str
    is_error: bool = False

    def content(self) -> List[types.TextContent]:
        return [types.TextContent(type="text", text=self.text)]


def text_result(text: str) -> ToolResult:
    return ToolResult(text=text)


def error_result(text: str) -> ToolResult:
    return ToolResult(text=text, is_error=True)


def workspace_required_result() -> ToolResult:
    """Result for ClickUp tools called before a workspace was selected"""
    return ToolResult(
        text=(
            "No ClickUp workspace selected. Use `clickup_listar_workspaces` to see the "
            "available workspaces and `clickup_selecionar_workspace` to choose one."
        )
    )
