"""Tool definitions and the registry served by every protocol session"""

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional, Type

from mcp import types
from pydantic import BaseModel, ConfigDict

from .results import ToolResult


@dataclass(frozen=True)
class ToolContext:
    """Invocation context handed to every tool handler

    Attributes:
        session_id: MCP session the call arrived on
        request_id: JSON-RPC id of the ``tools/call`` request
    """
    session_id: Optional[str]
    request_id: Any = None


class NoArguments(BaseModel):
    """Input model for tools without parameters"""
    model_config = ConfigDict(extra="ignore")


ToolHandler = Callable[[BaseModel, ToolContext], Awaitable[ToolResult]]


@dataclass(frozen=True)
class Tool:
    """A callable operation exposed over ``tools/list`` and ``tools/call``"""
    name: str
    title: str
    description: str
    input_model: Type[BaseModel]
    handler: ToolHandler

    def descriptor(self) -> types.Tool:
        schema = self.input_model.model_json_schema()
        schema.pop("title", None)
        schema.setdefault("properties", {})
        return types.Tool(name=self.name, title=self.title, description=self.description, inputSchema=schema)


class ToolRegistry:
    """Ordered set of tools, keyed by wire name"""

    def __init__(self):
        self._tools: Dict[str, Tool] = {}

    def register(
        self,
        name: str,
        title: str,
        description: str,
        handler: ToolHandler,
        input_model: Type[BaseModel] = NoArguments,
    ) -> Tool:
        if name in self._tools:
            raise ValueError(f"Tool {name} is already registered")
        tool = Tool(name=name, title=title, description=description, input_model=input_model, handler=handler)
        self._tools[name] = tool
        return tool

    def get(self, name: str) -> Optional[Tool]:
        return self._tools.get(name)

    def names(self) -> List[str]:
        return list(self._tools)

    def descriptors(self) -> List[types.Tool]:
        return [tool.descriptor() for tool in self._tools.values()]

    def __contains__(self, name: str) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)
