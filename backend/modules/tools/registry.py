"""
Tool registry for looking up tool declarations and their implementations
"""
from typing import Dict, List, Optional, Any

from .models import Tool
from utils.logger import get_logger

logger = get_logger(__name__)


class ToolNotFoundError(LookupError):
    """Raised by ToolRegistry.lookup for names that were never registered"""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Tool {name} not found.")


class ToolRegistry:
    """
    Central registry for all tools.

    Built once at import time (the @tool decorator registers into it) and
    read-only afterwards.
    """

    def __init__(self):
        self._tools: Dict[str, Tool] = {}

    def register(self, tool: Tool) -> None:
        """Register a tool"""
        if tool.name in self._tools:
            raise ValueError(f"Tool '{tool.name}' is already registered")

        self._tools[tool.name] = tool
        logger.debug(f"Registered tool: {tool.name}")

    def lookup(self, name: str) -> Tool:
        """Get a tool by name or raise ToolNotFoundError"""
        tool = self._tools.get(name)
        if tool is None:
            raise ToolNotFoundError(name)
        return tool

    def get_tool(self, name: str) -> Optional[Tool]:
        """Get a tool by name"""
        return self._tools.get(name)

    def list_tools(self) -> List[Tool]:
        return list(self._tools.values())

    def get_openai_tools(self, tool_names: Optional[List[str]] = None) -> List[Dict[str, Any]]:
        """
        Get function declarations for the specified tools (all tools by default)

        Args:
            tool_names: Specific tool names to include; unknown names are skipped

        Returns:
            List of OpenAI-compatible tool schemas
        """
        if tool_names is None:
            tools = self.list_tools()
        else:
            tools = []
            for name in tool_names:
                tool = self.get_tool(name)
                if tool:
                    tools.append(tool)
                else:
                    logger.warning(f"Tool '{name}' not found in registry")

        return [t.to_openai_schema() for t in tools]

    def __contains__(self, name: str) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)


# Global registry instance
tool_registry = ToolRegistry()
