"""
Tool Runner - Handles execution of a single tool call

Separates execution logic from registry (storage) and orchestration
"""
from typing import Dict, Any, Optional
import asyncio
import traceback
import time

from modules.agent.context import AgentContext
from .registry import tool_registry, ToolNotFoundError
from .responses import ToolResponse, ToolSuccess, ToolError
from utils.logger import get_logger, log_tool_execution

logger = get_logger(__name__)


class ToolRunner:
    """
    Executes tools with proper error handling and context management.

    Responsibilities:
    - Look up tools in the registry (unknown names become ToolError)
    - Validate required arguments before dispatch
    - Inject the context (data clients, user_id)
    - Absorb exceptions so one failing tool never affects its siblings
    """

    def __init__(self, registry=None):
        """
        Args:
            registry: ToolRegistry to use (defaults to global registry)
        """
        self.registry = registry or tool_registry

    async def execute(
        self,
        tool_name: str,
        arguments: Optional[Dict[str, Any]],
        context: AgentContext
    ) -> ToolResponse:
        """
        Execute a tool with the arguments the model produced

        Args:
            tool_name: Name of the tool to execute
            arguments: Keyword arguments for the tool function
            context: Agent context with injected clients

        Returns:
            ToolResponse; never raises for tool-level failures
        """
        start = time.time()
        arguments = dict(arguments or {})

        try:
            tool = self.registry.lookup(tool_name)
        except ToolNotFoundError as e:
            logger.warning(f"Model requested unknown tool: {tool_name}")
            return ToolError(error=str(e))

        missing = [name for name in tool.parameters_schema["required"] if arguments.get(name) is None]
        if missing:
            error = f"Missing required parameters: {', '.join(missing)}"
            log_tool_execution(logger, tool_name, False, (time.time() - start) * 1000, error)
            return ToolError(error=error, status=400)

        # Drop arguments the declaration does not know about
        known = tool.parameters_schema["properties"]
        unknown = [k for k in arguments if k not in known]
        if unknown:
            logger.debug(f"Ignoring unknown arguments for {tool_name}: {unknown}")
        kwargs = {k: v for k, v in arguments.items() if k in known}

        logger.debug(f"Executing tool {tool_name} with arguments: {kwargs}")
        try:
            result = await tool.handler(context=context, **kwargs)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            duration_ms = (time.time() - start) * 1000
            log_tool_execution(logger, tool_name, False, duration_ms, str(e))
            logger.debug(f"Traceback:\n{traceback.format_exc()}")
            return ToolError(error=f"Error executing {tool_name}: {e}", status=500)

        if not isinstance(result, ToolResponse):
            logger.warning(f"Tool {tool_name} returned non-ToolResponse: {type(result)}")
            result = ToolSuccess(data=result)

        log_tool_execution(logger, tool_name, result.success, (time.time() - start) * 1000, result.error)
        return result


# Global runner instance
tool_runner = ToolRunner()
