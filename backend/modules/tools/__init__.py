"""
Tool system for defining and managing LLM-callable tools
"""
from .decorator import tool
from .registry import ToolRegistry, ToolNotFoundError, tool_registry
from .runner import ToolRunner, tool_runner
from .responses import (
    ToolResponse,
    ToolSuccess,
    ToolError,
)
from .shaping import SHAPERS, shape_result
from .executor import (
    ToolExecutor,
    ToolCallRequest,
    ToolExecutionResult,
    ToolExecutionBatch,
)

__all__ = [
    "tool",
    "ToolRegistry",
    "ToolNotFoundError",
    "tool_registry",
    "ToolRunner",
    "tool_runner",
    "ToolResponse",
    "ToolSuccess",
    "ToolError",
    "SHAPERS",
    "shape_result",
    "ToolExecutor",
    "ToolCallRequest",
    "ToolExecutionResult",
    "ToolExecutionBatch",
]
