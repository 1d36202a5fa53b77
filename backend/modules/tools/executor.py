"""
Tool Executor - parallel batch execution with result shaping

This module executes every tool call from one planning response:
- All calls run concurrently (asyncio.gather) and are joined before returning
- Each call is isolated; a failing tool only affects its own result
- Each result is shaped for the model (see shaping.py)
- Results and tool messages keep the order the model requested
"""
from typing import List, Dict, Any, Optional
import asyncio
import json
import time
from pydantic import BaseModel, ConfigDict, Field

from .runner import tool_runner
from .responses import ToolResponse
from .shaping import shape_result
from modules.agent.context import AgentContext
from utils.logger import get_logger

logger = get_logger(__name__)


class ToolCallRequest(BaseModel):
    """Request for executing a single tool"""
    id: str = Field(description="Unique tool call ID")
    name: str = Field(description="Tool name")
    arguments: Dict[str, Any] = Field(default_factory=dict, description="Tool arguments")


class ToolExecutionResult(BaseModel):
    """Result of a single tool execution"""
    model_config = ConfigDict(frozen=True)

    tool_call_id: str
    tool_name: str
    arguments: Dict[str, Any]
    raw_result: ToolResponse = Field(description="Unshaped result")
    shaped_result: Dict[str, Any] = Field(description="Result shaped for the model")
    duration_ms: float

    @property
    def success(self) -> bool:
        return self.raw_result.success

    @property
    def content(self) -> str:
        """Shaped result serialized for a tool message"""
        return json.dumps(self.shaped_result, default=str, ensure_ascii=False)


class ToolExecutionBatch(BaseModel):
    """Results from executing a batch of tools"""
    results: List[ToolExecutionResult]
    tool_messages: List[Dict[str, Any]] = Field(
        description="OpenAI-format tool messages for conversation"
    )
    total_duration_ms: float

    def get_result_by_id(self, tool_call_id: str) -> Optional[ToolExecutionResult]:
        """Get a specific result by tool call ID"""
        return next((r for r in self.results if r.tool_call_id == tool_call_id), None)

    def all_succeeded(self) -> bool:
        return all(r.success for r in self.results)

    def get_failed_tools(self) -> List[ToolExecutionResult]:
        return [r for r in self.results if not r.success]


class ToolExecutor:
    """
    Executes the tool calls of one planning response.

    Usage:
        executor = ToolExecutor()
        batch = await executor.execute_batch(tool_calls=[...], context=context)
        for message in batch.tool_messages:
            history.add_tool_result(message["tool_call_id"], message["name"], message["content"])
    """

    def __init__(self, runner=None):
        """
        Args:
            runner: ToolRunner instance (defaults to global runner)
        """
        self.runner = runner or tool_runner

    async def execute_batch(
        self,
        tool_calls: List[ToolCallRequest],
        context: AgentContext
    ) -> ToolExecutionBatch:
        """
        Execute a batch of tool calls concurrently

        Cancelling the awaiting task cancels every call still pending.

        Args:
            tool_calls: List of tool call requests, in model order
            context: Agent execution context

        Returns:
            ToolExecutionBatch with results and tool messages in call order
        """
        start_time = time.time()
        logger.info(f"Executing {len(tool_calls)} tool call(s) in parallel: {[c.name for c in tool_calls]}")

        results = await asyncio.gather(
            *[self._execute_single(call, context) for call in tool_calls]
        )

        tool_messages = [
            {
                "role": "tool",
                "tool_call_id": result.tool_call_id,
                "name": result.tool_name,
                "content": result.content
            }
            for result in results
        ]

        total_duration = (time.time() - start_time) * 1000
        failed = sum(1 for r in results if not r.success)
        logger.info(f"Tool batch finished in {total_duration:.0f}ms ({failed} failed)")

        return ToolExecutionBatch(
            results=list(results),
            tool_messages=tool_messages,
            total_duration_ms=total_duration
        )

    async def _execute_single(
        self,
        call: ToolCallRequest,
        context: AgentContext
    ) -> ToolExecutionResult:
        """Run and shape one call; the runner never raises for tool failures"""
        start = time.time()
        raw = await self.runner.execute(call.name, call.arguments, context)
        shaped = shape_result(call.name, raw)

        return ToolExecutionResult(
            tool_call_id=call.id,
            tool_name=call.name,
            arguments=call.arguments,
            raw_result=raw,
            shaped_result=shaped,
            duration_ms=(time.time() - start) * 1000
        )
