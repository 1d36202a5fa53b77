"""
Tool Orchestrator - two-phase model protocol

    Received -> Planning -> NoToolCall -> Synthesizing(trivial) -> Done
                         -> ToolsRequested -> Dispatching -> Shaping -> Synthesizing -> Done

Planning call: the model either answers directly or asks for function calls.
All requested calls run concurrently, are shaped, and are handed to a
synthesis call whose text is the final answer. At most two model calls per
request; nothing is retried.
"""
from typing import Any, Dict, List, Optional, Tuple
from enum import Enum
import json

from pydantic import BaseModel, Field

import modules.tools.definitions  # This will auto-register all tools
from modules.tools.registry import tool_registry
from modules.tools.executor import ToolExecutor, ToolCallRequest
from models.conversation import ConversationHistory, FunctionCall
from .context import AgentContext
from .grounding import needs_grounding
from .llm_config import LLMConfig
from .llm_handler import LLMHandler
from .prompts import (
    get_planning_prompt,
    get_synthesis_instruction,
    get_abnormal_finish_message,
    NO_CANDIDATE_MESSAGE,
)
from .response_utils import extract_json_text
from utils.logger import get_logger

logger = get_logger(__name__)

# litellm's OpenAI-style tool entry for Gemini's built-in Google Search
WEB_SEARCH_TOOL = {"googleSearch": {}}

NORMAL_FINISH_REASONS = {None, "", "stop"}
PLANNING_FINISH_REASONS = NORMAL_FINISH_REASONS | {"tool_calls", "function_call"}


class OrchestrationState(str, Enum):
    RECEIVED = "received"
    PLANNING = "planning"
    NO_TOOL_CALL = "no_tool_call"
    TOOLS_REQUESTED = "tools_requested"
    DISPATCHING = "dispatching"
    SHAPING = "shaping"
    SYNTHESIZING = "synthesizing"
    DONE = "done"


class OrchestrationError(Exception):
    """A model call failed; fatal for the request"""

    def __init__(self, message: str, status_code: int = 500):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class OrchestrationResult(BaseModel):
    """Final answer plus counters for the run"""
    text: str
    model_calls: int = 0
    tool_calls: List[str] = Field(default_factory=list, description="Tool names in request order")
    grounded: bool = False


def build_response_format(response_schema: Dict[str, Any]) -> Dict[str, Any]:
    """json_schema response format accepted by litellm"""
    return {
        "type": "json_schema",
        "json_schema": {"name": "response", "schema": response_schema}
    }


class ToolOrchestrator:
    """
    Runs one request through planning, tool dispatch and synthesis.

    Usage:
        orchestrator = ToolOrchestrator(context=AgentContext(fmp=fmp, options=options))
        result = await orchestrator.run("What's the latest price of AAPL?")
        print(result.text)
    """

    def __init__(
        self,
        context: AgentContext,
        llm_handler: Optional[LLMHandler] = None,
        executor: Optional[ToolExecutor] = None,
        registry=None
    ):
        self.context = context
        self.llm_handler = llm_handler or LLMHandler(user_id=context.user_id)
        self.executor = executor or ToolExecutor()
        self.registry = registry or tool_registry
        self._state = OrchestrationState.RECEIVED

    @property
    def state(self) -> OrchestrationState:
        return self._state

    def _transition(self, state: OrchestrationState) -> None:
        logger.debug(f"Orchestration {self._state.value} -> {state.value}")
        self._state = state

    def _planning_tools(self, enable_tools: bool, grounded: bool, google_search: bool) -> List[Dict[str, Any]]:
        tools = []
        if grounded or (google_search and not enable_tools):
            tools.append(WEB_SEARCH_TOOL)
        if enable_tools:
            tools.extend(self.registry.get_openai_tools())
        return tools

    async def run(
        self,
        prompt: str,
        model: Optional[str] = None,
        enable_tools: bool = True,
        response_schema: Optional[Dict[str, Any]] = None,
        google_search: bool = False
    ) -> OrchestrationResult:
        """
        Answer one prompt.

        Args:
            prompt: User request
            model: Model name (default from Config)
            enable_tools: Offer the market-data tools on the planning call
            response_schema: JSON schema the final answer must follow
            google_search: Offer web search even when the prompt is not definitional

        Returns:
            OrchestrationResult; text is never empty

        Raises:
            OrchestrationError: a model call failed
        """
        self._state = OrchestrationState.RECEIVED
        llm_config = LLMConfig.from_config(model=model)
        grounded = needs_grounding(prompt)
        history = ConversationHistory()
        history.add_user_message(prompt)

        tools = self._planning_tools(enable_tools, grounded, google_search)
        logger.info(
            f"Orchestrating request (model={llm_config.model}, tools={len(tools)}, "
            f"grounded={grounded}, schema={response_schema is not None})"
        )

        # Structured output on the planning call only when it cannot request tools
        planning_overrides: Dict[str, Any] = {"tools": tools or None}
        if response_schema is not None and not tools:
            planning_overrides["response_format"] = build_response_format(response_schema)

        self._transition(OrchestrationState.PLANNING)
        planning = await self._call_model(
            llm_config.with_overrides(**planning_overrides),
            history.to_openai_format(system_prompt=get_planning_prompt()),
            phase="planning"
        )
        model_calls = 1

        choice = self._first_choice(planning)
        if choice is None:
            logger.warning("Planning call returned no candidate")
            self._transition(OrchestrationState.DONE)
            return OrchestrationResult(text=NO_CANDIDATE_MESSAGE, model_calls=model_calls, grounded=grounded)

        function_calls = self._parse_function_calls(choice)

        if not function_calls:
            self._transition(OrchestrationState.NO_TOOL_CALL)
            self._transition(OrchestrationState.SYNTHESIZING)
            text = self._final_text(choice, PLANNING_FINISH_REASONS, response_schema)
            self._transition(OrchestrationState.DONE)
            return OrchestrationResult(text=text, model_calls=model_calls, grounded=grounded)

        self._transition(OrchestrationState.TOOLS_REQUESTED)
        logger.info(f"Model requested {len(function_calls)} tool call(s): {[fc.name for fc in function_calls]}")
        history.add_model_message(
            content=self._message_text(choice) or None,
            function_calls=function_calls
        )

        self._transition(OrchestrationState.DISPATCHING)
        batch = await self.executor.execute_batch(
            [ToolCallRequest(id=fc.id, name=fc.name, arguments=fc.arguments) for fc in function_calls],
            self.context
        )

        self._transition(OrchestrationState.SHAPING)
        for message in batch.tool_messages:
            history.add_tool_result(message["tool_call_id"], message["name"], message["content"])
        history.add_user_message(get_synthesis_instruction(response_schema))

        self._transition(OrchestrationState.SYNTHESIZING)
        # Synthesis only presents results; it is never offered tools
        synthesis_overrides: Dict[str, Any] = {"tools": None}
        if response_schema is not None:
            synthesis_overrides["response_format"] = build_response_format(response_schema)

        synthesis = await self._call_model(
            llm_config.with_overrides(**synthesis_overrides),
            history.to_openai_format(system_prompt=get_planning_prompt()),
            phase="synthesis"
        )
        model_calls += 1

        choice = self._first_choice(synthesis)
        if choice is None:
            logger.warning("Synthesis call returned no candidate")
            text = NO_CANDIDATE_MESSAGE
        else:
            text = self._final_text(choice, NORMAL_FINISH_REASONS, response_schema)

        self._transition(OrchestrationState.DONE)
        return OrchestrationResult(
            text=text,
            model_calls=model_calls,
            tool_calls=[fc.name for fc in function_calls],
            grounded=grounded
        )

    async def _call_model(self, llm_config: LLMConfig, messages: List[Dict[str, Any]], phase: str) -> Any:
        kwargs = llm_config.to_litellm_kwargs()
        kwargs["messages"] = messages
        try:
            return await self.llm_handler.acompletion(phase=phase, **kwargs)
        except Exception as e:
            raise OrchestrationError(str(e)) from e

    @staticmethod
    def _first_choice(response: Any) -> Optional[Any]:
        choices = getattr(response, "choices", None) or []
        return choices[0] if choices else None

    @staticmethod
    def _message_text(choice: Any) -> str:
        message = getattr(choice, "message", None)
        content = getattr(message, "content", None) if message is not None else None
        return content if isinstance(content, str) else ""

    @staticmethod
    def _parse_function_calls(choice: Any) -> List[FunctionCall]:
        message = getattr(choice, "message", None)
        raw_calls = getattr(message, "tool_calls", None) or []

        function_calls = []
        for index, tc in enumerate(raw_calls):
            function = getattr(tc, "function", None)
            name = getattr(function, "name", None)
            if not name:
                continue
            arguments = getattr(function, "arguments", None) or "{}"
            if isinstance(arguments, str):
                try:
                    arguments = json.loads(arguments)
                except json.JSONDecodeError:
                    logger.warning(f"Malformed arguments for tool call {name}: {arguments[:200]}")
                    arguments = {}
            if not isinstance(arguments, dict):
                arguments = {}
            function_calls.append(FunctionCall(
                id=getattr(tc, "id", None) or f"call_{index}",
                name=name,
                arguments=arguments
            ))
        return function_calls

    def _final_text(self, choice: Any, normal_reasons: set, response_schema: Optional[Dict[str, Any]]) -> str:
        finish_reason = getattr(choice, "finish_reason", None)
        if finish_reason not in normal_reasons:
            logger.warning(f"Model finished abnormally: {finish_reason}")
            return get_abnormal_finish_message(finish_reason)

        text = self._message_text(choice)
        if not text.strip():
            logger.warning("Model returned empty text")
            return NO_CANDIDATE_MESSAGE

        if response_schema is not None:
            return extract_json_text(text)
        return text
