"""
AI service for generation requests and data proxy calls
"""
from typing import Any, Dict, Optional
from functools import lru_cache

from modules.agent.context import AgentContext
from modules.agent.orchestrator import ToolOrchestrator, OrchestrationResult
from modules.agent.llm_handler import LLMHandler
from modules.tools.clients import FMPClient, OptionsChainClient
from modules.tools.responses import ToolResponse
from utils.logger import get_logger

logger = get_logger(__name__)


class AIService:
    """
    Owns the data clients and runs orchestrations.

    Clients are built once per service and handed to every request through
    an AgentContext; orchestrators are created per request so concurrent
    requests share no mutable state.
    """

    def __init__(
        self,
        fmp_client: Optional[FMPClient] = None,
        options_client: Optional[OptionsChainClient] = None,
        llm_handler: Optional[LLMHandler] = None
    ):
        self.fmp_client = fmp_client or FMPClient()
        self.options_client = options_client or OptionsChainClient()
        self.llm_handler = llm_handler

    def build_context(self, user_id: Optional[str] = None) -> AgentContext:
        return AgentContext(fmp=self.fmp_client, options=self.options_client, user_id=user_id)

    async def generate(
        self,
        prompt: str,
        model: Optional[str] = None,
        enable_tools: bool = False,
        response_schema: Optional[Dict[str, Any]] = None,
        google_search: bool = False,
        user_id: Optional[str] = None
    ) -> OrchestrationResult:
        """
        Run one prompt through the tool orchestrator.

        Raises:
            OrchestrationError: a model call failed
        """
        orchestrator = ToolOrchestrator(
            context=self.build_context(user_id),
            llm_handler=self.llm_handler or LLMHandler(user_id=user_id)
        )
        result = await orchestrator.run(
            prompt,
            model=model,
            enable_tools=enable_tools,
            response_schema=response_schema,
            google_search=google_search
        )
        logger.info(f"Generated response ({result.model_calls} model call(s), tools={result.tool_calls})")
        return result

    async def fetch_fmp(self, endpoint: str) -> ToolResponse:
        return await self.fmp_client.get(endpoint)

    async def fetch_options(self, symbol: str, date: Optional[str] = None) -> ToolResponse:
        return await self.options_client.fetch(symbol, date)

    async def aclose(self):
        """Release HTTP clients"""
        await self.fmp_client.aclose()


@lru_cache(maxsize=1)
def get_ai_service() -> AIService:
    """FastAPI dependency; tests replace it with app.dependency_overrides"""
    return AIService()
