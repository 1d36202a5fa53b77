"""
LLM Handler - Clean LLM API interaction with logging

Wraps litellm's acompletion to add:
- One-line call logging (model, phase, tokens, duration)
- Optional full request/response debug logging (Config.DEBUG_LLM_CALLS)
"""
from typing import Any, Dict, Optional
from litellm import acompletion
import json
import time

from config import Config
from utils.logger import get_logger, log_llm_call

logger = get_logger(__name__)


class LLMHandler:
    """
    LLM API handler.

    Responsibilities:
    - LLM API calls (via litellm), non-streaming only
    - Logging of every call
    Exceptions from the provider propagate to the caller unchanged.
    """

    def __init__(self, user_id: Optional[str] = None):
        self.user_id = user_id or "unknown"

    async def acompletion(self, phase: Optional[str] = None, **kwargs) -> Any:
        """
        Call LiteLLM's acompletion with logging.

        Args:
            phase: Label for logs ("planning", "synthesis")
            **kwargs: All arguments passed to litellm.acompletion

        Returns:
            LiteLLM ModelResponse
        """
        model = kwargs.get("model", "unknown")
        if Config.DEBUG_LLM_CALLS:
            logger.debug(f"LLM request [{phase}]: {self._dump_request(kwargs)}")

        start = time.time()
        try:
            response = await acompletion(**kwargs)
        except Exception as e:
            logger.error(f"LLM call failed [{phase}] ({model}): {e}")
            raise

        duration_ms = (time.time() - start) * 1000
        log_llm_call(logger, model, self._total_tokens(response), duration_ms, phase)

        if Config.DEBUG_LLM_CALLS:
            logger.debug(f"LLM response [{phase}]: {response}")

        return response

    @staticmethod
    def _total_tokens(response: Any) -> Optional[int]:
        usage = getattr(response, "usage", None)
        return getattr(usage, "total_tokens", None) if usage else None

    @staticmethod
    def _dump_request(kwargs: Dict[str, Any]) -> str:
        safe = {k: v for k, v in kwargs.items() if k != "api_key"}
        return json.dumps(safe, default=str)[:5000]
