"""
AI Agent module - tool orchestration for market-data questions

The orchestrator itself lives in modules.agent.orchestrator (it imports the
tool catalog, which imports this package's context).
"""
from .llm_config import LLMConfig
from .llm_handler import LLMHandler
from .context import AgentContext

__all__ = ['LLMConfig', 'LLMHandler', 'AgentContext']
