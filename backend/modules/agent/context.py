"""
Agent Context - Pydantic model for tool execution context
"""
from typing import Optional, Any
from pydantic import BaseModel, ConfigDict


class AgentContext(BaseModel):
    """
    Context for tool execution

    Contains all values that tools need but that are not generated by the LLM:
    - Data clients (injected per service, never module-level globals)
    - Caller identification from the identity provider, when known
    """
    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    fmp: Any  # FMPClient
    options: Any  # OptionsChainClient
    user_id: Optional[str] = None  # Opaque authenticated-user id
