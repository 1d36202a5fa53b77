"""
LLM Configuration - Type-safe settings for LiteLLM calls
"""
from typing import Optional, Dict, Any, List
from pydantic import BaseModel, ConfigDict, Field

# Provider prefixes litellm understands; bare model names are treated as Gemini
KNOWN_PROVIDER_PREFIXES = ("gemini/", "vertex_ai/", "openai/", "anthropic/")


def normalize_model_name(model: str) -> str:
    """
    Map a caller-facing model name to a litellm model string

    Examples:
        "gemini-2.5-flash" -> "gemini/gemini-2.5-flash"
        "gemini/gemini-2.5-pro" -> unchanged
    """
    model = model.strip()
    if model.startswith(KNOWN_PROVIDER_PREFIXES):
        return model
    return f"gemini/{model}"


class LLMConfig(BaseModel):
    """
    Configuration for LLM API calls via LiteLLM

    Provides type-safe defaults and validation for the parameters the
    orchestrator uses.
    """
    model_config = ConfigDict(validate_assignment=True, extra="allow")

    # Model selection
    model: str = Field(description="litellm model string (e.g., 'gemini/gemini-2.5-flash')")

    # API keys
    api_key: Optional[str] = Field(None, description="API key for the provider")

    # Core parameters
    temperature: float = Field(0.7, ge=0.0, le=2.0, description="Sampling temperature")
    max_tokens: Optional[int] = Field(None, gt=0, description="Maximum tokens to generate")
    timeout: Optional[float] = Field(None, gt=0, description="Request timeout in seconds")

    # Tool use
    tools: Optional[List[Dict[str, Any]]] = Field(None, description="Tool declarations for this call")
    tool_choice: Optional[str] = Field(None, description="auto / none")

    # Structured output
    response_format: Optional[Dict[str, Any]] = Field(None, description="json_schema response format")

    def to_litellm_kwargs(self) -> Dict[str, Any]:
        """
        Convert to LiteLLM kwargs dictionary

        Returns:
            Dict with only non-None values for passing to acompletion()
        """
        kwargs = {"model": self.model}

        for field_name, value in self.model_dump(exclude={"model"}).items():
            if value is not None:
                kwargs[field_name] = value

        # An empty tool list means "no tools", not "tools=[]"
        if not kwargs.get("tools"):
            kwargs.pop("tools", None)
            kwargs.pop("tool_choice", None)

        return kwargs

    def with_overrides(self, **overrides) -> "LLMConfig":
        """Copy of this config with some fields replaced"""
        return self.model_copy(update=overrides)

    @staticmethod
    def from_config(
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        **overrides
    ) -> "LLMConfig":
        """
        Create LLMConfig with defaults from Config

        Args:
            model: Model name (default: Config.LLM_MODEL); bare names get the gemini/ prefix
            temperature: Sampling temperature (default: Config.LLM_TEMPERATURE)
            **overrides: Override any LLMConfig field

        Examples:
            LLMConfig.from_config()
            LLMConfig.from_config(model="gemini-2.5-pro", max_tokens=2000)
        """
        from config import Config

        defaults = {
            "model": normalize_model_name(model or Config.LLM_MODEL),
            "api_key": Config.GEMINI_API_KEY,
            "temperature": Config.LLM_TEMPERATURE if temperature is None else temperature,
        }
        defaults.update(overrides)

        return LLMConfig(**defaults)
