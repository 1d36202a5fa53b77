"""
Models for tool system
"""
from typing import Any, Dict, Callable, FrozenSet


class Tool:
    """
    A tool that can be called by the LLM.
    Wraps an async function and provides the function-declaration schema.

    Declarations are built once at import time and never mutated afterwards.
    """

    __slots__ = ("_name", "_description", "_handler", "_parameters_schema")

    def __init__(
        self,
        name: str,
        description: str,
        handler: Callable,
        parameters_schema: Dict[str, Any],
    ):
        self._name = name
        self._description = description
        self._handler = handler
        self._parameters_schema = parameters_schema

    @property
    def name(self) -> str:
        return self._name

    @property
    def description(self) -> str:
        return self._description

    @property
    def handler(self) -> Callable:
        return self._handler

    @property
    def parameters_schema(self) -> Dict[str, Any]:
        # Hand out a copy so callers cannot edit the declaration
        return {
            "type": self._parameters_schema["type"],
            "properties": {k: dict(v) for k, v in self._parameters_schema["properties"].items()},
            "required": list(self._parameters_schema["required"]),
        }

    @property
    def required(self) -> FrozenSet[str]:
        return frozenset(self._parameters_schema["required"])

    def to_openai_schema(self) -> Dict[str, Any]:
        """Convert to OpenAI tool calling schema (litellm translates it per provider)"""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters_schema
            }
        }

    def __repr__(self) -> str:
        return f"Tool(name={self.name!r})"
