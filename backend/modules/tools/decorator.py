"""
Tool decorator for converting functions into LLM-callable tools
"""
import inspect
from typing import Callable, Optional, Any, Dict, Literal, Union, get_origin, get_args

from .models import Tool
from utils.logger import get_logger

logger = get_logger(__name__)


def tool(
    description: str,
    name: Optional[str] = None,
    registry=None
):
    """
    Decorator to convert an async function into an LLM-callable tool.

    Usage:
        @tool(description="Get the latest price for a stock symbol")
        async def get_latest_quote(
            *,  # Force keyword args
            context: AgentContext,  # Hidden from LLM - injected by executor
            symbol: str  # Visible to LLM
        ) -> ToolResponse:
            ...

    Requirements:
    - Function must be async and accept keyword-only arguments (use * separator)
    - Function must have a 'context' parameter (never exposed in the schema)
    - Parameters without defaults are marked required
    - Literal[...] annotations become JSON-schema enums

    Args:
        description: Description of what the tool does (for LLM documentation)
        name: Tool name (defaults to function name if not provided)
        registry: Registry to register into (defaults to the global tool_registry)
    """
    def decorator(func: Callable) -> Callable:
        tool_name = name or func.__name__
        sig = inspect.signature(func)

        if not inspect.iscoroutinefunction(func):
            raise ValueError(f"Tool function '{tool_name}' must be async")

        has_kwonly = any(
            p.kind == inspect.Parameter.KEYWORD_ONLY
            for p in sig.parameters.values()
        )
        if not has_kwonly:
            raise ValueError(
                f"Tool function '{tool_name}' must use keyword-only arguments. "
                "Add * before parameters: async def func(*, context, param1, param2)"
            )

        if 'context' not in sig.parameters:
            raise ValueError(
                f"Tool function '{tool_name}' must have a 'context' parameter"
            )

        properties = {}
        required = []

        for param_name, param in sig.parameters.items():
            if param_name == 'context':
                continue

            param_schema = _annotation_to_schema(param.annotation)
            param_schema["description"] = _extract_param_description(func, param_name)
            properties[param_name] = param_schema

            if param.default == inspect.Parameter.empty:
                required.append(param_name)

        parameters_schema = {
            "type": "object",
            "properties": properties,
            "required": required
        }

        tool_obj = Tool(
            name=tool_name,
            description=description,
            handler=func,
            parameters_schema=parameters_schema,
        )

        func._tool = tool_obj

        # AUTO-REGISTER: Register tool immediately when decorator is applied
        target = registry
        if target is None:
            from .registry import tool_registry
            target = tool_registry
        target.register(tool_obj)

        return func

    return decorator


def _annotation_to_schema(annotation) -> Dict[str, Any]:
    """Build the JSON schema fragment for one parameter annotation"""
    annotation = _unwrap_optional(annotation)

    if get_origin(annotation) is Literal:
        values = list(get_args(annotation))
        return {"type": _python_type_to_json_type(type(values[0])), "enum": values}

    schema = {"type": _python_type_to_json_type(annotation)}
    if get_origin(annotation) is list:
        args = get_args(annotation)
        schema["items"] = {"type": _python_type_to_json_type(args[0]) if args else "string"}
    return schema


def _unwrap_optional(annotation):
    """Optional[X] -> X"""
    if get_origin(annotation) is Union:
        non_none = [a for a in get_args(annotation) if a is not type(None)]
        if len(non_none) == 1:
            return non_none[0]
    return annotation


def _python_type_to_json_type(annotation) -> str:
    """Convert Python type annotation to JSON schema type"""
    if annotation == inspect.Parameter.empty or annotation is None:
        return "string"

    origin = get_origin(annotation)

    if origin is list:
        return "array"
    if origin is dict:
        return "object"

    type_map = {
        str: "string",
        int: "integer",
        float: "number",
        bool: "boolean",
        list: "array",
        dict: "object"
    }

    return type_map.get(annotation, "string")


def _extract_param_description(func: Callable, param_name: str) -> str:
    """
    Extract parameter description from function docstring.
    Looks for Args section with parameter descriptions.
    """
    docstring = inspect.getdoc(func)
    if not docstring:
        return f"Parameter: {param_name}"

    in_args_section = False

    for line in docstring.split('\n'):
        stripped = line.strip()

        if stripped.lower().startswith('args:'):
            in_args_section = True
            continue

        # Leaving Args section
        if in_args_section and stripped.endswith(':') and not stripped.startswith(param_name):
            break

        if in_args_section and stripped.startswith(f"{param_name}:"):
            return stripped.split(':', 1)[1].strip()

    return f"Parameter: {param_name}"
