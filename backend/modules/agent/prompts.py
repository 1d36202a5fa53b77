"""
System prompts and fixed messages for the tool orchestrator
"""
import json
from datetime import datetime
from typing import Any, Dict


# Planning call: decide between a tool call and a direct answer
PLANNING_SYSTEM_PROMPT = """You are the market-data assistant of an AI paper trading app.

**CRITICAL RULES:**

1. If answering requires live or historical market data, respond ONLY with a function call. Do not ask the user for confirmation and do not announce what you are about to do.
2. If you need several pieces of data, request all of the function calls at once.
3. If no tool is needed, answer the user directly now.
4. Use uppercase ticker symbols (e.g., AAPL, MSFT).

Never invent prices, ratings or dates. If a tool reports an error or no data, say so plainly."""


# Synthesis call: present tool results
SYNTHESIS_INSTRUCTION = (
    "Using only the tool results above, answer my original request. "
    "Present the results plainly and concisely, with no extra analysis or speculation. "
    "If a result reports an error or that nothing was found, state that clearly."
)

SCHEMA_INSTRUCTION_TEMPLATE = (
    "Using only the tool results above, answer my original request as a single raw JSON object "
    "that conforms to this JSON schema. Respond with the JSON object only: no markdown fences, "
    "no commentary.\n\nSchema:\n{schema}"
)


# Degraded outcomes
NO_CANDIDATE_MESSAGE = (
    "Sorry, I couldn't generate a response for that request. Please try rephrasing it or try again later."
)

FINISH_REASON_MESSAGES = {
    "content_filter": "The response was blocked by the model's safety filters.",
    "safety": "The response was blocked by the model's safety filters.",
    "recitation": "The response was blocked because it closely matched copyrighted material.",
    "length": "The response was cut off because it reached the maximum length.",
    "max_tokens": "The response was cut off because it reached the maximum length.",
}


def get_planning_prompt() -> str:
    """Planning system prompt with the current date appended"""
    current_date = datetime.now().strftime("%A, %B %d, %Y")
    return f"{PLANNING_SYSTEM_PROMPT}\n\nCurrent date: {current_date}"


def get_synthesis_instruction(response_schema: Dict[str, Any] = None) -> str:
    if response_schema is None:
        return SYNTHESIS_INSTRUCTION
    return SCHEMA_INSTRUCTION_TEMPLATE.format(schema=json.dumps(response_schema, indent=2))


def get_abnormal_finish_message(finish_reason: str) -> str:
    """User-facing explanation for a response that did not finish normally"""
    reason = str(finish_reason).lower()
    detail = FINISH_REASON_MESSAGES.get(reason, "The model stopped before completing its answer.")
    return f"I couldn't complete that response (reason: {reason}). {detail}"
