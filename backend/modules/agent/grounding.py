"""
Grounding decision - should a request get the web search capability?

Definitional or explanatory questions ("what is a covered call", "explain
theta decay") are answered better with web search than with market data
tools. The decision is a regex over the raw prompt text, kept behind this
one predicate so the policy can be swapped without touching the
orchestration loop.
"""
import re

GROUNDING_PATTERN = re.compile(
    r"\b("
    r"what\s+(is|are)"
    r"|what's"
    r"|who\s+is"
    r"|explain"
    r"|define"
    r"|definition"
    r"|meaning\s+of"
    r"|how\s+(does|do)"
    r"|why"
    r"|tell\s+me\s+about"
    r")\b",
    re.IGNORECASE,
)


def needs_grounding(prompt: str) -> bool:
    """True when the prompt reads as a definitional/explanatory question"""
    if not prompt:
        return False
    return GROUNDING_PATTERN.search(prompt) is not None
