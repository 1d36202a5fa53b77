"""
Helpers for post-processing model text
"""
import json

from utils.logger import get_logger

logger = get_logger(__name__)


def strip_markdown_code_fences(text: str) -> str:
    """
    Strip markdown code fences from text if present.
    Handles formats like:
    - ```json\n{...}\n```
    - ```\n{...}\n```
    """
    text = text.strip()

    if text.startswith("```"):
        # Opening fence runs to the first newline (may carry a language tag)
        first_newline = text.find("\n")
        if first_newline != -1:
            text = text[first_newline + 1:]
        else:
            text = text[3:]

        if text.endswith("```"):
            text = text[:-3]

        text = text.strip()

    return text


def extract_json_text(text: str) -> str:
    """
    Return the fence-stripped text when it parses as JSON, otherwise the
    raw text unchanged.
    """
    cleaned = strip_markdown_code_fences(text)
    try:
        json.loads(cleaned)
    except (json.JSONDecodeError, ValueError):
        logger.warning("Structured response did not parse as JSON; returning raw text")
        return text
    return cleaned
