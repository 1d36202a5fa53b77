"""
Pydantic models for the AI Paper Trader API
"""
from .ai import GenerateRequest, GenerateResponse, ErrorResponse
from .conversation import ConversationHistory, ConversationTurn, FunctionCall

__all__ = [
    "GenerateRequest",
    "GenerateResponse",
    "ErrorResponse",
    "ConversationHistory",
    "ConversationTurn",
    "FunctionCall",
]
