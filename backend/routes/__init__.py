"""
API route handlers
"""
from .ai import router as ai_router
from .proxy import router as proxy_router

__all__ = ["ai_router", "proxy_router"]
