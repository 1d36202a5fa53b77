"""
API Client modules for external data providers.

Each client issues one request per call and returns a ToolResponse:
- fmp: Financial Modeling Prep market data
- options: Yahoo Finance option chains
"""
from .fmp import FMPClient, redact_api_key
from .options import OptionsChainClient

__all__ = ['FMPClient', 'redact_api_key', 'OptionsChainClient']
