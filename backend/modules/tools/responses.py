"""
Standard tool result models

Every client call and tool executor returns a ToolResponse: either a success
carrying `data`, or an error carrying `error` and (when known) an HTTP-style
`status`. Never both.
"""
from typing import Any, Optional, Dict
from pydantic import BaseModel, Field, model_validator


class ToolResponse(BaseModel):
    """
    Result of a single data fetch or tool execution.

    Example:
        return ToolSuccess(data=[{"symbol": "AAPL", "price": 190.1}])
        return ToolError(error="FMP API Error: 429 Limit Reach", status=429)
    """
    data: Any = Field(default=None, description="Tool result data")
    error: Optional[str] = Field(default=None, description="Error message if the call failed")
    status: Optional[int] = Field(default=None, description="HTTP-style status for errors")
    details: Any = Field(default=None, description="Upstream error body, when one was returned")

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    @model_validator(mode="after")
    def _data_or_error(self) -> "ToolResponse":
        if self.error is not None and self.data is not None:
            raise ValueError("ToolResponse carries either data or error, not both")
        return self

    @property
    def success(self) -> bool:
        return self.error is None

    def to_payload(self) -> Dict[str, Any]:
        """Plain dict form: {"data": ...} or {"error": ..., "status": ...}"""
        if self.success:
            return {"data": self.data}
        payload: Dict[str, Any] = {"error": self.error}
        if self.status is not None:
            payload["status"] = self.status
        return payload


class ToolSuccess(ToolResponse):
    """Convenience class for successful tool responses"""

    def __init__(self, data: Any = None, **kwargs):
        super().__init__(data=data, error=None, status=None, **kwargs)


class ToolError(ToolResponse):
    """Convenience class for error responses"""

    def __init__(self, error: str, status: Optional[int] = None, details: Any = None, **kwargs):
        super().__init__(data=None, error=error, status=status, details=details, **kwargs)
