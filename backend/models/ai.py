"""
AI generation request/response models
"""
from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from typing import Optional, Dict, Any


class GenerateRequest(BaseModel):
    """
    Request body for POST /ai/generate

    Accepts the camelCase names the web client sends (enableTools,
    responseSchema or schema, googleSearch) as well as snake_case.
    """
    model_config = ConfigDict(populate_by_name=True)

    prompt: Optional[str] = None
    model: Optional[str] = None
    enable_tools: bool = Field(
        False, validation_alias=AliasChoices("enableTools", "enable_tools")
    )
    response_schema: Optional[Dict[str, Any]] = Field(
        None, validation_alias=AliasChoices("responseSchema", "schema", "response_schema")
    )
    google_search: bool = Field(
        False, validation_alias=AliasChoices("googleSearch", "google_search")
    )


class GenerateResponse(BaseModel):
    """Response body for POST /ai/generate"""
    text: str


class ErrorResponse(BaseModel):
    error: str
