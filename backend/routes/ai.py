"""
AI generation API routes
"""
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from models import GenerateRequest, GenerateResponse, ErrorResponse
from modules.ai_service import AIService, get_ai_service
from modules.agent.orchestrator import OrchestrationError
from utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/ai", tags=["ai"])


@router.post(
    "/generate",
    response_model=GenerateResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}
)
async def generate(
    request: GenerateRequest,
    service: AIService = Depends(get_ai_service)
):
    """
    Answer a prompt, calling market-data tools when the model asks for them

    Returns:
        {"text": ...}; with responseSchema the text is a raw JSON string
    """
    if not request.prompt or not request.prompt.strip():
        logger.warning("Bad Request - Missing prompt")
        return JSONResponse(status_code=400, content={"error": "Bad Request: Missing prompt."})

    try:
        result = await service.generate(
            prompt=request.prompt,
            model=request.model,
            enable_tools=request.enable_tools,
            response_schema=request.response_schema,
            google_search=request.google_search
        )
    except OrchestrationError as e:
        logger.error(f"Generation failed: {e.message}")
        return JSONResponse(
            status_code=e.status_code,
            content={"error": f"Error generating content from Gemini API: {e.message}"}
        )

    return GenerateResponse(text=result.text)
