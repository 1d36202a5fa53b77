from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import time

from config import Config
from routes import ai_router, proxy_router
from utils.logger import configure_logging, get_logger

# Configure logging for the entire application
configure_logging()
logger = get_logger(__name__)

# Import tool definitions to register all tools
from modules.tools import definitions  # noqa: F401 - imported for side effects (tool registration)
from modules.tools import tool_registry
from modules.ai_service import get_ai_service


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Registered {len(tool_registry)} tools: {[t.name for t in tool_registry.list_tools()]}")
    if not Config.FMP_API_KEY:
        logger.warning("FMP_API_KEY is not set - market data tools will return errors")
    if not Config.GEMINI_API_KEY:
        logger.warning("GEMINI_API_KEY is not set - generation requests will fail")
    yield
    if get_ai_service.cache_info().currsize:
        await get_ai_service().aclose()


app = FastAPI(
    title="AI Paper Trader API",
    description="LLM tool orchestration over market and options data",
    version="1.0.0",
    lifespan=lifespan
)


# Add simple timing middleware for request duration logging
@app.middleware("http")
async def log_requests(request, call_next):
    start_time = time.time()
    response = await call_next(request)
    duration = (time.time() - start_time) * 1000

    logger.info(
        f"{request.method} {request.url.path} - {response.status_code} ({duration:.0f}ms)",
        extra={
            "method": request.method,
            "path": request.url.path,
            "status": response.status_code,
            "duration_ms": round(duration, 2),
            "type": "http_request"
        }
    )
    return response


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies are client errors with the same {"error"} shape"""
    logger.warning(f"Invalid request to {request.url.path}: {exc.errors()}")
    return JSONResponse(status_code=400, content={"error": "Bad Request: Invalid request body."})


logger.info("AI Paper Trader API initialized")

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=Config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(ai_router)
app.include_router(proxy_router)


@app.get("/")
async def root():
    """Root endpoint"""
    return {"message": "AI Paper Trader API", "status": "running"}


@app.get("/health")
async def health():
    """Health check endpoint"""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    logger.info(f"AI Paper Trader API starting on {Config.API_HOST}:{Config.API_PORT}")
    logger.info(f"API Documentation: http://localhost:{Config.API_PORT}/docs")
    uvicorn.run(
        app,
        host=Config.API_HOST,
        port=Config.API_PORT,
        timeout_keep_alive=5,
        log_level="info"
    )
