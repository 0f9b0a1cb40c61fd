"""Main entry point for the Louisiana Business Assistant relay API."""
import logging
from typing import Any

from fastapi import FastAPI, Request, Response
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import PORT, CORS_ORIGINS, CORS_HEADERS, LOG_FORMAT, LOG_LEVEL
from logger import setup_logging
from models.api import ChatResponse, ErrorResponse, HealthResponse
from services.relay import ChatRelay, RelayResult

if LOG_FORMAT == "json":
    setup_logging(LOG_LEVEL)

# Initialize logging
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Louisiana Business Assistant",
    description="Chat relay forwarding small business questions to a hosted LLM",
    version="1.0.0"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Stateless, so one instance serves every request
relay = ChatRelay()


@app.middleware("http")
async def add_cors_headers(request: Request, call_next):
    """Attach permissive CORS headers even when the request carries no Origin."""
    response = await call_next(request)
    for name, value in CORS_HEADERS.items():
        response.headers.setdefault(name, value)
    return response


@app.options("/{path:path}")
async def preflight(path: str) -> Response:
    """Answer pre-flight requests unconditionally."""
    return Response(status_code=200)


@app.get("/")
async def root():
    """Banner endpoint."""
    return {"status": "ok", "message": "Louisiana Business Assistant API"}


@app.get("/api/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Diagnostic health check."""
    return HealthResponse(status="ok", hasApiKey=relay.has_api_key)


@app.post(
    "/api/chat",
    responses={
        200: {"model": ChatResponse},
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        429: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    }
)
async def chat_endpoint(request: Request) -> JSONResponse:
    """
    Relay a conversation to the completion provider.

    The body is validated by the relay rather than by a pydantic model so
    that a missing or non-list ``messages`` field answers 400 with the
    documented error body instead of FastAPI's 422.
    """
    payload: Any
    try:
        payload = await request.json()
    except ValueError:
        payload = None

    # The provider SDK call blocks, so keep it off the event loop
    result: RelayResult = await run_in_threadpool(relay.handle, payload)
    if not result.ok:
        logger.warning(f"Chat request failed: status={result.status_code}, kind={result.error_kind.name}")
    return JSONResponse(status_code=result.status_code, content=result.body)


if __name__ == "__main__":
    import uvicorn
    logger.info(f"Starting Louisiana Business Assistant API on port {PORT}")
    logger.info(f"API key configured: {'yes' if relay.has_api_key else 'no'}")
    uvicorn.run(app, host="0.0.0.0", port=PORT)
