import uvicorn
import time
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from app.api.deps import close_gateway
from app.api.exercises import router as exercises_router
from app.api.goals import router as goals_router
from app.api.insights import router as insights_router
from app.core.config import CORS_ORIGINS
from app.core.errors import CompletionBackendError, UnrepairableResponseError, ValidationError
from app.llm.router import LLMRouter
from app.utils.logging_config import setup_logging

# Initialize enhanced logging
setup_logging(level=logging.INFO)
logger = logging.getLogger("main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await close_gateway()


app = FastAPI(title="Learning Platform Structured Generation API", lifespan=lifespan)

# ---------------------------------------------------------------------------
# Logging Middleware
# ---------------------------------------------------------------------------
class LoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        client_host = request.client.host if request.client else "unknown"
        logger.info("Incoming: %s %s from %s", request.method, request.url.path, client_host)

        try:
            response = await call_next(request)
            process_time = (time.time() - start_time) * 1000
            logger.info(
                "Outgoing: %s %s - Status: %d - Time: %.2fms",
                request.method, request.url.path, response.status_code, process_time,
            )
            return response
        except Exception as e:
            logger.error("Request failed: %s %s - Error: %s", request.method, request.url.path, e)
            raise

app.add_middleware(LoggingMiddleware)

# ---------------------------------------------------------------------------
# CORS: origins from CORS_ORIGINS
# ---------------------------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------------------------------------------------------------------
# Core error → HTTP status
# ---------------------------------------------------------------------------
@app.exception_handler(CompletionBackendError)
async def completion_backend_error_handler(request: Request, exc: CompletionBackendError):
    logger.error("Completion backend failed on %s: %s", request.url.path, exc)
    return JSONResponse(status_code=502, content={"detail": str(exc), "error": exc.code})


@app.exception_handler(UnrepairableResponseError)
async def unrepairable_response_handler(request: Request, exc: UnrepairableResponseError):
    return JSONResponse(
        status_code=502,
        content={"detail": "The model returned a response that could not be parsed.", "error": exc.code},
    )


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    logger.warning("Generated data failed validation on %s: %s", request.url.path, exc)
    return JSONResponse(status_code=422, content={"detail": str(exc), "error": exc.code})


# Health endpoint
@app.get("/health")
async def health_check():
    return {"status": "ok", "providers": LLMRouter().provider_state}

# Register routers
app.include_router(exercises_router)
app.include_router(goals_router)
app.include_router(insights_router)

if __name__ == "__main__":
    uvicorn.run("main:app", host="127.0.0.1", port=8000, reload=True)
