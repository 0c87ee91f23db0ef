from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from replydesk.core.logging_config import setup_logging
from replydesk.core.settings import settings
from replydesk.exceptions import NotFoundException, describe_validation_errors
from replydesk.middleware.logging import LoggingMiddleware
from replydesk.routes import ai, analytics, health, inquiries, integrations, responses, templates
from replydesk.services.ai_gateway import AIGateway
from replydesk.services.demo_data import seed_demo_data
from replydesk.services.llm import get_llm_provider, reset_llm_provider
from replydesk.storage import create_storage

# Set up logging first
logger = setup_logging()

API_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("=" * 50)
    logger.info("ReplyDesk API starting up")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"CORS origins: {settings.cors_origins}")

    app.state.storage = create_storage()
    provider = get_llm_provider()
    app.state.ai_gateway = AIGateway(provider)
    logger.info(f"LLM provider: {provider!r} ({'configured' if provider.is_available() else 'not configured, AI results degraded'})")

    if settings.seed_demo_data:
        seed_demo_data(app.state.storage, settings.demo_username, settings.demo_password)
    logger.info("=" * 50)

    yield
    reset_llm_provider()
    logger.info("ReplyDesk API shutting down")


app = FastAPI(
    title="ReplyDesk API",
    description="Customer inquiry triage, reply templates and automation analytics",
    version=API_VERSION,
    docs_url="/docs" if not settings.is_production else None,
    redoc_url="/redoc" if not settings.is_production else None,
    lifespan=lifespan,
)

# Last added = first executed
app.add_middleware(LoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_origins != ["*"],
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

app.include_router(health.router, tags=["Health"])
app.include_router(templates.router)
app.include_router(inquiries.router)
app.include_router(responses.router)
app.include_router(analytics.router)
app.include_router(integrations.router)
app.include_router(ai.router)


def _correlation_id(request: Request) -> str:
    return getattr(request.state, "correlation_id", "unknown")


def _validation_response(request: Request, errors) -> JSONResponse:
    correlation_id = _correlation_id(request)
    detail = describe_validation_errors(errors)
    logger.warning(f"[{correlation_id}] Validation error on {request.url.path}: {detail}")
    return JSONResponse(
        status_code=400,
        content={
            "detail": detail,
            "errors": jsonable_encoder(errors, exclude={"ctx", "url", "input"}),
            "correlation_id": correlation_id,
        },
    )


@app.exception_handler(RequestValidationError)
async def request_validation_exception_handler(request: Request, exc: RequestValidationError):
    return _validation_response(request, exc.errors())


@app.exception_handler(ValidationError)
async def model_validation_exception_handler(request: Request, exc: ValidationError):
    # Raised when a partial update merges into an invalid record
    return _validation_response(request, exc.errors())


@app.exception_handler(NotFoundException)
async def not_found_exception_handler(request: Request, exc: NotFoundException):
    correlation_id = _correlation_id(request)
    logger.warning(f"[{correlation_id}] Not found error on {request.url.path}: {exc.detail}")
    return JSONResponse(
        status_code=404,
        content={"detail": exc.detail, "correlation_id": correlation_id}
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    correlation_id = _correlation_id(request)
    logger.error(f"[{correlation_id}] Unhandled exception on {request.url.path}: {str(exc)}", exc_info=True)

    content = {"detail": "Internal server error", "correlation_id": correlation_id}
    if settings.is_development:
        content["error"] = str(exc)
        content["type"] = type(exc).__name__
    return JSONResponse(status_code=500, content=content)


@app.get("/", tags=["Root"])
def root():
    """Root endpoint with API information."""
    return {
        "message": "ReplyDesk API",
        "version": API_VERSION,
        "environment": settings.environment,
        "docs_url": "/docs" if not settings.is_production else None,
        "health_check": "/health",
        "status": "running",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=8000,
        log_level="info" if settings.is_development else "warning"
    )
