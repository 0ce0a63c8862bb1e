from contextlib import asynccontextmanager
from fastapi import FastAPI, status, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.openapi.utils import get_openapi
import time
import uvicorn

from . import __version__
from .core.config import settings
from .core.logger import get_logger, setup_logging
from .crud.errors import StoreError
from .schemas import StatusResponse
from .api.v1 import router as prompts_router
from .api.v1 import deps, errors

# Initialize logger
logger = get_logger(__name__)

DESCRIPTION = (
    "Simple prompt storage API that enables users to store and retrieve prompts, "
    "no longer requiring new deployments for prompt updates."
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan context manager."""
    setup_logging()
    logger.info("Starting Prompt Storage Service...")
    logger.info(f"Stage: {settings.STAGE}")
    logger.info(f"Log level: {settings.LOG_LEVEL}")
    logger.info(f"Database path: {settings.DATABASE_PATH}")

    # A store that cannot be opened aborts startup
    deps.get_store()

    yield

    logger.info("Shutting down Prompt Storage Service...")
    deps.close_store()


app = FastAPI(
    title=settings.PROJECT_NAME,
    description=DESCRIPTION,
    version=__version__,
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "Prompts",
            "description": "Create, read, version, and archive prompts."
        }
    ],
    swagger_ui_parameters={
        "syntaxHighlight.theme": "obsidian",
        "displayRequestDuration": True,
        "filter": True,
    },
)


def custom_openapi():
    if app.openapi_schema:
        return app.openapi_schema

    openapi_schema = get_openapi(
        title=settings.PROJECT_NAME,
        version=__version__,
        description=DESCRIPTION,
        routes=app.routes,
        tags=[
            {
                "name": "Prompts",
                "description": "Create, read, version, and archive prompts."
            }
        ],
        servers=[
            {
                "url": f"http://localhost:{settings.PORT}",
                "description": "Local development server"
            }
        ]
    )

    app.openapi_schema = openapi_schema
    return app.openapi_schema

app.openapi = custom_openapi

# CORS Middleware
if settings.BACKEND_CORS_ORIGINS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[str(origin) for origin in settings.BACKEND_CORS_ORIGINS],
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )


# Exception handlers
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.error(f"Validation error for request: {request.method} {request.url}")
    return await errors.http_error_handler(
        request,
        errors.PromptValidationError(
            "Invalid request data",
            errors=[
                {"loc": list(error["loc"]), "msg": error["msg"], "type": error["type"]}
                for error in exc.errors()
            ]
        )
    )


app.add_exception_handler(errors.PromptError, errors.http_error_handler)
app.add_exception_handler(StoreError, errors.store_error_handler)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """Handle unhandled exceptions and return a JSON response."""
    logger.error(
        f"Unhandled exception: {str(exc)}\n"
        f"Request: {request.method} {request.url}\n"
        f"Client: {request.client.host if request.client else 'unknown'}",
        exc_info=True
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "message": "Internal server error",
            "status_code": status.HTTP_500_INTERNAL_SERVER_ERROR
        }
    )


# --- Router Inclusion ---
app.include_router(prompts_router)


# Middleware for request logging
@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Middleware to log all incoming requests and their responses."""
    start_time = time.time()

    logger.info(f"Request: {request.method} {request.url}")

    response = await call_next(request)

    process_time = round((time.time() - start_time) * 1000, 2)

    logger.info(
        f"Response: {request.method} {request.url} "
        f"Status: {response.status_code} "
        f"Time: {process_time}ms"
    )

    response.headers["X-Process-Time"] = str(process_time)

    return response


# Health check endpoint
@app.get("/health", response_model=StatusResponse, status_code=status.HTTP_200_OK, tags=["Health"])
async def health_check() -> StatusResponse:
    """Health check endpoint"""
    return StatusResponse(
        status="ok",
        service="prompt-storage-service",
        version=__version__
    )


def run() -> None:
    """Serve the application with uvicorn on the configured port."""
    uvicorn.run(
        "prompt_storage.app.main:app",
        host=settings.HOST,
        port=settings.PORT,
        workers=1
    )


if __name__ == "__main__":
    run()
