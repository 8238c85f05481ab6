"""
Main FastAPI Application
FastAPI app creation, CORS configuration, error handlers, and startup
"""
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import os
import logging

from .dependencies import initialize_services
from .routes import api_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load configuration and create the Jira session registry on startup"""
    initialize_services(os.getenv("CONFIG_PATH", "config.yaml"))
    yield
    logger.info("Application shutting down")


# Create FastAPI app
app = FastAPI(
    title="Story to Tests",
    description="Generate test cases from user stories, with Jira story import.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan
)

# Configure CORS
cors_origins = [
    "http://localhost:5173",  # Vite default dev server
    "http://localhost:3000",
    "http://127.0.0.1:5173",
    "http://127.0.0.1:3000",
]
cors_origins.extend(
    origin.strip() for origin in os.getenv("CORS_ORIGINS", "").split(",") if origin.strip()
)

is_development = os.getenv("ENVIRONMENT", "development").lower() == "development"

if is_development:
    logger.info("CORS: Running in development mode - allowing all origins")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,  # Must be False when using allow_origins=["*"]
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )
else:
    logger.info(f"CORS: Running in production mode - allowing {len(cors_origins)} origins")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report malformed request bodies as 400 with a readable message"""
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        messages.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    logger.error(f"❌ Validation failed for {request.url.path}: {messages}")
    return JSONResponse(
        status_code=400,
        content={"success": False, "error": f"Validation error: {', '.join(messages)}"}
    )


# Include all routers
app.include_router(api_router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8080, log_level="info")
