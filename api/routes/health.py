"""
Health Routes
Health check endpoints
"""
from fastapi import APIRouter
from fastapi.responses import JSONResponse
from datetime import datetime
from .. import dependencies
from ..dependencies import get_session_registry

router = APIRouter()


@router.get("/", tags=["Health"])
async def root():
    """Basic health check endpoint"""
    return {
        "message": "Story to Tests API",
        "status": "healthy",
        "version": "1.0.0",
        "docs_url": "/docs",
        "redoc_url": "/redoc"
    }


@router.get("/health", tags=["Health"])
async def health_check():
    """Health check including the default Jira session and LLM state"""
    try:
        session = get_session_registry().get()
        return {
            "status": "healthy",
            "timestamp": datetime.now().isoformat(),
            "services": {
                "jira": "connected" if session.is_connected() else "disconnected",
                "llm": "configured" if dependencies.llm_client is not None else "not configured"
            }
        }
    except Exception as e:
        return JSONResponse(
            status_code=503,
            content={
                "status": "unhealthy",
                "error": str(e),
                "timestamp": datetime.now().isoformat()
            }
        )
