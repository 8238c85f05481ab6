"""
Routes Package
Aggregate all route routers
"""
from fastapi import APIRouter

# Import all routers
from .health import router as health_router
from .jira import router as jira_router
from .generation import router as generation_router

# Create main router
api_router = APIRouter()

# Include all routers
api_router.include_router(health_router)
api_router.include_router(jira_router, prefix="/api")
api_router.include_router(generation_router, prefix="/api")
