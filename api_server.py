"""
API Server - Backward Compatibility Wrapper
Exposes the FastAPI app at the repository root:
    from api_server import app
"""
from api.main import app

# Re-export for backward compatibility
__all__ = ["app"]

# Start server when run directly (backward compatibility)
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8080, log_level="info")
