"""
Models Package
Export all API models for easy imports
"""
# Jira models
from .jira import (
    JiraConnectRequest,
    JiraConnectResponse,
    JiraStatusResponse,
    JiraStoriesResponse,
    JiraStoryResponse,
    JiraDisconnectResponse,
    ErrorResponse
)

# Test generation models
from .generation import (
    GenerateRequest,
    GenerateResponse
)

__all__ = [
    "JiraConnectRequest",
    "JiraConnectResponse",
    "JiraStatusResponse",
    "JiraStoriesResponse",
    "JiraStoryResponse",
    "JiraDisconnectResponse",
    "ErrorResponse",
    "GenerateRequest",
    "GenerateResponse",
]
