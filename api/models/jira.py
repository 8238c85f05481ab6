"""
Jira Models
Request and response models for the Jira connection and story endpoints
"""
from pydantic import BaseModel, Field
from typing import Optional, List

from src.models import ConnectionInfo, StorySummary, StoryDetail


class JiraConnectRequest(BaseModel):
    """Credentials used to connect to a Jira instance"""
    baseUrl: str = Field(
        "",
        description="Jira base URL (a trailing slash is ignored)",
        examples=["https://your-domain.atlassian.net"]
    )
    email: str = Field(
        "",
        description="Atlassian account email",
        examples=["qa@example.com"]
    )
    apiToken: str = Field(
        "",
        description="Atlassian API token"
    )

    def validation_errors(self) -> List[str]:
        """Messages for every missing credential"""
        errors = []
        if not self.baseUrl.strip():
            errors.append("Base URL is required")
        if not self.email.strip():
            errors.append("Email is required")
        if not self.apiToken.strip():
            errors.append("API token is required")
        return errors


class JiraConnectResponse(BaseModel):
    """Response from a successful connect"""
    success: bool = Field(..., description="Whether the connection was established")
    message: str = Field(..., description="Status message")
    connection: Optional[ConnectionInfo] = Field(None, description="Connection details (never includes the token)")


class JiraStatusResponse(BaseModel):
    """Current connection status"""
    isConnected: bool = Field(..., description="Whether a Jira session is active")
    connection: Optional[ConnectionInfo] = Field(None, description="Connection details when connected")


class JiraStoriesResponse(BaseModel):
    """Stories available in the connected Jira project"""
    success: bool = Field(..., description="Whether the stories were fetched")
    stories: List[StorySummary] = Field(default_factory=list, description="Story summaries")


class JiraStoryResponse(BaseModel):
    """Detail of a single story"""
    success: bool = Field(..., description="Whether the story was fetched")
    story: StoryDetail = Field(..., description="Story detail")


class JiraDisconnectResponse(BaseModel):
    """Response from disconnect"""
    success: bool = Field(..., description="Always true")
    message: str = Field(..., description="Status message")


class ErrorResponse(BaseModel):
    """Error payload returned by the Jira and test generation endpoints"""
    success: bool = Field(False, description="Always false")
    error: str = Field(..., description="Error message")
    details: Optional[str] = Field(None, description="Troubleshooting hint")
