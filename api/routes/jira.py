"""
Jira Routes
Connect to Jira, inspect the session, and read stories to pre-fill test generation
"""
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
import logging

from ..models.jira import (
    JiraConnectRequest,
    JiraConnectResponse,
    JiraStatusResponse,
    JiraStoriesResponse,
    JiraStoryResponse,
    JiraDisconnectResponse,
    ErrorResponse
)
from ..dependencies import get_jira_session, get_jira_client, get_session_id, get_session_registry
from src.exceptions import ValidationError, AuthenticationError, NotConnectedError, UpstreamError
from src.jira_client import JiraClient
from src.jira_session import JiraSession, SessionRegistry
from src.models import StorySummary

router = APIRouter()
logger = logging.getLogger(__name__)

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid input"},
    401: {"model": ErrorResponse, "description": "Not connected or credentials rejected"},
    500: {"model": ErrorResponse, "description": "Jira request failed"},
}


def error_response(status_code: int, message: str, details: str = None) -> JSONResponse:
    content = {"success": False, "error": message}
    if details:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)


@router.post("/jira/connect",
         tags=["Jira"],
         response_model=JiraConnectResponse,
         responses=ERROR_RESPONSES,
         summary="Connect to Jira",
         description="Validate credentials against Jira (GET /rest/api/3/myself) and keep them for this session.")
def connect_jira(
    request: JiraConnectRequest,
    session_id: str = Depends(get_session_id),
    registry: SessionRegistry = Depends(get_session_registry)
):
    """Connect to Jira"""
    logger.info(f"📨 [Jira Connect] Attempting connection to: {request.baseUrl}")

    try:
        errors = request.validation_errors()
        if errors:
            raise ValidationError(f"Validation error: {', '.join(errors)}")

        session = registry.get(session_id)
        if not session.connect(request.baseUrl, request.email, request.apiToken):
            raise AuthenticationError("Failed to connect to Jira. Please check your credentials and try again.")

        logger.info("✅ [Jira Connect] Connection successful!")
        return JiraConnectResponse(
            success=True,
            message="Successfully connected to Jira",
            connection=session.get_connection_info()
        )
    except ValidationError as e:
        logger.error(f"❌ [Jira Connect] {e}")
        return error_response(400, str(e))
    except AuthenticationError as e:
        logger.error("❌ [Jira Connect] Connection failed")
        return error_response(401, str(e))
    except Exception as e:
        logger.error(f"❌ [Jira Connect] Error: {e}")
        return error_response(500, str(e) or "Internal server error")
    finally:
        registry.discard_disconnected(session_id)


@router.get("/jira/status",
        tags=["Jira"],
        response_model=JiraStatusResponse,
        summary="Get Jira connection status")
def get_jira_status(session: JiraSession = Depends(get_jira_session)):
    """Get connection status"""
    is_connected = session.is_connected()
    logger.info(f"✅ [Jira Status] Connection status: connected={is_connected}")
    return JiraStatusResponse(
        isConnected=is_connected,
        connection=session.get_connection_info()
    )


@router.get("/jira/stories",
        tags=["Jira"],
        response_model=JiraStoriesResponse,
        responses=ERROR_RESPONSES,
        summary="List stories",
        description="List the most recently updated stories. Tries Jira API v3 first and falls back to API v2.")
def list_jira_stories(jira_client: JiraClient = Depends(get_jira_client)):
    """Get all stories"""
    logger.info("📨 [Jira Stories] Fetching stories...")

    try:
        issues = jira_client.get_stories()
        stories = [StorySummary.from_issue(issue) for issue in issues if isinstance(issue, dict)]

        logger.info(f"✅ [Jira Stories] Fetched {len(stories)} stories")
        return JiraStoriesResponse(success=True, stories=stories)
    except NotConnectedError as e:
        logger.error("❌ [Jira Stories] Not connected to Jira")
        return error_response(401, str(e))
    except UpstreamError as e:
        logger.error(f"❌ [Jira Stories] Error: {e}")
        return error_response(
            500,
            str(e),
            details="Make sure your Jira instance is accessible and you have the correct permissions."
        )
    except Exception as e:
        logger.error(f"❌ [Jira Stories] Error: {e}")
        return error_response(500, str(e) or "Failed to fetch stories")


@router.get("/jira/story/{key}",
        tags=["Jira"],
        response_model=JiraStoryResponse,
        responses=ERROR_RESPONSES,
        summary="Get story details",
        description="Fetch summary, description and acceptance criteria of a story. Rich-text fields are returned as plain text.")
def get_jira_story(key: str, jira_client: JiraClient = Depends(get_jira_client)):
    """Get story details"""
    logger.info(f"📨 [Jira Story Details] Fetching details for: {key}")

    try:
        story = jira_client.get_story_details(key)

        logger.info(f"✅ [Jira Story Details] Fetched details for: {key}")
        return JiraStoryResponse(success=True, story=story)
    except NotConnectedError as e:
        logger.error("❌ [Jira Story Details] Not connected to Jira")
        return error_response(401, str(e))
    except Exception as e:
        logger.error(f"❌ [Jira Story Details] Error for {key}: {e}")
        return error_response(500, str(e) or "Failed to fetch story details")


@router.post("/jira/disconnect",
         tags=["Jira"],
         response_model=JiraDisconnectResponse,
         summary="Disconnect from Jira",
         description="Forget the session credentials. Nothing is sent to Jira.")
def disconnect_jira(
    session: JiraSession = Depends(get_jira_session),
    session_id: str = Depends(get_session_id),
    registry: SessionRegistry = Depends(get_session_registry)
):
    """Disconnect from Jira"""
    session.disconnect()
    registry.discard(session_id)
    logger.info("✅ [Jira Disconnect] Disconnected successfully")
    return JiraDisconnectResponse(success=True, message="Disconnected from Jira")
