"""
Shared Dependencies
Global configuration, Jira sessions and the LLM client shared across all routes
"""
from typing import Optional
from fastapi import Depends, Header
from src.config import Config
from src.jira_client import JiraClient
from src.jira_session import JiraSession, SessionRegistry, DEFAULT_SESSION_ID
from src.llm_client import LLMClient
from src.test_generator import StoryTestGenerator
import logging

logger = logging.getLogger(__name__)

# Global variables (initialized on startup)
config: Optional[Config] = None
session_registry: Optional[SessionRegistry] = None
llm_client: Optional[LLMClient] = None


def get_config() -> Config:
    """Get Config instance"""
    if config is None:
        raise RuntimeError("Config not initialized - ensure startup event completed")
    return config


def get_session_registry() -> SessionRegistry:
    """Get the Jira session registry"""
    if session_registry is None:
        raise RuntimeError("Session registry not initialized - ensure startup event completed")
    return session_registry


def get_session_id(x_session_id: Optional[str] = Header(None)) -> str:
    """Session id from the optional X-Session-ID header"""
    return x_session_id or DEFAULT_SESSION_ID


def get_jira_session(
    session_id: str = Depends(get_session_id),
    registry: SessionRegistry = Depends(get_session_registry)
) -> JiraSession:
    """Existing Jira session, or a disconnected one that is not registered"""
    return registry.find(session_id) or JiraSession()


def get_jira_client(
    session: JiraSession = Depends(get_jira_session),
    cfg: Config = Depends(get_config)
) -> JiraClient:
    """Story client bound to the request's Jira session"""
    return JiraClient(
        session=session,
        acceptance_criteria_field=cfg.get_acceptance_criteria_field(),
        story_jql=cfg.get_story_jql(),
        max_results=cfg.get_max_results()
    )


def get_test_generator() -> Optional[StoryTestGenerator]:
    """Test generator, or None when no LLM provider is configured"""
    if llm_client is None:
        return None
    return StoryTestGenerator(llm_client)


def initialize_services(config_path: str = "config.yaml"):
    """Load configuration, create the session registry and the LLM client"""
    global config, session_registry, llm_client

    try:
        config = Config(config_path)

        if not config.validate():
            raise ValueError("Configuration validation failed")

        session_registry = SessionRegistry(timeout=config.get_request_timeout())

        if config.has_llm_credentials():
            llm_client = LLMClient(config.get_llm_config())
        else:
            llm_client = None
            logger.warning(f"No API key for LLM provider '{config.get_llm_provider()}' - test generation is disabled")

        logger.info("All services initialized successfully")
    except Exception as e:
        logger.error(f"Failed to initialize services: {e}")
        raise
