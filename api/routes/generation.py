"""
Test Generation Routes
Generate test cases for a user story with the configured LLM
"""
from typing import Optional
from fastapi import APIRouter, Depends
import logging

from ..models.generation import GenerateRequest, GenerateResponse
from ..models.jira import ErrorResponse
from ..dependencies import get_test_generator
from .jira import error_response
from src.exceptions import GenerationError
from src.test_generator import StoryTestGenerator

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/generate-tests",
          tags=["Test Generation"],
          response_model=GenerateResponse,
          responses={
              400: {"model": ErrorResponse, "description": "Missing story title or acceptance criteria"},
              500: {"model": ErrorResponse, "description": "Generation failed"},
              503: {"model": ErrorResponse, "description": "No LLM provider configured"},
          },
          summary="Generate test cases for a story",
          description="Generate positive, negative, edge, authorization and non-functional test cases from a story title and its acceptance criteria.")
def generate_tests(
    request: GenerateRequest,
    generator: Optional[StoryTestGenerator] = Depends(get_test_generator)
):
    """Generate test cases for a story"""
    logger.info(f"📨 [Generate Tests] Request for story: {request.storyTitle}")

    errors = request.validation_errors()
    if errors:
        logger.error(f"❌ [Generate Tests] Validation error: {errors}")
        return error_response(400, f"Validation error: {', '.join(errors)}")

    if generator is None:
        logger.error("❌ [Generate Tests] No LLM provider configured")
        return error_response(
            503,
            "Test generation is not available",
            details="Set the API key of the configured LLM provider (llm.provider) and restart the server."
        )

    try:
        result = generator.generate(
            story_title=request.storyTitle,
            acceptance_criteria=request.acceptanceCriteria,
            description=request.description,
            additional_info=request.additionalInfo
        )
        logger.info(f"✅ [Generate Tests] Generated {len(result.cases)} test cases")
        return GenerateResponse(**result.model_dump())
    except GenerationError as e:
        logger.error(f"❌ [Generate Tests] {e}")
        return error_response(500, str(e))
    except Exception as e:
        logger.error(f"❌ [Generate Tests] Error: {e}")
        return error_response(500, str(e) or "Failed to generate test cases")
