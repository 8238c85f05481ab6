"""
Test Generation Models
Request and response models for the test generation endpoint
"""
from pydantic import BaseModel, Field
from typing import Optional, List

from src.models import TestCase


class GenerateRequest(BaseModel):
    """Story content to generate test cases for"""
    storyTitle: str = Field(
        "",
        description="Story title",
        examples=["User can reset their password"]
    )
    acceptanceCriteria: str = Field(
        "",
        description="Acceptance criteria as plain text",
        examples=["Given a registered email, when I request a reset, then I receive a reset link"]
    )
    description: Optional[str] = Field(None, description="Story description")
    additionalInfo: Optional[str] = Field(None, description="Extra context for the generator (domain, constraints, test data hints)")

    def validation_errors(self) -> List[str]:
        """Messages for every missing required field"""
        errors = []
        if not self.storyTitle.strip():
            errors.append("Story title is required")
        if not self.acceptanceCriteria.strip():
            errors.append("Acceptance criteria are required")
        return errors


class GenerateResponse(BaseModel):
    """Generated test cases and the LLM usage behind them"""
    cases: List[TestCase] = Field(default_factory=list, description="Generated test cases")
    model: Optional[str] = Field(None, description="Model that generated the cases")
    promptTokens: int = Field(0, description="Prompt tokens reported by the provider")
    completionTokens: int = Field(0, description="Completion tokens reported by the provider")
