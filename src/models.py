from typing import Dict, Any, List, Optional
from pydantic import BaseModel, Field


class ConnectionInfo(BaseModel):
    """Public view of an established Jira connection (never carries the token)"""
    baseUrl: str
    email: str


class StorySummary(BaseModel):
    """Story as listed by a JQL search"""
    key: str
    id: str
    title: str
    issueType: str

    @classmethod
    def from_issue(cls, issue: Dict[str, Any]) -> "StorySummary":
        fields = issue.get('fields') or {}
        issue_type = fields.get('issuetype') or {}
        return cls(
            key=str(issue.get('key', '')),
            id=str(issue.get('id', '')),
            title=fields.get('summary') or '',
            issueType=issue_type.get('name', '') if isinstance(issue_type, dict) else ''
        )


class StoryDetail(BaseModel):
    """Story detail used to pre-fill the test generation form"""
    key: str
    title: str
    description: Optional[str] = ''
    acceptanceCriteria: Optional[str] = ''


class TestCase(BaseModel):
    """A generated test case, in the shape the test generation UI renders"""
    id: str
    title: str
    steps: List[str] = Field(default_factory=list)
    testData: Optional[str] = None
    expectedResult: str = ''
    category: str = 'Positive'


class GenerationResult(BaseModel):
    """Test cases generated for one story, with the LLM usage that produced them"""
    cases: List[TestCase]
    model: Optional[str] = None
    promptTokens: int = 0
    completionTokens: int = 0
