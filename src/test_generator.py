"""
Story Test Generator
Turns a user story and its acceptance criteria into structured test cases via the configured LLM
"""
import json
import logging
from typing import Any, Dict, List, Optional

from .exceptions import GenerationError
from .llm_client import LLMClient
from .models import GenerationResult, TestCase

logger = logging.getLogger(__name__)

CATEGORIES = ['Positive', 'Negative', 'Edge', 'Authorization', 'Non-Functional']

DEFAULT_SYSTEM_PROMPT = (
    "You are a senior QA engineer. You write clear, executable test cases for user stories. "
    "Every test case traces back to the story's acceptance criteria."
)


class StoryTestGenerator:
    """Generates test cases for one story per call"""

    def __init__(self, llm_client: LLMClient):
        self.llm_client = llm_client

    def generate(self, story_title: str, acceptance_criteria: str,
                 description: Optional[str] = None,
                 additional_info: Optional[str] = None) -> GenerationResult:
        """
        Generate test cases for a story

        Raises:
            GenerationError: when the LLM call fails or returns no usable test case
        """
        prompt = self._build_prompt(story_title, acceptance_criteria, description, additional_info)
        logger.info(f"🧪 Generating test cases for story: {story_title}")

        try:
            response = self.llm_client.generate_content_json(prompt)
        except Exception as e:
            logger.error(f"❌ Test generation failed for '{story_title}': {e}")
            raise GenerationError(f"Failed to generate test cases: {e}") from e

        cases = self._parse_cases(response.content)
        if not cases:
            raise GenerationError("Failed to generate test cases: the LLM response contained no test cases")

        logger.info(f"✅ Generated {len(cases)} test cases with {response.model}")
        return GenerationResult(
            cases=cases,
            model=response.model,
            promptTokens=response.prompt_tokens,
            completionTokens=response.completion_tokens
        )

    def _build_prompt(self, story_title: str, acceptance_criteria: str,
                      description: Optional[str], additional_info: Optional[str]) -> str:
        sections = [
            f"**Story Title:**\n{story_title}",
            f"**Acceptance Criteria:**\n{acceptance_criteria}"
        ]
        if description:
            sections.append(f"**Description:**\n{description}")
        if additional_info:
            sections.append(f"**Additional Information:**\n{additional_info}")

        return (
            "Generate test cases for the following user story.\n\n"
            + "\n\n".join(sections)
            + "\n\n"
            "Cover every acceptance criterion with at least one test case. Include negative and edge cases.\n"
            f"Use exactly one of these categories per test case: {', '.join(CATEGORIES)}.\n\n"
            "Return JSON in this format:\n"
            "{\n"
            '  "cases": [\n'
            "    {\n"
            '      "id": "TC-001",\n'
            '      "title": "Short descriptive title",\n'
            '      "steps": ["Step 1", "Step 2"],\n'
            '      "testData": "Inputs used by the steps, or null",\n'
            '      "expectedResult": "Observable outcome",\n'
            '      "category": "Positive"\n'
            "    }\n"
            "  ]\n"
            "}"
        )

    def _parse_cases(self, content: str) -> List[TestCase]:
        """Parse the `cases` array of the LLM answer; malformed entries are skipped"""
        try:
            data = json.loads(content)
        except (TypeError, ValueError) as e:
            raise GenerationError(f"Failed to parse test cases: {e}") from e

        raw_cases = data.get('cases') if isinstance(data, dict) else data
        if not isinstance(raw_cases, list):
            logger.warning("⚠️ LLM response has no 'cases' array")
            return []

        cases = []
        for raw in raw_cases:
            if not isinstance(raw, dict):
                continue
            case = self._create_test_case(raw, len(cases) + 1)
            if case:
                cases.append(case)

        skipped = len(raw_cases) - len(cases)
        if skipped:
            logger.warning(f"⚠️ Skipped {skipped} malformed test cases")
        return cases

    def _create_test_case(self, raw: Dict[str, Any], number: int) -> Optional[TestCase]:
        title = str(raw.get('title') or '').strip()
        if not title:
            return None

        steps = raw.get('steps') or []
        if isinstance(steps, str):
            steps = [line.strip() for line in steps.splitlines() if line.strip()]
        elif isinstance(steps, list):
            steps = [str(step).strip() for step in steps if str(step).strip()]
        else:
            steps = []

        test_data = raw.get('testData')
        if test_data is not None and not isinstance(test_data, str):
            test_data = json.dumps(test_data)

        return TestCase(
            id=str(raw.get('id') or f"TC-{number:03d}"),
            title=title,
            steps=steps,
            testData=test_data or None,
            expectedResult=str(raw.get('expectedResult') or ''),
            category=self._normalize_category(raw.get('category'))
        )

    def _normalize_category(self, category: Any) -> str:
        """Map the LLM's category onto the known set; unknown values become Positive"""
        value = str(category or '').strip().lower().replace('_', '-').replace(' ', '-')
        for known in CATEGORIES:
            if known.lower() == value:
                return known
        if value == 'nonfunctional':
            return 'Non-Functional'
        return CATEGORIES[0]
