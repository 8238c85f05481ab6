from typing import Dict, List, Any, Callable, TypeVar
import logging

from requests.utils import quote

from .adf import rich_text_to_plain
from .exceptions import NotConnectedError, UpstreamError
from .jira_session import JiraSession
from .models import StoryDetail

logger = logging.getLogger(__name__)

T = TypeVar('T')

DEFAULT_STORY_JQL = 'type = Story ORDER BY updated DESC'
DEFAULT_MAX_RESULTS = 50
DEFAULT_ACCEPTANCE_CRITERIA_FIELD = 'customfield_10046'


class JiraClient:
    """Jira API client for reading stories, tolerant of v3/v2 API differences"""

    def __init__(self, session: JiraSession,
                 acceptance_criteria_field: str = DEFAULT_ACCEPTANCE_CRITERIA_FIELD,
                 story_jql: str = DEFAULT_STORY_JQL,
                 max_results: int = DEFAULT_MAX_RESULTS):
        self.session = session
        self.acceptance_criteria_field = acceptance_criteria_field
        self.story_jql = story_jql
        self.max_results = max_results

    def _with_dialect_fallback(self, operation: str, call: Callable[[str], T]) -> T:
        """Run `call` against API v3, then once against API v2 if v3 failed

        Raises:
            NotConnectedError: before any network call when the session is not connected
            UpstreamError: when both dialects failed, carrying both messages
        """
        if not self.session.is_connected():
            raise NotConnectedError()

        try:
            return call('3')
        except Exception as e:
            v3_message = f"Failed to {operation} (API v3): {e}"
            logger.warning(f"⚠️ API v3 failed, trying API v2 fallback... ({v3_message})")

        try:
            return call('2')
        except Exception as e:
            v2_message = f"Failed to {operation} (API v2): {e}"
            logger.error(f"❌ Both API v3 and v2 failed: {v3_message}; {v2_message}")
            raise UpstreamError(operation, v3_message, v2_message) from e

    def get_stories(self) -> List[Dict[str, Any]]:
        """Fetch the most recently updated stories as raw Jira issues"""
        return self._with_dialect_fallback('fetch stories', self._search_stories)

    def _search_stories(self, dialect: str) -> List[Dict[str, Any]]:
        payload = {
            'jql': self.story_jql,
            'maxResults': self.max_results,
            'fields': ['summary', 'description', 'issuetype']
        }
        logger.info(f"🔍 Searching stories with API v{dialect}: {self.story_jql}")
        data = self.session.api_request('POST', dialect, '/search/jql', payload=payload)

        issues = data.get('issues') if isinstance(data, dict) else None
        issues = issues or []
        logger.info(f"✅ Fetched {len(issues)} stories from API v{dialect}")
        return issues

    def get_story_details(self, issue_key: str) -> StoryDetail:
        """Fetch summary, description and acceptance criteria of one story"""
        return self._with_dialect_fallback(
            'fetch story details',
            lambda dialect: self._fetch_story(dialect, issue_key)
        )

    def _fetch_story(self, dialect: str, issue_key: str) -> StoryDetail:
        params = {
            'fields': f'summary,description,{self.acceptance_criteria_field}'
        }
        logger.info(f"🔍 Fetching story details for {issue_key} from API v{dialect}")
        path = f'/issue/{quote(issue_key, safe="")}'
        data = self.session.api_request('GET', dialect, path, params=params)
        return self.extract_story_details(data)

    def extract_story_details(self, data: Dict[str, Any]) -> StoryDetail:
        """Build a StoryDetail from a raw issue record"""
        if not isinstance(data, dict):
            data = {}
        fields = data.get('fields') or {}

        # Plain strings (older deployments) are used verbatim, ADF documents are flattened
        description = rich_text_to_plain(fields.get('description'))
        acceptance_criteria = rich_text_to_plain(fields.get(self.acceptance_criteria_field))

        return StoryDetail(
            key=str(data.get('key', '')),
            title=fields.get('summary') or '',
            description=description,
            acceptanceCriteria=acceptance_criteria
        )
