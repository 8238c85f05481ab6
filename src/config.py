import os
import re
import yaml
import logging
from typing import Dict, Any, List, Optional
from dotenv import load_dotenv

from .test_generator import DEFAULT_SYSTEM_PROMPT

logger = logging.getLogger(__name__)


class Config:
    """Configuration manager for the story-to-tests backend"""

    def __init__(self, config_path: str = "config.yaml"):
        load_dotenv()
        self.config_path = config_path
        self._config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from YAML file with environment variable substitution"""
        if not os.path.exists(self.config_path):
            raise FileNotFoundError(f"Configuration file not found: {self.config_path}")

        with open(self.config_path, 'r') as file:
            config_content = file.read()

        config_content = self._substitute_env_vars(config_content)

        return yaml.safe_load(config_content) or {}

    def _substitute_env_vars(self, content: str) -> str:
        """Replace ${VAR_NAME} and ${VAR_NAME:default} with environment variables"""
        def replace_var(match):
            var_expr = match.group(1)
            if ':' in var_expr:
                var_name, default_value = var_expr.split(':', 1)
                return os.getenv(var_name, default_value)
            else:
                return os.getenv(var_expr, '')

        return re.sub(r'\$\{([^}]+)\}', replace_var, content)

    @property
    def jira(self) -> Dict[str, Any]:
        return self._config.get('jira') or {}

    @property
    def llm(self) -> Dict[str, Any]:
        return self._config.get('llm') or {}

    @property
    def server(self) -> Dict[str, Any]:
        return self._config.get('server') or {}

    def get_request_timeout(self) -> Optional[float]:
        """Jira request timeout in seconds; None means the HTTP library default"""
        timeout = self.jira.get('request_timeout')
        if timeout is None or (isinstance(timeout, str) and not timeout.strip()):
            return None
        return float(timeout)

    def get_max_results(self) -> int:
        return int(self.jira.get('max_results') or 50)

    def get_story_jql(self) -> str:
        return self.jira.get('story_jql') or 'type = Story ORDER BY updated DESC'

    def get_acceptance_criteria_field(self) -> str:
        return self.jira.get('acceptance_criteria_field') or 'customfield_10046'

    def has_jira_credentials(self) -> bool:
        """Whether default Jira credentials are configured (used by the CLI)"""
        return all(self.jira.get(key) for key in ['server_url', 'username', 'api_token'])

    def get_supported_providers(self) -> List[str]:
        """Get list of supported LLM providers"""
        return ['openai', 'claude']

    def get_llm_provider(self) -> str:
        return str(self.llm.get('provider') or 'openai').lower()

    def get_llm_config(self, provider: Optional[str] = None) -> Dict[str, Any]:
        """Get configuration for the specified or default LLM provider"""
        provider = provider or self.get_llm_provider()

        if provider not in self.get_supported_providers():
            raise ValueError(f"Unsupported LLM provider: {provider}. Supported providers: {self.get_supported_providers()}")

        # Empty string means "use provider defaults"
        max_tokens_config = self.llm.get('max_tokens')
        max_tokens = None
        if max_tokens_config is not None and not (isinstance(max_tokens_config, str) and not max_tokens_config.strip()):
            max_tokens = int(max_tokens_config)

        config = {
            'provider': provider,
            'system_prompt': self.llm.get('system_prompt') or DEFAULT_SYSTEM_PROMPT,
            'temperature': float(self.llm.get('temperature') if self.llm.get('temperature') not in (None, '') else 0.2),
            'max_tokens': max_tokens
        }

        if provider == 'openai':
            config['api_key'] = self.llm.get('openai_api_key')
            config['model'] = self.llm.get('openai_model') or 'gpt-4o-mini'
        elif provider == 'claude':
            config['api_key'] = self.llm.get('anthropic_api_key')
            config['model'] = self.llm.get('anthropic_model') or 'claude-sonnet-4-5'

        return config

    def has_llm_credentials(self) -> bool:
        """Whether an API key is configured for the selected LLM provider"""
        try:
            return bool(self.get_llm_config().get('api_key'))
        except ValueError:
            return False

    def validate(self) -> bool:
        """Validate that configured values are well formed"""
        errors = []

        try:
            self.get_llm_config()
        except (ValueError, TypeError) as e:
            errors.append(f"LLM configuration error: {e}")

        try:
            timeout = self.get_request_timeout()
            if timeout is not None and timeout <= 0:
                errors.append("jira.request_timeout must be positive")
        except (ValueError, TypeError):
            errors.append(f"Invalid jira.request_timeout: {self.jira.get('request_timeout')}")

        try:
            if self.get_max_results() <= 0:
                errors.append("jira.max_results must be positive")
        except (ValueError, TypeError):
            errors.append(f"Invalid jira.max_results: {self.jira.get('max_results')}")

        if not re.match(r'^customfield_\d+$', self.get_acceptance_criteria_field()):
            errors.append(f"Invalid jira.acceptance_criteria_field: {self.get_acceptance_criteria_field()}")

        if errors:
            for error in errors:
                logger.error(f"Configuration Error: {error}")
            return False

        return True
