from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, List
import logging
import json

logger = logging.getLogger(__name__)

JSON_RESPONSE_INSTRUCTION = (
    "Respond with a single valid JSON object only. "
    "Do not wrap it in markdown code fences and do not add any text before or after it."
)


@dataclass
class LLMResponse:
    """Text returned by a provider, with the token usage it reported"""
    content: str
    model: str
    prompt_tokens: int = 0
    completion_tokens: int = 0


class LLMProvider(ABC):
    """Abstract base class for LLM providers"""

    def __init__(self, api_key: str, model: str, system_prompt: str, temperature: float = 0.7, max_tokens: Optional[int] = None):
        self.api_key = api_key
        self.model = model
        self.system_prompt = system_prompt
        self.temperature = temperature
        self.config_max_tokens = max_tokens  # None = use provider defaults

    @abstractmethod
    def generate(self, prompt: str, max_tokens: Optional[int] = None) -> LLMResponse:
        """Generate a completion for `prompt`"""
        pass

    def generate_json(self, prompt: str, max_tokens: Optional[int] = None) -> LLMResponse:
        """
        Generate a JSON answer

        Default implementation asks for JSON in the prompt and extracts the
        object from the reply; providers with a native JSON mode override it.
        """
        response = self.generate(f"{prompt}\n\n{JSON_RESPONSE_INSTRUCTION}", max_tokens=max_tokens)
        response.content = self._extract_json_from_response(response.content)
        return response

    def _extract_json_from_response(self, response: str) -> str:
        """Extract JSON from response, handling markdown code blocks"""
        response = (response or '').strip()

        if response.startswith('```json'):
            response = response[7:]
        elif response.startswith('```'):
            response = response[3:]
        if response.endswith('```'):
            response = response[:-3]
        response = response.strip()

        # Prefer JSON objects over arrays
        object_start = response.find('{')
        array_start = response.find('[')
        start_idx = object_start if object_start != -1 else array_start

        if start_idx != -1:
            # Find matching closing bracket/brace
            bracket_stack = []
            end_idx = start_idx
            for i in range(start_idx, len(response)):
                if response[i] in '[{':
                    bracket_stack.append(response[i])
                elif response[i] in ']}':
                    if bracket_stack:
                        bracket_stack.pop()
                        if not bracket_stack:
                            end_idx = i
                            break

            if end_idx > start_idx:
                return response[start_idx:end_idx + 1]

        return response


class OpenAIProvider(LLMProvider):
    """OpenAI GPT provider"""

    DEFAULT_MAX_TOKENS = 4000

    def __init__(self, api_key: str, model: str, system_prompt: str, temperature: float = 0.7, max_tokens: Optional[int] = None):
        super().__init__(api_key, model, system_prompt, temperature, max_tokens=max_tokens)
        try:
            from openai import OpenAI
            self.client = OpenAI(api_key=api_key)
        except ImportError:
            raise ImportError("openai package is required for OpenAI provider")

    def _max_tokens(self, max_tokens: Optional[int]) -> int:
        # Priority: per-call override > config max_tokens > provider default
        if max_tokens is not None:
            return max_tokens
        if self.config_max_tokens is not None:
            return self.config_max_tokens
        return self.DEFAULT_MAX_TOKENS

    def _complete(self, prompt: str, max_tokens: Optional[int], **kwargs) -> LLMResponse:
        max_completion_tokens = self._max_tokens(max_tokens)
        logger.info(f"🤖 Calling OpenAI model {self.model} with max_completion_tokens={max_completion_tokens}")

        response = self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": self.system_prompt},
                {"role": "user", "content": prompt}
            ],
            max_completion_tokens=max_completion_tokens,
            temperature=self.temperature,
            **kwargs
        )

        choice = response.choices[0]
        if choice.finish_reason == 'length':
            logger.warning("⚠️ OpenAI response was truncated (finish_reason=length). Consider increasing max_tokens.")

        usage = response.usage
        return LLMResponse(
            content=choice.message.content or '',
            model=getattr(response, 'model', None) or self.model,
            prompt_tokens=getattr(usage, 'prompt_tokens', 0) or 0,
            completion_tokens=getattr(usage, 'completion_tokens', 0) or 0
        )

    def generate(self, prompt: str, max_tokens: Optional[int] = None) -> LLMResponse:
        try:
            return self._complete(prompt, max_tokens)
        except Exception as e:
            logger.error(f"OpenAI API error: {e}")
            raise

    def generate_json(self, prompt: str, max_tokens: Optional[int] = None) -> LLMResponse:
        """Generate JSON with OpenAI's JSON mode (objects only)"""
        json_prompt = prompt
        if "json" not in prompt.lower():
            json_prompt = f"{prompt}\n\n{JSON_RESPONSE_INSTRUCTION}"

        try:
            logger.info(f"Using OpenAI JSON mode for model: {self.model}")
            response = self._complete(json_prompt, max_tokens, response_format={"type": "json_object"})
        except Exception as e:
            logger.error(f"OpenAI JSON generation error: {e}")
            raise

        response.content = self._extract_json_from_response(response.content)
        return response


class ClaudeProvider(LLMProvider):
    """Anthropic Claude provider"""

    def __init__(self, api_key: str, model: str, system_prompt: str, temperature: float = 0.7, max_tokens: Optional[int] = None):
        super().__init__(api_key, model, system_prompt, temperature, max_tokens=max_tokens)
        # Default max_tokens for Claude (8000) unless overridden by config
        self.default_max_tokens = self.config_max_tokens if self.config_max_tokens is not None else 8000
        try:
            import anthropic
            self.client = anthropic.Anthropic(api_key=api_key)
        except ImportError:
            raise ImportError("anthropic package is required for Claude provider")

    def generate(self, prompt: str, max_tokens: Optional[int] = None) -> LLMResponse:
        try:
            tokens_to_use = max_tokens if max_tokens is not None else self.default_max_tokens
            logger.info(f"🤖 Calling Claude model {self.model} with max_tokens={tokens_to_use}")

            response = self.client.messages.create(
                model=self.model,
                max_tokens=tokens_to_use,
                temperature=self.temperature,
                system=self.system_prompt,
                messages=[
                    {"role": "user", "content": prompt}
                ]
            )

            if response.stop_reason == "max_tokens":
                logger.warning(f"⚠️ Claude response was truncated due to max_tokens limit ({tokens_to_use})")

            text = ''.join(getattr(block, 'text', '') for block in response.content)
            usage = response.usage
            return LLMResponse(
                content=text,
                model=getattr(response, 'model', None) or self.model,
                prompt_tokens=getattr(usage, 'input_tokens', 0) or 0,
                completion_tokens=getattr(usage, 'output_tokens', 0) or 0
            )
        except Exception as e:
            logger.error(f"Claude API error: {e}")
            raise


class LLMClient:
    """Factory class for LLM providers"""

    def __init__(self, config: dict):
        self.provider_name = config['provider'].lower()
        self.config = config
        self.default_max_tokens = config.get('max_tokens')
        logger.info(f"LLMClient initialized: provider={self.provider_name}, model={config.get('model')}")
        self.provider = self._create_provider(config)

    @staticmethod
    def supported_providers() -> List[str]:
        return ['openai', 'claude']

    def _create_provider(self, config: dict) -> LLMProvider:
        """Create the appropriate LLM provider"""
        provider = config['provider'].lower()
        api_key = config['api_key']
        model = config['model']
        system_prompt = config['system_prompt']
        temperature = config.get('temperature', 0.7)
        max_tokens = config.get('max_tokens')

        if provider == "openai":
            return OpenAIProvider(api_key, model, system_prompt, temperature, max_tokens=max_tokens)
        elif provider == "claude":
            return ClaudeProvider(api_key, model, system_prompt, temperature, max_tokens=max_tokens)
        else:
            raise ValueError(f"Unsupported LLM provider: {provider}")

    @property
    def model(self) -> str:
        return self.provider.model

    def generate_content_json(self, prompt: str, max_tokens: Optional[int] = None) -> LLMResponse:
        """
        Generate JSON content with the provider's JSON enforcement

        Returns:
            LLMResponse whose content is valid JSON

        Raises:
            ValueError: if the provider answer is not valid JSON
        """
        if max_tokens is None:
            max_tokens = self.default_max_tokens

        response = self.provider.generate_json(prompt, max_tokens=max_tokens)

        try:
            json.loads(response.content)
            logger.info("✅ LLM returned valid JSON")
        except json.JSONDecodeError as e:
            logger.error(f"❌ Generated response is not valid JSON: {e}")
            logger.error(f"Response preview: {response.content[:500]}")
            raise ValueError(f"LLM did not return valid JSON: {e}")

        return response
