"""
Content Generator API Client

The generator speaks the OpenAI chat-completions protocol, so we use the
openai library. DeepSeek is the default endpoint; any compatible base URL
and model can be configured.

The client only knows how to send a prompt and get JSON back. The
feature prompts and result validation live in generation_service.
"""
import json
import logging
from typing import Any, Optional

from openai import OpenAI, OpenAIError

from app.core.config import get_settings
from app.core.errors import GenerationFailedError

logger = logging.getLogger(__name__)


class ContentGeneratorClient:
    """
    Wrapper around an OpenAI-compatible chat API that returns parsed JSON.
    """

    def __init__(self, api_key: Optional[str] = None, base_url: Optional[str] = None, model: Optional[str] = None):
        settings = get_settings()
        self.client = OpenAI(
            api_key=api_key or settings.ai_api_key or "not-configured",
            base_url=base_url or settings.ai_base_url
        )
        self.model = model or settings.ai_model

    def _call_api(self, system_prompt: str, user_content: str, max_tokens: int = 2000,
                  temperature: float = 0.5) -> str:
        """
        Internal method to call the chat API.
        Returns raw text response.
        """
        response = self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_content}
            ],
            max_tokens=max_tokens,
            temperature=temperature,
            response_format={"type": "json_object"}
        )
        return response.choices[0].message.content or ""

    @staticmethod
    def _extract_json(text: str) -> Any:
        """
        Extract JSON from API response.
        Handles cases where model wraps JSON in markdown code blocks.
        """
        text = text.strip()
        if text.startswith("```json"):
            text = text[7:]
        if text.startswith("```"):
            text = text[3:]
        if text.endswith("```"):
            text = text[:-3]

        return json.loads(text.strip())

    def generate_json(self, system_prompt: str, user_content: str, max_tokens: int = 2000,
                      temperature: float = 0.5) -> Any:
        """
        Send a prompt and return the parsed JSON reply.
        Raises GenerationFailedError on API or parse errors.
        """
        try:
            response = self._call_api(system_prompt, user_content, max_tokens, temperature)
            return self._extract_json(response)
        except OpenAIError as e:
            logger.error("Content generator API call failed: %s", e)
            raise GenerationFailedError(f"AI service error: {e}") from e
        except json.JSONDecodeError as e:
            logger.error("Content generator returned invalid JSON: %s", e)
            raise GenerationFailedError("AI service returned an unreadable response") from e

    def test_connection(self) -> bool:
        """Test if the API is reachable"""
        try:
            data = self.generate_json(
                "You are a test assistant. Reply in JSON.",
                'Reply with exactly: {"status": "OK"}',
                max_tokens=20
            )
            return isinstance(data, dict) and str(data.get("status", "")).upper() == "OK"
        except GenerationFailedError:
            return False


# Singleton instance
_generator_client: Optional[ContentGeneratorClient] = None


def get_generator_client() -> ContentGeneratorClient:
    """Get or create the generator client (singleton pattern)"""
    global _generator_client
    if _generator_client is None:
        _generator_client = ContentGeneratorClient()
    return _generator_client
