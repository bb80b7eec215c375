"""Client for the hosted chat-completion service (OpenAI-compatible API, Groq by default)."""
import json
import logging
from typing import Any, Dict, Optional

from openai import OpenAI, OpenAIError

from mealprep.app.errors import CompletionServiceError
from mealprep.app.settings import Settings, settings as default_settings

logger = logging.getLogger(__name__)


class CompletionClient:
    """Single request/response chat completion. No streaming and no retries."""

    def __init__(self, client: Optional[OpenAI] = None, settings: Settings = default_settings):
        self.settings = settings
        self._client = client

    def _openai(self) -> OpenAI:
        if self._client is None:
            # IMPORTANT: only pass api_key if it is set, otherwise let the SDK
            # resolve OPENAI_API_KEY from the environment.
            kwargs: Dict[str, Any] = {
                "base_url": self.settings.completion_base_url,
                "timeout": self.settings.request_timeout,
                "max_retries": 0,
            }
            if self.settings.completion_api_key:
                kwargs["api_key"] = self.settings.completion_api_key
            self._client = OpenAI(**kwargs)
        return self._client

    def complete(self, prompt: str) -> str:
        """
        Send one user message and return the first choice's text.

        Raises:
            CompletionServiceError: the SDK failed (credentials, transport, non-2xx)
                or the response carried no usable completion.
        """
        payload = {
            "model": self.settings.model_name,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": self.settings.completion_temperature,
            "max_tokens": self.settings.completion_max_tokens,
        }
        logger.debug("Sending completion payload: %s", json.dumps(payload, indent=2))

        try:
            response = self._openai().chat.completions.create(**payload)
        except OpenAIError as exc:
            logger.error("Completion request failed: %s", exc)
            raise CompletionServiceError(details=str(exc)) from exc

        choices = getattr(response, "choices", None) or []
        content = choices[0].message.content if choices else None
        if not isinstance(content, str):
            logger.error("Completion service returned no content (choices=%d)", len(choices))
            raise CompletionServiceError(details="empty completion")
        return content
