"""Tests for the chat-completion client."""

from unittest.mock import MagicMock, patch

import httpx
import pytest
from openai import APIConnectionError, OpenAIError

from mealprep.app.errors import CompletionServiceError
from mealprep.app.settings import Settings
from mealprep.tools.completion_client import CompletionClient

from conftest import completion_response


class TestComplete:
    def test_returns_first_choice_content(self, completion_client, mock_openai):
        mock_openai.chat.completions.create.return_value = completion_response('  {"Monday": {}}  ')
        assert completion_client.complete("prompt") == '  {"Monday": {}}  '

    def test_request_parameters(self, completion_client, mock_openai):
        completion_client.complete("make a plan")

        mock_openai.chat.completions.create.assert_called_once_with(
            model="test-model",
            messages=[{"role": "user", "content": "make a plan"}],
            temperature=0.7,
            max_tokens=1500,
        )

    def test_sdk_error_becomes_completion_service_error(self, completion_client, mock_openai):
        request = httpx.Request("POST", "https://api.groq.com/openai/v1/chat/completions")
        mock_openai.chat.completions.create.side_effect = APIConnectionError(request=request)

        with pytest.raises(CompletionServiceError) as excinfo:
            completion_client.complete("prompt")
        assert excinfo.value.message == "Failed to generate meal plan. Please try again later."

    def test_no_choices(self, completion_client, mock_openai):
        mock_openai.chat.completions.create.return_value = MagicMock(choices=[])
        with pytest.raises(CompletionServiceError):
            completion_client.complete("prompt")

    def test_null_content(self, completion_client, mock_openai):
        mock_openai.chat.completions.create.return_value = completion_response(None)
        with pytest.raises(CompletionServiceError):
            completion_client.complete("prompt")


class TestClientConstruction:
    def test_sdk_client_is_built_without_retries(self):
        settings = Settings(completion_api_key="k", completion_base_url="https://llm.test/v1", request_timeout=12.0)
        with patch("mealprep.tools.completion_client.OpenAI") as openai_cls:
            openai_cls.return_value.chat.completions.create.return_value = completion_response("{}")
            CompletionClient(settings=settings).complete("prompt")

        openai_cls.assert_called_once_with(base_url="https://llm.test/v1", timeout=12.0, max_retries=0, api_key="k")

    def test_missing_credentials_is_completion_service_error(self):
        settings = Settings(completion_api_key=None)
        with patch("mealprep.tools.completion_client.OpenAI", side_effect=OpenAIError("api_key must be set")):
            with pytest.raises(CompletionServiceError):
                CompletionClient(settings=settings).complete("prompt")
