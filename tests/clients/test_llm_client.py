"""Tests for the language-model report generator."""

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import httpx
import openai
import pytest

from surfcast.clients.llm import ReportGenerator
from surfcast.errors import UpstreamError, UpstreamMalformed, UpstreamTimeout

REQUEST = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")


def completion(content, finish_reason="stop"):
    return SimpleNamespace(
        model="gpt-4o-mini",
        choices=[
            SimpleNamespace(
                message=SimpleNamespace(content=content),
                finish_reason=finish_reason,
            )
        ],
    )


@pytest.fixture
def client():
    with patch("surfcast.clients.llm.OpenAI") as mock_openai:
        instance = MagicMock()
        mock_openai.return_value = instance
        yield mock_openai, instance


class TestReportGenerator:
    """Tests for ReportGenerator."""

    def test_generate_returns_text(self, client):
        mock_openai, instance = client
        instance.chat.completions.create.return_value = completion('  {"title": "x"}  ')

        text = ReportGenerator("sk-test", timeout=12, max_tokens=250).generate("sys", "prompt")

        assert text == '{"title": "x"}'
        mock_openai.assert_called_once_with(api_key="sk-test", timeout=12, max_retries=0)
        kwargs = instance.chat.completions.create.call_args.kwargs
        assert kwargs["max_completion_tokens"] == 250
        assert kwargs["response_format"] == {"type": "json_object"}
        assert kwargs["messages"][0] == {"role": "system", "content": "sys"}
        assert kwargs["messages"][1] == {"role": "user", "content": "prompt"}

    def test_client_created_once(self, client):
        mock_openai, instance = client
        instance.chat.completions.create.return_value = completion("{}")

        generator = ReportGenerator("sk-test")
        generator.generate("sys", "a")
        generator.generate("sys", "b")

        assert mock_openai.call_count == 1

    def test_missing_key(self, client):
        with pytest.raises(UpstreamError):
            ReportGenerator(None).generate("sys", "prompt")

    def test_timeout(self, client):
        _, instance = client
        instance.chat.completions.create.side_effect = openai.APITimeoutError(request=REQUEST)

        with pytest.raises(UpstreamTimeout) as exc_info:
            ReportGenerator("sk-test").generate("sys", "prompt")
        assert exc_info.value.source == "llm"

    def test_api_error(self, client):
        _, instance = client
        instance.chat.completions.create.side_effect = openai.APIConnectionError(request=REQUEST)

        with pytest.raises(UpstreamError) as exc_info:
            ReportGenerator("sk-test").generate("sys", "prompt")
        assert not isinstance(exc_info.value, UpstreamTimeout)

    def test_empty_content(self, client):
        _, instance = client
        instance.chat.completions.create.return_value = completion(None, finish_reason="length")

        with pytest.raises(UpstreamMalformed):
            ReportGenerator("sk-test").generate("sys", "prompt")

    def test_no_choices(self, client):
        _, instance = client
        instance.chat.completions.create.return_value = SimpleNamespace(model="m", choices=[])

        with pytest.raises(UpstreamMalformed):
            ReportGenerator("sk-test").generate("sys", "prompt")
