"""Tests for vision backends (mocked API calls)."""

import sys
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from fridgeai.config import load_config
from fridgeai.models import EncodedImage, ScanRequest
from fridgeai.vision import create_backend
from fridgeai.vision.claude import ClaudeVisionBackend
from fridgeai.vision.gemini import GeminiVisionBackend
from fridgeai.vision.gpt import OpenAIVisionBackend

REPLY = "FOUND_INGREDIENTS:\n- eggs\nRECIPES_START\nRECIPES_END\n"


@pytest.fixture
def request_():
    return ScanRequest(
        image=EncodedImage.from_bytes(b"\xff\xd8\xff\xe0fake-jpeg"),
        instructions="Analyze this image",
        max_tokens=500,
    )


class TestCreateBackend:
    def test_default_is_openai(self):
        config = load_config()
        backend = create_backend(config)
        assert isinstance(backend, OpenAIVisionBackend)

    def test_create_claude_backend(self):
        config = load_config()
        config.vision.backend = "claude"
        assert isinstance(create_backend(config), ClaudeVisionBackend)

    def test_create_gemini_backend(self):
        config = load_config()
        config.vision.backend = "gemini"
        assert isinstance(create_backend(config), GeminiVisionBackend)

    def test_create_unknown_backend(self):
        config = load_config()
        config.vision.backend = "unknown"
        with pytest.raises(ValueError, match="unknown vision backend"):
            create_backend(config)


class TestOpenAIVisionBackend:
    @pytest.mark.asyncio
    async def test_requires_api_key(self, request_):
        backend = OpenAIVisionBackend(api_key="")
        with pytest.raises(ValueError, match="API key"):
            await backend.complete(request_)

    @pytest.mark.asyncio
    async def test_complete_mocked(self, request_):
        choice = MagicMock(finish_reason="stop")
        choice.message.content = REPLY
        mock_response = MagicMock(choices=[choice])

        mock_client = MagicMock()
        mock_client.chat.completions.create = AsyncMock(return_value=mock_response)

        mock_openai = MagicMock()
        mock_openai.AsyncOpenAI.return_value = mock_client

        with patch.dict(sys.modules, {"openai": mock_openai}):
            backend = OpenAIVisionBackend(api_key="test-key", detail="low")
            text = await backend.complete(request_)

        assert text == REPLY
        kwargs = mock_client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "gpt-4o-mini"
        assert kwargs["max_tokens"] == 500
        content = kwargs["messages"][0]["content"]
        assert content[0] == {"type": "text", "text": "Analyze this image"}
        assert content[1]["image_url"]["url"] == request_.image.data_uri
        assert content[1]["image_url"]["detail"] == "low"

    @pytest.mark.asyncio
    async def test_no_choices_returns_empty(self, request_):
        mock_client = MagicMock()
        mock_client.chat.completions.create = AsyncMock(
            return_value=MagicMock(choices=[])
        )
        mock_openai = MagicMock()
        mock_openai.AsyncOpenAI.return_value = mock_client

        with patch.dict(sys.modules, {"openai": mock_openai}):
            text = await OpenAIVisionBackend(api_key="k").complete(request_)
        assert text == ""


class TestClaudeVisionBackend:
    @pytest.mark.asyncio
    async def test_requires_api_key(self, request_):
        backend = ClaudeVisionBackend(api_key="")
        with pytest.raises(ValueError, match="API key"):
            await backend.complete(request_)

    @pytest.mark.asyncio
    async def test_complete_mocked(self, request_):
        mock_response = MagicMock()
        mock_response.content = [MagicMock(text=REPLY)]

        mock_client = AsyncMock()
        mock_client.messages.create = AsyncMock(return_value=mock_response)

        mock_anthropic = MagicMock()
        mock_anthropic.AsyncAnthropic.return_value = mock_client

        with patch.dict(sys.modules, {"anthropic": mock_anthropic}):
            backend = ClaudeVisionBackend(api_key="test-key")
            text = await backend.complete(request_)

        assert text == REPLY
        kwargs = mock_client.messages.create.call_args.kwargs
        assert kwargs["max_tokens"] == 500
        image_block = kwargs["messages"][0]["content"][0]
        assert image_block["source"]["media_type"] == "image/jpeg"
        assert image_block["source"]["data"] == request_.image.base64


class TestGeminiVisionBackend:
    @pytest.mark.asyncio
    async def test_requires_api_key(self, request_):
        backend = GeminiVisionBackend(api_key="")
        with pytest.raises(ValueError, match="API key"):
            await backend.complete(request_)

    @pytest.mark.asyncio
    async def test_complete_mocked(self, request_):
        mock_model = MagicMock()
        mock_model.generate_content_async = AsyncMock(
            return_value=MagicMock(text=REPLY)
        )
        mock_genai = MagicMock()
        mock_genai.GenerativeModel.return_value = mock_model
        mock_google = MagicMock(generativeai=mock_genai)

        with patch.dict(
            sys.modules,
            {"google": mock_google, "google.generativeai": mock_genai},
        ):
            backend = GeminiVisionBackend(api_key="test-key")
            text = await backend.complete(request_)

        assert text == REPLY
        mock_genai.configure.assert_called_once_with(api_key="test-key")
        parts = mock_model.generate_content_async.call_args.args[0]
        assert parts[0]["data"] == request_.image.data
        assert parts[1] == "Analyze this image"
