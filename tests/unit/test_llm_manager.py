"""
StudyFlow - LLM Manager Tests

The Gemini endpoint is replaced by an httpx.MockTransport.
"""

import json

import httpx
import pytest

from studyflow.core.config import LLMSettings
from studyflow.core.exceptions import ConfigurationError, LLMError, ModelResponseError
from studyflow.services.llm.llm_manager import LLMManager


pytestmark = pytest.mark.unit


def gemini_settings(**overrides) -> LLMSettings:
    values = {
        "gemini_api_key": "test-key",
        "gemini_api_base": "https://gemini.test/v1beta/models",
        "gemini_model": "gemini-test",
    }
    values.update(overrides)
    return LLMSettings(**values)


def gemini_reply(text: str) -> dict:
    return {
        "candidates": [{"content": {"parts": [{"text": text}]}}],
        "usageMetadata": {"totalTokenCount": 42},
    }


class TestLLMManager:

    @pytest.mark.asyncio
    async def test_generate_response(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = f"{request.url.scheme}://{request.url.host}{request.url.path}"
            seen["key"] = request.url.params["key"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json=gemini_reply("[]"))

        manager = LLMManager(gemini_settings(), transport=httpx.MockTransport(handler))

        response = await manager.generate_response("Write questions")

        assert response.content == "[]"
        assert response.model == "gemini-test"
        assert response.usage == {"totalTokenCount": 42}
        assert seen["url"] == "https://gemini.test/v1beta/models/gemini-test:generateContent"
        assert seen["key"] == "test-key"
        assert seen["body"] == {"contents": [{"parts": [{"text": "Write questions"}]}]}

    @pytest.mark.asyncio
    async def test_missing_api_key(self):
        manager = LLMManager(gemini_settings(gemini_api_key=None))

        assert manager.is_available is False
        with pytest.raises(ConfigurationError) as exc_info:
            await manager.generate_response("Write questions")
        assert exc_info.value.error_code == "LLM_NOT_CONFIGURED"

    @pytest.mark.asyncio
    async def test_http_error(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(503, text="overloaded"))
        manager = LLMManager(gemini_settings(), transport=transport)

        with pytest.raises(ModelResponseError) as exc_info:
            await manager.generate_response("Write questions")
        assert exc_info.value.details["model_response"] == "overloaded"

    @pytest.mark.asyncio
    async def test_malformed_body(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"candidates": []}))
        manager = LLMManager(gemini_settings(), transport=transport)

        with pytest.raises(ModelResponseError):
            await manager.generate_response("Write questions")

    @pytest.mark.asyncio
    async def test_connection_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        manager = LLMManager(gemini_settings(), transport=httpx.MockTransport(handler))

        with pytest.raises(LLMError) as exc_info:
            await manager.generate_response("Write questions")
        assert not isinstance(exc_info.value, ModelResponseError)
