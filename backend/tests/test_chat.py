"""
Tests for the chat completion proxy (upstream mocked).
"""
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from config import settings
from domain.errors import ServiceUnavailableError, UpstreamServiceError
from services import chat_service

MESSAGES = [{"role": "user", "content": "Best time to visit Munnar?"}]


def _response(status_code: int, payload=None) -> httpx.Response:
    request = httpx.Request("POST", settings.chat_api_url)
    return httpx.Response(status_code, json=payload, request=request)


@pytest.fixture
def chat_key(monkeypatch):
    monkeypatch.setattr(settings, "chat_api_key", "sk-test")


class TestComplete:

    @pytest.mark.unit
    async def test_returns_first_choice(self, chat_key):
        payload = {
            "model": "gpt-4o-mini",
            "choices": [{"message": {"role": "assistant", "content": "September to May."}}],
        }
        with patch.object(httpx.AsyncClient, "post", new=AsyncMock(return_value=_response(200, payload))) as post:
            result = await chat_service.complete(MESSAGES)

        assert result == {"reply": "September to May.", "model": "gpt-4o-mini"}
        kwargs = post.call_args.kwargs
        assert kwargs["json"]["messages"] == MESSAGES
        assert kwargs["headers"]["Authorization"] == "Bearer sk-test"

    @pytest.mark.unit
    async def test_not_configured(self, monkeypatch):
        monkeypatch.setattr(settings, "chat_api_key", "")
        with pytest.raises(ServiceUnavailableError):
            await chat_service.complete(MESSAGES)

    @pytest.mark.unit
    async def test_upstream_error_status(self, chat_key):
        with patch.object(httpx.AsyncClient, "post", new=AsyncMock(return_value=_response(500, {"error": "x"}))):
            with pytest.raises(UpstreamServiceError) as exc_info:
                await chat_service.complete(MESSAGES)
        assert exc_info.value.details == {"upstreamStatus": 500}

    @pytest.mark.unit
    async def test_transport_error(self, chat_key):
        with patch.object(httpx.AsyncClient, "post", new=AsyncMock(side_effect=httpx.ConnectError("down"))):
            with pytest.raises(UpstreamServiceError):
                await chat_service.complete(MESSAGES)

    @pytest.mark.unit
    async def test_malformed_reply(self, chat_key):
        with patch.object(httpx.AsyncClient, "post", new=AsyncMock(return_value=_response(200, {"choices": []}))):
            with pytest.raises(UpstreamServiceError):
                await chat_service.complete(MESSAGES)


class TestChatEndpoint:

    @pytest.mark.api
    async def test_chat_route(self, client):
        fake = AsyncMock(return_value={"reply": "Hello!", "model": "gpt-4o-mini"})
        with patch("services.chat_service.complete", fake):
            response = await client.post("/chat", json={"messages": MESSAGES})

        assert response.status_code == 200
        assert response.json() == {"reply": "Hello!", "model": "gpt-4o-mini"}
        fake.assert_awaited_once_with(MESSAGES, model=None)

    @pytest.mark.api
    async def test_chat_route_unconfigured_503(self, client, monkeypatch):
        monkeypatch.setattr(settings, "chat_api_key", "")
        response = await client.post("/chat", json={"messages": MESSAGES})
        assert response.status_code == 503

    @pytest.mark.api
    async def test_chat_rejects_unknown_role(self, client):
        response = await client.post("/chat", json={"messages": [{"role": "tool", "content": "x"}]})
        assert response.status_code == 422
