"""
Chat proxy — forwards chat messages to an OpenAI-compatible completion API.

The browser never sees the API key; this service attaches it server-side
and returns only the first completion's text.
"""
import logging
from typing import List

import httpx

from config import settings
from domain.errors import ServiceUnavailableError, UpstreamServiceError

logger = logging.getLogger(__name__)


def _get_headers() -> dict:
    if not settings.chat_api_key:
        raise ServiceUnavailableError("Chat assistant is not configured (CHAT_API_KEY).")
    return {
        "Authorization": f"Bearer {settings.chat_api_key}",
        "Content-Type": "application/json",
    }


async def complete(messages: List[dict], model: str | None = None) -> dict:
    """
    Send a chat completion request and return {reply, model}.

    Raises:
        ServiceUnavailableError if no API key is configured
        UpstreamServiceError on transport errors, non-2xx or malformed replies
    """
    headers = _get_headers()
    payload = {
        "model": model or settings.chat_model,
        "messages": messages,
    }

    try:
        async with httpx.AsyncClient(timeout=settings.chat_timeout_seconds) as client:
            response = await client.post(settings.chat_api_url, headers=headers, json=payload)
            response.raise_for_status()
            data = response.json()
    except httpx.HTTPStatusError as e:
        logger.error(f"Chat API returned {e.response.status_code}")
        raise UpstreamServiceError(
            "Chat assistant request failed",
            details={"upstreamStatus": e.response.status_code},
        ) from e
    except (httpx.HTTPError, ValueError) as e:
        logger.error(f"Chat API call failed: {type(e).__name__}: {e}")
        raise UpstreamServiceError("Chat assistant unavailable") from e

    try:
        reply = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError) as e:
        logger.error("Chat API response missing choices[0].message.content")
        raise UpstreamServiceError("Chat assistant returned an unexpected response") from e

    return {"reply": reply, "model": data.get("model", payload["model"])}
