"""
Chat assistant proxy.
"""
from fastapi import APIRouter, Depends

from middleware.rate_limit import rate_limit
from models import ChatRequest, ChatResponse
from services import chat_service

router = APIRouter(tags=["chat"])


@router.post("/chat", response_model=ChatResponse)
async def chat(
    req: ChatRequest,
    _rate=Depends(rate_limit(max_requests=20, window_seconds=60)),
):
    """Forward the conversation to the configured completion API."""
    result = await chat_service.complete(
        [m.model_dump() for m in req.messages],
        model=req.model,
    )
    return ChatResponse(**result)
