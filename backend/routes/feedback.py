"""
Feedback endpoint.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from domain.responses import success_response
from middleware.rate_limit import rate_limit
from models import FeedbackRequest
from services import feedback_service

router = APIRouter(tags=["feedback"])


@router.post("/feedback", status_code=status.HTTP_201_CREATED)
async def submit_feedback(
    req: FeedbackRequest,
    db: AsyncSession = Depends(get_db),
    _rate=Depends(rate_limit(max_requests=5, window_seconds=60)),
):
    entry = await feedback_service.submit_feedback(db, req.message, name=req.name, email=req.email)
    return success_response({"id": entry.id}, meta={"message": "Thank you for your feedback"})
