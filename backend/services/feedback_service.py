"""
Feedback service — persists contact-form submissions.
"""
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from db_models import Feedback

logger = logging.getLogger(__name__)


async def submit_feedback(
    db: AsyncSession,
    message: str,
    name: str | None = None,
    email: str | None = None,
) -> Feedback:
    entry = Feedback(name=name, email=email, message=message.strip())
    db.add(entry)
    await db.commit()
    await db.refresh(entry)
    logger.info(f"Feedback stored: id={entry.id} ({len(entry.message)} chars)")
    return entry
