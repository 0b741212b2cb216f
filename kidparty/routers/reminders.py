import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import Dict, Any
from ..database import get_db
from ..dependencies import get_email_service, verify_cron_secret
from ..services.reminder_repository import SQLAlchemyReminderRepository
from ..services.reminder_service import ReminderService
from ..utils.email import EmailService
from ..utils.router_helpers import RouterResponse

router = APIRouter(tags=["reminders"])
logger = logging.getLogger(__name__)


def _process(db: Session, email_service: EmailService) -> Dict[str, Any]:
    logger.info("Processing reminders...")
    try:
        reminder_service = ReminderService(
            SQLAlchemyReminderRepository(db), email_service
        )
        summary = reminder_service.process_reminders()
    except Exception as e:
        logger.error(f"Error processing reminders: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to process reminders",
        )

    return RouterResponse.success(
        data=summary.to_dict(), message="Reminders processed successfully"
    )


@router.post("/process", response_model=Dict[str, Any])
async def process_reminders(
    _: None = Depends(verify_cron_secret),
    db: Session = Depends(get_db),
    email_service: EmailService = Depends(get_email_service),
):
    """Run one reminder pass (called by the external cron trigger)"""
    return _process(db, email_service)


@router.get("/process", response_model=Dict[str, Any])
async def process_reminders_get(
    _: None = Depends(verify_cron_secret),
    db: Session = Depends(get_db),
    email_service: EmailService = Depends(get_email_service),
):
    """Same as POST, for cron services that can only issue GET"""
    return _process(db, email_service)
