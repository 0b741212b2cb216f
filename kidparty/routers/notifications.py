import logging
from datetime import datetime
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import Dict, Any
from ..database import get_db
from ..dependencies import get_email_service, verify_cron_secret
from ..services.notification_service import NotificationService
from ..utils.background_tasks import scheduler
from ..utils.email import EmailService
from ..utils.router_helpers import RouterResponse

router = APIRouter(tags=["notifications"])
logger = logging.getLogger(__name__)


@router.post("/process", response_model=Dict[str, Any])
async def process_notifications(
    _: None = Depends(verify_cron_secret),
    db: Session = Depends(get_db),
    email_service: EmailService = Depends(get_email_service),
):
    """Send due queued emails, then queue upcoming birthday reminders"""
    logger.info("🔄 Starting notification processing...")
    try:
        notification_service = NotificationService(db, email_service)
        emails_processed = notification_service.process_pending_emails()
        birthday_reminders = notification_service.schedule_birthday_reminders()
    except Exception as e:
        logger.error(f"Error in notification processing: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to process notifications",
        )

    logger.info("✅ Notification processing completed")
    return RouterResponse.success(
        data={
            "emails_processed": emails_processed,
            "birthday_reminders_scheduled": len(birthday_reminders),
        },
        message="Notification processing completed successfully",
    )


@router.get("/process", response_model=Dict[str, Any])
async def notification_processor_status():
    """Health probe for the notification processor"""
    return {
        "status": "ok",
        "message": "Notification processor is running",
        "timestamp": datetime.utcnow().isoformat(),
        "background_scheduler": scheduler.get_status(),
    }
