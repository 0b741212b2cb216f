from ..utils.email import EmailService


def get_email_service() -> EmailService:
    """Email sender used by request handlers"""
    return EmailService()
