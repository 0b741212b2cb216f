import os
import secrets
import logging
from typing import Optional
from fastapi import Depends, Header, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from supabase import Client
from ..database import get_db, get_supabase
from ..models.user import User

security = HTTPBearer()
logger = logging.getLogger(__name__)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db),
    supabase: Client = Depends(get_supabase),
) -> User:
    """Get current authenticated host from Supabase token"""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        auth_response = supabase.auth.get_user(credentials.credentials)

        if not auth_response.user:
            raise credentials_exception

        supabase_user = auth_response.user

        user = (
            db.query(User)
            .filter(User.supabase_id == supabase_user.id, User.is_active == True)
            .first()
        )

        # First request from this host: create the local row
        if not user:
            user = User.create_from_supabase(supabase_user, db)

        return user

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Authentication error: {e}")
        raise credentials_exception


async def verify_cron_secret(authorization: Optional[str] = Header(None)) -> None:
    """
    Guard for trigger endpoints called by the external scheduler.

    Open when CRON_SECRET is unset; otherwise requires 'Bearer <CRON_SECRET>'.
    """
    expected = os.getenv("CRON_SECRET")
    if not expected:
        return

    provided = ""
    if authorization and authorization.startswith("Bearer "):
        provided = authorization[len("Bearer "):]

    if not secrets.compare_digest(provided, expected):
        logger.warning("Rejected trigger call with invalid cron secret")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid cron secret",
        )
