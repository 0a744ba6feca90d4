from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from src.auth.dependencies import get_current_user
from src.database import get_db
from src.models import User
from src.notifications.schemas import NotificationResponse
from src.notifications.service import NotificationService

router = APIRouter()

@router.get("", response_model=List[NotificationResponse])
def list_notifications(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """List the current user's notifications"""
    return NotificationService.get_user_notifications(db, current_user.id)
