from sqlalchemy.orm import Session
from typing import List
from src.models import Notification

class NotificationService:
    @staticmethod
    def get_user_notifications(db: Session, user_id: int) -> List[Notification]:
        """Get the user's notifications, newest first"""
        return db.query(Notification).filter(
            Notification.user_id == user_id
        ).order_by(Notification.created_at.desc(), Notification.id.desc()).all()
