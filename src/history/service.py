from sqlalchemy.orm import Session
from typing import List
from src.models import TransactionHistory, Checkout, Order

class HistoryService:
    @staticmethod
    def get_user_history(db: Session, user_id: int) -> List[TransactionHistory]:
        """Transaction history rows for the user's checkouts, newest first"""
        return db.query(TransactionHistory).join(
            Checkout, TransactionHistory.checkout_id == Checkout.id
        ).join(
            Order, Checkout.order_id == Order.id
        ).filter(Order.user_id == user_id).order_by(TransactionHistory.id.desc()).all()
