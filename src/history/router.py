from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from src.auth.dependencies import get_current_user
from src.checkouts.schemas import TransactionHistoryResponse
from src.database import get_db
from src.history.service import HistoryService
from src.models import User

router = APIRouter()

@router.get("", response_model=List[TransactionHistoryResponse])
def list_history(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """List the current user's transaction history"""
    return HistoryService.get_user_history(db, current_user.id)
