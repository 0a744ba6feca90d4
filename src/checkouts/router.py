from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from src.auth.dependencies import get_current_user
from src.database import get_db
from src.models import User
from src.checkouts.checkout_service import CheckoutService
from src.checkouts.schemas import (
    CheckoutCreateRequest, PaymentConfirmationRequest, CheckoutResponse
)

router = APIRouter()

@router.post("", response_model=CheckoutResponse, status_code=status.HTTP_201_CREATED)
def create_checkout(
    request: CheckoutCreateRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Open a checkout for an order that has none"""
    return CheckoutService(db).create_checkout(current_user.id, request.order_id, request.payment_method)

@router.get("", response_model=List[CheckoutResponse])
def list_checkouts(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """List the current user's checkouts"""
    return CheckoutService(db).list_checkouts(current_user.id)

@router.get("/{checkout_id}", response_model=CheckoutResponse)
def get_checkout(
    checkout_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get checkout details by ID"""
    return CheckoutService(db).get_checkout(current_user.id, checkout_id)

@router.put("/{checkout_id}", response_model=CheckoutResponse)
def confirm_payment(
    checkout_id: int,
    request: PaymentConfirmationRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Confirm payment of a checkout"""
    return CheckoutService(db).confirm_payment(
        current_user.id, checkout_id, request.order_id, request.payment_method
    )

@router.delete("/{checkout_id}")
def delete_checkout(
    checkout_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Delete a checkout and its transaction history"""
    CheckoutService(db).delete_checkout(current_user.id, checkout_id)
    return {"status": True, "message": "Checkout and corresponding history deleted successfully"}
