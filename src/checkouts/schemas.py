from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from decimal import Decimal
from enum import Enum

class PaymentStatus(str, Enum):
    """Checkout payment status; ``paid`` is terminal"""
    PENDING = "pending"
    PAID = "paid"

class CheckoutCreateRequest(BaseModel):
    """Open a checkout for an order that has none"""
    order_id: int
    payment_method: str = Field(..., min_length=1, max_length=50)

class PaymentConfirmationRequest(BaseModel):
    """Mark a checkout as paid"""
    order_id: int
    payment_method: Optional[str] = Field(None, min_length=1, max_length=50)

class TransactionHistoryResponse(BaseModel):
    id: int
    checkout_id: int
    paid_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class CheckoutResponse(BaseModel):
    id: int
    order_id: int
    total: Decimal
    payment_method: Optional[str] = None
    is_paid: bool
    payment_status: PaymentStatus
    paid_at: Optional[datetime] = None
    created_at: datetime
    valid_until: datetime
    history: Optional[TransactionHistoryResponse] = None
