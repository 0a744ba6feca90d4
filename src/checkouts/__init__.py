"""
Checkout & Payment Module

- checkout_service.py: pending -> paid lifecycle, manual checkout creation
  and cascading deletion of transaction history
- router.py: FastAPI endpoints for checkouts
"""

from .router import router
from .checkout_service import CheckoutService
from .schemas import (
    CheckoutCreateRequest, PaymentConfirmationRequest, CheckoutResponse,
    TransactionHistoryResponse, PaymentStatus
)

__all__ = [
    "router",
    "CheckoutService",
    "CheckoutCreateRequest",
    "PaymentConfirmationRequest",
    "CheckoutResponse",
    "TransactionHistoryResponse",
    "PaymentStatus"
]
