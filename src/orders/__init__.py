"""
Order Module

Turns a booking request into a reservation:

- pricing_service.py: fare and tax arithmetic (infants ride free)
- order_service.py: order aggregate; reserves inventory, numbers seats and
  opens the pending checkout in a single transaction
- router.py: FastAPI endpoints for the current user's orders
- schemas.py: Pydantic models for passengers, orders and price breakdowns
"""

from .router import router
from .pricing_service import PricingService
from .order_service import OrderService, generate_booking_code
from .schemas import (
    PassengerCreate, OrderCreateRequest, OrderPassengersAddRequest,
    OrderResponse, OrderDetail, PriceBreakdown
)

__all__ = [
    "router",
    "PricingService",
    "OrderService",
    "generate_booking_code",
    "PassengerCreate",
    "OrderCreateRequest",
    "OrderPassengersAddRequest",
    "OrderResponse",
    "OrderDetail",
    "PriceBreakdown"
]
