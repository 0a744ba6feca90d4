from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from src.auth.dependencies import get_current_user
from src.database import get_db
from src.models import User
from src.orders.order_service import OrderService
from src.orders.schemas import (
    OrderCreateRequest, OrderPassengersAddRequest, OrderResponse, OrderDetail
)

router = APIRouter()

@router.post("", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
def create_order(
    request: OrderCreateRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Reserve seats on a ticket and open a pending checkout"""
    return OrderService(db).create_order(current_user.id, request.ticket_id, request.passengers)

@router.get("", response_model=List[OrderDetail])
def list_orders(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """List the current user's orders"""
    return OrderService(db).list_orders(current_user.id)

@router.get("/reference/{booking_code}", response_model=OrderDetail)
def get_order_by_booking_code(
    booking_code: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get one of the current user's orders by booking code"""
    return OrderService(db).get_order_by_booking_code(current_user.id, booking_code)

@router.get("/{order_id}", response_model=OrderDetail)
def get_order(
    order_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get order details by ID"""
    return OrderService(db).get_order(current_user.id, order_id)

@router.put("/{order_id}/passengers", response_model=OrderResponse)
def add_order_passengers(
    order_id: int,
    request: OrderPassengersAddRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Add passengers to an unpaid order"""
    return OrderService(db).add_passengers(current_user.id, order_id, request.passengers)

@router.delete("/{order_id}")
def delete_order(
    order_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Delete an order together with its passengers and checkout"""
    OrderService(db).delete_order(current_user.id, order_id)
    return {"status": True, "message": "Order deleted successfully"}
