from typing import List, Optional
from datetime import datetime, timedelta, timezone
from sqlalchemy.orm import Session, joinedload, selectinload
import hashlib

from src.auth.service import UserService
from src.config import settings
from src.database import atomic
from src.exceptions import NotFoundError, InvalidInputError, AlreadyPaidError
from src.logger_config import logger
from src.models import Order, Ticket, Checkout, TransactionHistory, Notification
from src.orders.pricing_service import PricingService
from src.orders.schemas import (
    PassengerCreate, OrderResponse, OrderDetail, OrderItemResponse,
    OrderTicketSummary, PriceBreakdown
)
from src.tickets.inventory_service import InventoryService
from src.tickets.seat_service import SeatAllocationService
from src.tickets.schemas import FlightSchedule

ORDER_CREATED_TITLE = "Order Created"
ORDER_CREATED_BODY = (
    "Your order has been created successfully. "
    "Please confirm the payment to proceed."
)

def generate_booking_code(order_id: int) -> str:
    """Short display code for an order; derived from the id, so not a secret"""
    return hashlib.sha256(str(order_id).encode()).hexdigest()[:7]

class OrderService:
    """Creates, reads, extends and deletes a user's flight orders"""

    def __init__(self, db: Session, pricing: Optional[PricingService] = None):
        self.db = db
        self.inventory = InventoryService(db)
        self.seats = SeatAllocationService(db)
        self.pricing = pricing or PricingService()

    def create_order(
        self,
        user_id: int,
        ticket_id: int,
        passengers: List[PassengerCreate]
    ) -> OrderResponse:
        """Reserve seats for ``passengers`` and open a pending checkout.

        Inventory decrement, seat numbering, the order, its checkout, the
        history row and the notification are written in one transaction.
        """
        if not passengers:
            raise InvalidInputError("At least one passenger is required")

        with atomic(self.db):
            user = UserService.get_user_by_id(self.db, user_id)
            if not user:
                raise NotFoundError("User not found")

            ticket = self.inventory.lock_ticket(ticket_id)
            self.inventory.reserve(ticket.id, len(passengers))

            items = self.seats.allocate(
                ticket.id, [passenger.to_item_fields() for passenger in passengers]
            )
            infant_count = sum(1 for item in items if item.is_infant)

            order = Order(user_id=user.id, ticket_id=ticket.id, items=items)
            self.db.add(order)
            self.db.flush()
            order.booking_code = generate_booking_code(order.id)

            price = self.pricing.calculate(ticket.price, len(items), infant_count)

            now = datetime.now(timezone.utc)
            checkout = Checkout(
                order=order,
                total=price.pre_tax,
                is_paid=False,
                created_at=now,
                valid_until=now + timedelta(minutes=settings.CHECKOUT_VALID_MINUTES)
            )
            self.db.add(checkout)
            self.db.add(TransactionHistory(checkout=checkout))
            self.db.add(Notification(
                user_id=user.id,
                title=ORDER_CREATED_TITLE,
                body=ORDER_CREATED_BODY,
                created_at=now
            ))
            self.db.flush()

            order_id = order.id

        logger.info(
            f"Order {order_id} created for user {user_id}: "
            f"{len(passengers)} seat(s) on ticket {ticket_id}, total {price.pre_tax}"
        )
        return self._to_response(self._load_order(order_id), price)

    def add_passengers(
        self,
        user_id: int,
        order_id: int,
        passengers: List[PassengerCreate]
    ) -> OrderResponse:
        """Add passengers to an unpaid order and reprice its checkout.

        Locks are taken ticket, then order, then checkout.
        """
        if not passengers:
            raise InvalidInputError("At least one passenger is required")

        with atomic(self.db):
            ticket = self.inventory.lock_ticket(self._get_order_ticket_id(user_id, order_id))
            order = self._lock_user_order(user_id, order_id)

            checkout = order.checkout
            if checkout:
                checkout = self.db.query(Checkout).filter(
                    Checkout.id == checkout.id
                ).with_for_update().populate_existing().one()
                if checkout.is_paid:
                    raise AlreadyPaidError("Order has already been paid and cannot be changed")

            self.inventory.reserve(ticket.id, len(passengers))

            new_items = self.seats.allocate(
                ticket.id, [passenger.to_item_fields() for passenger in passengers]
            )
            order.items.extend(new_items)

            price = self.pricing.calculate_for_items(ticket.price, order.items)
            if checkout:
                checkout.total = price.pre_tax
            self.db.flush()

        logger.info(f"Order {order_id}: added {len(passengers)} passenger(s)")
        return self._to_response(self._load_order(order_id), price)

    def get_user_order(self, user_id: int, order_id: int) -> Order:
        order = self.db.query(Order).options(
            selectinload(Order.items),
            joinedload(Order.checkout),
            joinedload(Order.ticket).joinedload(Ticket.flight)
        ).filter(Order.id == order_id, Order.user_id == user_id).first()
        if not order:
            raise NotFoundError("Order not found")
        return order

    def get_order(self, user_id: int, order_id: int) -> OrderDetail:
        return self._to_detail(self.get_user_order(user_id, order_id))

    def get_order_by_booking_code(self, user_id: int, booking_code: str) -> OrderDetail:
        """Look up an order by its display code; only the owner's orders match"""
        order = self.db.query(Order).options(
            selectinload(Order.items),
            joinedload(Order.checkout),
            joinedload(Order.ticket).joinedload(Ticket.flight)
        ).filter(
            Order.booking_code == booking_code.lower(),
            Order.user_id == user_id
        ).first()
        if not order:
            raise NotFoundError("Order not found")
        return self._to_detail(order)

    def list_orders(self, user_id: int) -> List[OrderDetail]:
        orders = self.db.query(Order).options(
            selectinload(Order.items),
            joinedload(Order.checkout),
            joinedload(Order.ticket).joinedload(Ticket.flight)
        ).filter(Order.user_id == user_id).order_by(Order.id.desc()).all()
        return [self._to_detail(order) for order in orders]

    def delete_order(self, user_id: int, order_id: int) -> None:
        """Delete an order with its passengers, checkout and history.

        The order's seats go back to the ticket.
        """
        with atomic(self.db):
            ticket = self.inventory.lock_ticket(self._get_order_ticket_id(user_id, order_id))
            order = self._lock_user_order(user_id, order_id)
            released = len(order.items)
            self.inventory.release(ticket.id, released)
            self.db.delete(order)

        logger.info(f"Order {order_id} deleted, {released} seat(s) released")

    def _get_order_ticket_id(self, user_id: int, order_id: int) -> int:
        ticket_id = self.db.query(Order.ticket_id).filter(
            Order.id == order_id, Order.user_id == user_id
        ).scalar()
        if ticket_id is None:
            raise NotFoundError("Order not found")
        return ticket_id

    def _lock_user_order(self, user_id: int, order_id: int) -> Order:
        """Row-lock the order and reload it with its current items and checkout"""
        order = self.db.query(Order).options(
            selectinload(Order.items),
            selectinload(Order.checkout)
        ).filter(
            Order.id == order_id, Order.user_id == user_id
        ).with_for_update().populate_existing().first()
        if not order:
            raise NotFoundError("Order not found")
        return order

    def _load_order(self, order_id: int) -> Order:
        return self.db.query(Order).options(
            selectinload(Order.items),
            joinedload(Order.checkout)
        ).filter(Order.id == order_id).one()

    def _to_response(self, order: Order, price: Optional[PriceBreakdown] = None) -> OrderResponse:
        checkout = order.checkout
        return OrderResponse(
            id=order.id,
            user_id=order.user_id,
            ticket_id=order.ticket_id,
            booking_code=order.booking_code,
            created_at=order.created_at,
            items=[OrderItemResponse.model_validate(item) for item in order.items],
            checkout_id=checkout.id if checkout else None,
            is_paid=checkout.is_paid if checkout else False,
            price=price
        )

    def _to_detail(self, order: Order) -> OrderDetail:
        ticket = order.ticket
        checkout = order.checkout
        return OrderDetail(
            id=order.id,
            booking_code=order.booking_code,
            created_at=order.created_at,
            ticket=OrderTicketSummary(
                id=ticket.id,
                seat_class=ticket.seat_class,
                price=ticket.price,
                schedule=FlightSchedule.model_validate(ticket.flight)
            ),
            items=[OrderItemResponse.model_validate(item) for item in order.items],
            checkout_id=checkout.id if checkout else None,
            is_paid=checkout.is_paid if checkout else False,
            total=checkout.total if checkout else None
        )
