from typing import List, Optional
from datetime import datetime, timedelta, timezone
from sqlalchemy.orm import Session, joinedload, selectinload

from src.config import settings
from src.database import atomic
from src.exceptions import NotFoundError, DuplicateCheckoutError, AlreadyPaidError
from src.logger_config import logger
from src.models import Checkout, Order, TransactionHistory
from src.checkouts.schemas import CheckoutResponse, PaymentStatus, TransactionHistoryResponse
from src.orders.pricing_service import PricingService

class CheckoutService:
    """Payment lifecycle of an order's checkout: pending -> paid.

    Every lookup is scoped to the orders of ``user_id``.
    """

    def __init__(self, db: Session, pricing: Optional[PricingService] = None):
        self.db = db
        self.pricing = pricing or PricingService()

    def create_checkout(self, user_id: int, order_id: int, payment_method: str) -> CheckoutResponse:
        """Open a pending checkout for an order that does not have one yet"""
        order = self._get_user_order(user_id, order_id)

        with atomic(self.db):
            existing = self.db.query(Checkout).filter(Checkout.order_id == order.id).first()
            if existing:
                raise DuplicateCheckoutError("A checkout already exists for this order")

            price = self.pricing.calculate_for_items(order.ticket.price, order.items)
            now = datetime.now(timezone.utc)
            checkout = Checkout(
                order_id=order.id,
                total=price.pre_tax,
                payment_method=payment_method,
                is_paid=False,
                created_at=now,
                valid_until=now + timedelta(minutes=settings.CHECKOUT_VALID_MINUTES)
            )
            self.db.add(checkout)
            self.db.add(TransactionHistory(checkout=checkout))
            self.db.flush()
            checkout_id = checkout.id

        logger.info(f"Checkout {checkout_id} created for order {order_id}, total {price.pre_tax}")
        return self.get_checkout(user_id, checkout_id)

    def list_checkouts(self, user_id: int) -> List[CheckoutResponse]:
        checkouts = self._user_checkouts(user_id).order_by(Checkout.id.desc()).all()
        return [self._to_response(checkout) for checkout in checkouts]

    def get_checkout(self, user_id: int, checkout_id: int) -> CheckoutResponse:
        return self._to_response(self._get_user_checkout(user_id, checkout_id))

    def confirm_payment(
        self,
        user_id: int,
        checkout_id: int,
        order_id: int,
        payment_method: Optional[str] = None
    ) -> CheckoutResponse:
        """Mark the checkout paid and stamp its history with the same time.

        A paid checkout is never paid again; its timestamp does not move.
        """
        self._get_user_checkout(user_id, checkout_id)
        order = self._get_user_order(user_id, order_id)

        with atomic(self.db):
            checkout = self.db.query(Checkout).filter(
                Checkout.id == checkout_id
            ).with_for_update().populate_existing().one()
            if checkout.is_paid:
                raise AlreadyPaidError("Checkout has already been paid")

            if checkout.order_id != order.id:
                other = self.db.query(Checkout).filter(Checkout.order_id == order.id).first()
                if other:
                    raise DuplicateCheckoutError("A checkout already exists for this order")
                checkout.order_id = order.id

            paid_at = datetime.now(timezone.utc)
            checkout.is_paid = True
            checkout.paid_at = paid_at
            if payment_method:
                checkout.payment_method = payment_method

            history = self.db.query(TransactionHistory).filter(
                TransactionHistory.checkout_id == checkout.id
            ).first()
            if history is None:
                history = TransactionHistory(checkout_id=checkout.id)
                self.db.add(history)
            history.paid_at = paid_at
            self.db.flush()

        logger.info(f"Checkout {checkout_id} paid for order {order_id}")
        return self.get_checkout(user_id, checkout_id)

    def delete_checkout(self, user_id: int, checkout_id: int) -> None:
        """Delete the checkout's history rows, then the checkout itself"""
        self._get_user_checkout(user_id, checkout_id)

        with atomic(self.db):
            self.db.query(TransactionHistory).filter(
                TransactionHistory.checkout_id == checkout_id
            ).delete(synchronize_session="fetch")
            self.db.query(Checkout).filter(
                Checkout.id == checkout_id
            ).delete(synchronize_session="fetch")

        logger.info(f"Checkout {checkout_id} and its history deleted")

    def _user_checkouts(self, user_id: int):
        return self.db.query(Checkout).join(Order, Checkout.order_id == Order.id).options(
            joinedload(Checkout.history)
        ).filter(Order.user_id == user_id)

    def _get_user_checkout(self, user_id: int, checkout_id: int) -> Checkout:
        checkout = self._user_checkouts(user_id).filter(Checkout.id == checkout_id).first()
        if not checkout:
            raise NotFoundError("Checkout not found")
        return checkout

    def _get_user_order(self, user_id: int, order_id: int) -> Order:
        order = self.db.query(Order).options(
            selectinload(Order.items),
            joinedload(Order.ticket)
        ).filter(Order.id == order_id, Order.user_id == user_id).first()
        if not order:
            raise NotFoundError("Order not found")
        return order

    def _to_response(self, checkout: Checkout) -> CheckoutResponse:
        history = checkout.history
        return CheckoutResponse(
            id=checkout.id,
            order_id=checkout.order_id,
            total=checkout.total,
            payment_method=checkout.payment_method,
            is_paid=checkout.is_paid,
            payment_status=PaymentStatus.PAID if checkout.is_paid else PaymentStatus.PENDING,
            paid_at=checkout.paid_at,
            created_at=checkout.created_at,
            valid_until=checkout.valid_until,
            history=TransactionHistoryResponse.model_validate(history) if history else None
        )
