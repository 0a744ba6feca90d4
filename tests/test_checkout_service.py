from datetime import timezone
from decimal import Decimal

import pytest
from sqlalchemy import event, inspect

from src.checkouts.checkout_service import CheckoutService
from src.checkouts.schemas import PaymentStatus
from src.exceptions import AlreadyPaidError, DuplicateCheckoutError, NotFoundError
from src.models import Checkout, Order, TransactionHistory
from src.orders.order_service import OrderService

TIMESTAMP_FIELDS = {
    Checkout: ("created_at", "valid_until", "paid_at"),
    TransactionHistory: ("paid_at",),
}


@pytest.fixture
def create_order(db, user, ticket, passenger):
    """Order factory; every order comes with its pending checkout"""

    def _factory(passenger_count: int = 2):
        return OrderService(db).create_order(user.id, ticket.id, [passenger()] * passenger_count)

    return _factory


@pytest.fixture
def flushed_timestamps(db):
    """Checkout and history timestamps as they are handed to the database"""
    stamps = []

    def _record(session, flush_context, instances):
        for obj in list(session.new) + list(session.dirty):
            for key in TIMESTAMP_FIELDS.get(type(obj), ()):
                stamps.extend(value for value in inspect(obj).attrs[key].history.added if value is not None)

    event.listen(db, "before_flush", _record)
    yield stamps
    event.remove(db, "before_flush", _record)


class TestCreateCheckout:
    def test_second_checkout_for_order_is_rejected(self, db, user, create_order):
        order = create_order()
        original = db.get(Checkout, order.checkout_id)
        original_total, original_created_at = original.total, original.created_at

        with pytest.raises(DuplicateCheckoutError):
            CheckoutService(db).create_checkout(user.id, order.id, "bank_transfer")

        assert db.query(Checkout).count() == 1
        checkout = db.get(Checkout, order.checkout_id)
        assert checkout.total == original_total
        assert checkout.created_at == original_created_at
        assert checkout.payment_method is None

    def test_manual_checkout_after_previous_was_deleted(self, db, user, create_order):
        order = create_order(passenger_count=3)
        service = CheckoutService(db)
        service.delete_checkout(user.id, order.checkout_id)

        checkout = service.create_checkout(user.id, order.id, "credit_card")

        assert checkout.order_id == order.id
        assert checkout.total == Decimal("330.00")
        assert checkout.payment_method == "credit_card"
        assert checkout.payment_status == PaymentStatus.PENDING
        assert checkout.history is not None
        assert checkout.history.paid_at is None

    def test_unknown_order(self, db, user):
        with pytest.raises(NotFoundError):
            CheckoutService(db).create_checkout(user.id, 999, "credit_card")


class TestConfirmPayment:
    def test_marks_paid_and_stamps_history(self, db, user, create_order):
        order = create_order()

        checkout = CheckoutService(db).confirm_payment(user.id, order.checkout_id, order.id, "e_wallet")

        assert checkout.is_paid is True
        assert checkout.payment_status == PaymentStatus.PAID
        assert checkout.payment_method == "e_wallet"
        assert checkout.paid_at is not None
        history = db.query(TransactionHistory).filter(
            TransactionHistory.checkout_id == order.checkout_id
        ).one()
        assert history.paid_at == checkout.paid_at

    def test_paying_twice_is_rejected_and_timestamp_kept(self, db, user, create_order):
        order = create_order()
        service = CheckoutService(db)
        first = service.confirm_payment(user.id, order.checkout_id, order.id)

        with pytest.raises(AlreadyPaidError):
            service.confirm_payment(user.id, order.checkout_id, order.id)

        again = service.get_checkout(user.id, order.checkout_id)
        assert again.paid_at == first.paid_at
        assert again.history.paid_at == first.paid_at

    def test_timestamps_are_written_in_utc(self, db, user, create_order, flushed_timestamps):
        order = create_order()
        CheckoutService(db).confirm_payment(user.id, order.checkout_id, order.id)

        assert len(flushed_timestamps) >= 4
        assert all(stamp.tzinfo is timezone.utc for stamp in flushed_timestamps)

    def test_unknown_checkout(self, db, user, create_order):
        order = create_order()
        with pytest.raises(NotFoundError):
            CheckoutService(db).confirm_payment(user.id, 999, order.id)

    def test_other_users_checkout_is_not_found(self, db, create_user, create_order):
        order = create_order()
        stranger = create_user(email="stranger@example.com")
        with pytest.raises(NotFoundError):
            CheckoutService(db).confirm_payment(stranger.id, order.checkout_id, order.id)

    def test_relinks_to_order_without_checkout(self, db, user, create_order):
        first = create_order()
        second = create_order()
        service = CheckoutService(db)
        service.delete_checkout(user.id, second.checkout_id)

        checkout = service.confirm_payment(user.id, first.checkout_id, second.id)

        assert checkout.order_id == second.id
        assert db.get(Order, first.id).checkout is None

    def test_relink_to_order_with_checkout_is_rejected(self, db, user, create_order):
        first = create_order()
        second = create_order()

        with pytest.raises(DuplicateCheckoutError):
            CheckoutService(db).confirm_payment(user.id, first.checkout_id, second.id)
        assert db.get(Checkout, first.checkout_id).is_paid is False


class TestDeleteCheckout:
    def test_removes_history_then_checkout(self, db, user, create_order):
        order = create_order()
        CheckoutService(db).confirm_payment(user.id, order.checkout_id, order.id)

        CheckoutService(db).delete_checkout(user.id, order.checkout_id)

        assert db.query(Checkout).count() == 0
        assert db.query(TransactionHistory).count() == 0
        assert db.get(Order, order.id) is not None

    def test_unknown_checkout(self, db, user):
        with pytest.raises(NotFoundError):
            CheckoutService(db).delete_checkout(user.id, 999)


class TestListCheckouts:
    def test_lists_only_own_checkouts(self, db, user, create_user, create_order):
        create_order()
        create_order()
        stranger = create_user(email="stranger@example.com")

        assert len(CheckoutService(db).list_checkouts(user.id)) == 2
        assert CheckoutService(db).list_checkouts(stranger.id) == []
