import pytest

from src.exceptions import InsufficientInventoryError, InvalidInputError, NotFoundError
from src.models import Ticket
from src.tickets.inventory_service import InventoryService


class TestInventoryService:
    def test_reserve_decrements_remaining(self, db, create_ticket):
        ticket = create_ticket(remaining=10)
        inventory = InventoryService(db)

        assert inventory.reserve(ticket.id, 3) == 7
        assert inventory.reserve(ticket.id, 7) == 0
        db.commit()

        assert db.get(Ticket, ticket.id).remaining == 0

    def test_reserve_more_than_remaining_changes_nothing(self, db, create_ticket):
        ticket = create_ticket(remaining=2)
        inventory = InventoryService(db)

        with pytest.raises(InsufficientInventoryError):
            inventory.reserve(ticket.id, 3)
        db.rollback()

        assert db.get(Ticket, ticket.id).remaining == 2

    def test_reserve_requires_positive_count(self, db, ticket):
        with pytest.raises(InvalidInputError):
            InventoryService(db).reserve(ticket.id, 0)

    def test_reserve_unknown_ticket(self, db):
        with pytest.raises(NotFoundError):
            InventoryService(db).reserve(999, 1)

    def test_release_adds_seats_back(self, db, create_ticket):
        ticket = create_ticket(remaining=5)
        inventory = InventoryService(db)

        inventory.reserve(ticket.id, 4)
        assert inventory.release(ticket.id, 4) == 5

    def test_lock_ticket_unknown(self, db):
        with pytest.raises(NotFoundError):
            InventoryService(db).lock_ticket(999)
