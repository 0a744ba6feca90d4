from src.orders.order_service import OrderService
from src.tickets.seat_service import SeatAllocationService


class TestSeatAllocationService:
    def test_first_allocation_starts_at_one(self, db, ticket, passenger):
        items = SeatAllocationService(db).allocate(
            ticket.id,
            [passenger(name="A").to_item_fields(), passenger(name="B").to_item_fields()],
        )
        assert [(item.name, item.seat_number) for item in items] == [("A", 1), ("B", 2)]
        assert all(item.ticket_id == ticket.id for item in items)

    def test_continues_after_highest_issued_seat(self, db, user, ticket, passenger):
        OrderService(db).create_order(user.id, ticket.id, [passenger(), passenger()])

        seats = SeatAllocationService(db)
        assert seats.last_issued_seat(ticket.id) == 2

        items = seats.allocate(ticket.id, [passenger().to_item_fields()] * 3)
        assert [item.seat_number for item in items] == [3, 4, 5]

    def test_sequences_are_per_ticket(self, db, user, create_ticket, passenger):
        first = create_ticket()
        second = create_ticket()
        OrderService(db).create_order(user.id, first.id, [passenger()] * 4)

        assert SeatAllocationService(db).last_issued_seat(second.id) == 0

    def test_title_is_prefixed_to_name(self, db, ticket, passenger):
        items = SeatAllocationService(db).allocate(
            ticket.id, [passenger(name="Siti", title="Mrs").to_item_fields()]
        )
        assert items[0].name == "Mrs Siti"
