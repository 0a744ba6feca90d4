from typing import List, Dict, Any
from sqlalchemy.orm import Session

from src.exceptions import NotFoundError
from src.models import OrderItem, Ticket

class SeatAllocationService:
    """Numbers seats per ticket, continuing after the highest seat ever issued.

    The ticket keeps its own high-water mark, so seats of deleted orders are
    never handed out again. Must run under the ticket's row lock, in the same
    transaction as InventoryService.reserve.
    """

    def __init__(self, db: Session):
        self.db = db

    def last_issued_seat(self, ticket_id: int) -> int:
        last_seat = self.db.query(Ticket.last_seat_number).filter(
            Ticket.id == ticket_id
        ).scalar()
        return last_seat or 0

    def allocate(self, ticket_id: int, passengers: List[Dict[str, Any]]) -> List[OrderItem]:
        """Build order items for ``passengers`` with consecutive seat numbers, in input order"""
        if not passengers:
            return []

        updated = self.db.query(Ticket).filter(Ticket.id == ticket_id).update(
            {Ticket.last_seat_number: Ticket.last_seat_number + len(passengers)},
            synchronize_session="fetch"
        )
        if updated != 1:
            raise NotFoundError("Ticket not found")

        start = self.last_issued_seat(ticket_id) - len(passengers)
        return [
            OrderItem(ticket_id=ticket_id, seat_number=start + index, **fields)
            for index, fields in enumerate(passengers, start=1)
        ]
