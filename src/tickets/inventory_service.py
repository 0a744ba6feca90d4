from sqlalchemy.orm import Session

from src.exceptions import NotFoundError, InsufficientInventoryError, InvalidInputError
from src.logger_config import logger
from src.models import Ticket

class InventoryService:
    """Remaining-seat ledger for tickets.

    Every mutation is a guarded single-statement update, so the counter can
    never go negative even when two transactions race past their reads. The
    caller owns the transaction; nothing here commits.
    """

    def __init__(self, db: Session):
        self.db = db

    def get_ticket(self, ticket_id: int) -> Ticket:
        ticket = self.db.query(Ticket).filter(Ticket.id == ticket_id).first()
        if not ticket:
            raise NotFoundError("Ticket not found")
        return ticket

    def lock_ticket(self, ticket_id: int) -> Ticket:
        """Row-lock the ticket for the rest of the transaction and reload it"""
        ticket = (
            self.db.query(Ticket)
            .filter(Ticket.id == ticket_id)
            .with_for_update()
            .populate_existing()
            .first()
        )
        if not ticket:
            raise NotFoundError("Ticket not found")
        return ticket

    def reserve(self, ticket_id: int, count: int) -> int:
        """Take ``count`` seats off the ticket, all or nothing.

        Returns the remaining quantity after the reservation.
        """
        if count < 1:
            raise InvalidInputError("At least one seat must be reserved")

        updated = (
            self.db.query(Ticket)
            .filter(Ticket.id == ticket_id, Ticket.remaining >= count)
            .update({Ticket.remaining: Ticket.remaining - count}, synchronize_session="fetch")
        )
        if updated != 1:
            ticket = self.get_ticket(ticket_id)
            logger.warning(
                f"Ticket {ticket_id}: requested {count} seats, only {ticket.remaining} remaining"
            )
            raise InsufficientInventoryError("Order quantity exceeds the available ticket quantity")

        return self.get_ticket(ticket_id).remaining

    def release(self, ticket_id: int, count: int) -> int:
        """Put ``count`` seats back on the ticket"""
        if count < 1:
            return self.get_ticket(ticket_id).remaining

        updated = (
            self.db.query(Ticket)
            .filter(Ticket.id == ticket_id)
            .update({Ticket.remaining: Ticket.remaining + count}, synchronize_session="fetch")
        )
        if updated != 1:
            raise NotFoundError("Ticket not found")
        return self.get_ticket(ticket_id).remaining
