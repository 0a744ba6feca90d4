from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from src.database import get_db
from src.tickets.inventory_service import InventoryService
from src.tickets.schemas import TicketResponse, FlightSchedule

router = APIRouter()

@router.get("/{ticket_id}", response_model=TicketResponse)
def get_ticket(ticket_id: int, db: Session = Depends(get_db)):
    """Get a ticket with its flight schedule and remaining seats"""
    ticket = InventoryService(db).get_ticket(ticket_id)
    return TicketResponse(
        id=ticket.id,
        seat_class=ticket.seat_class,
        price=ticket.price,
        remaining=ticket.remaining,
        schedule=FlightSchedule.model_validate(ticket.flight)
    )
