from pydantic import BaseModel
from datetime import datetime
from decimal import Decimal

class FlightSchedule(BaseModel):
    """Departure and arrival of the flight a ticket is sold on"""
    flight_number: str
    departure_airport: str
    departure_at: datetime
    arrival_airport: str
    arrival_at: datetime

    class Config:
        from_attributes = True

class TicketResponse(BaseModel):
    id: int
    seat_class: str
    price: Decimal
    remaining: int
    schedule: FlightSchedule
