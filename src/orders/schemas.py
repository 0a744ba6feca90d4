from pydantic import BaseModel, Field, validator
from typing import List, Optional, Dict, Any
from datetime import datetime, date
from decimal import Decimal

from src.tickets.schemas import FlightSchedule

MAX_PASSENGERS_PER_ORDER = 10

# Passenger Information
class PassengerCreate(BaseModel):
    """One seat occupant as submitted by the client"""
    title: Optional[str] = None  # Mr, Mrs, Ms...
    name: str = Field(..., min_length=1, max_length=200)
    birth_date: Optional[date] = None
    nationality: Optional[str] = None
    identity_number: Optional[str] = None  # national id or passport number
    issuing_country: Optional[str] = None
    document_valid_until: Optional[date] = None
    is_infant: bool = False

    @validator('name')
    def validate_name(cls, v):
        if not v.strip():
            raise ValueError('Passenger name is required')
        return v.strip()

    def display_name(self) -> str:
        return f"{self.title} {self.name}" if self.title else self.name

    def to_item_fields(self) -> Dict[str, Any]:
        return {
            "name": self.display_name(),
            "birth_date": self.birth_date,
            "nationality": self.nationality,
            "identity_number": self.identity_number,
            "issuing_country": self.issuing_country,
            "document_valid_until": self.document_valid_until,
            "is_infant": self.is_infant,
        }

def _validate_passenger_list(v):
    if not v:
        raise ValueError('At least one passenger is required')
    if len(v) > MAX_PASSENGERS_PER_ORDER:
        raise ValueError(f'Maximum {MAX_PASSENGERS_PER_ORDER} passengers per order')
    return v

# Order Request Models
class OrderCreateRequest(BaseModel):
    """Reserve seats on a ticket for a batch of passengers"""
    ticket_id: int
    passengers: List[PassengerCreate]

    @validator('passengers')
    def validate_passengers(cls, v):
        return _validate_passenger_list(v)

class OrderPassengersAddRequest(BaseModel):
    """Add passengers to an existing, unpaid order"""
    passengers: List[PassengerCreate]

    @validator('passengers')
    def validate_passengers(cls, v):
        return _validate_passenger_list(v)

# Order Response Models
class PriceBreakdown(BaseModel):
    """Amounts derived from the fare; ``pre_tax`` is what the checkout stores"""
    total: Decimal
    pre_tax: Decimal
    net: Decimal
    tax: Decimal

class OrderItemResponse(BaseModel):
    id: int
    name: str
    birth_date: Optional[date] = None
    nationality: Optional[str] = None
    identity_number: Optional[str] = None
    issuing_country: Optional[str] = None
    document_valid_until: Optional[date] = None
    is_infant: bool
    seat_number: int

    class Config:
        from_attributes = True

class OrderTicketSummary(BaseModel):
    id: int
    seat_class: str
    price: Decimal
    schedule: FlightSchedule

class OrderResponse(BaseModel):
    """Order view returned when an order is created or changed"""
    id: int
    user_id: int
    ticket_id: int
    booking_code: str
    created_at: Optional[datetime] = None
    items: List[OrderItemResponse]
    checkout_id: Optional[int] = None
    is_paid: bool = False
    price: Optional[PriceBreakdown] = None

class OrderDetail(BaseModel):
    """Order with its ticket and flight schedule, for listings"""
    id: int
    booking_code: str
    created_at: Optional[datetime] = None
    ticket: OrderTicketSummary
    items: List[OrderItemResponse]
    checkout_id: Optional[int] = None
    is_paid: bool = False
    total: Optional[Decimal] = None
