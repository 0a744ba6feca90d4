from sqlalchemy import Column, Integer, String, Boolean, DateTime, Date, Text, ForeignKey, Numeric, CheckConstraint, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from src.database import Base

# ================================
# Users
# ================================
class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    orders = relationship("Order", back_populates="user")
    notifications = relationship("Notification", back_populates="user", cascade="all, delete-orphan")

# ================================
# Flights & Ticket Inventory
# ================================
class Flight(Base):
    __tablename__ = "flights"

    id = Column(Integer, primary_key=True, index=True)
    flight_number = Column(String(20), nullable=False, index=True)
    departure_airport = Column(String(255), nullable=False)
    arrival_airport = Column(String(255), nullable=False)
    departure_at = Column(DateTime(timezone=True), nullable=False)
    arrival_at = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    tickets = relationship("Ticket", back_populates="flight")

class Ticket(Base):
    __tablename__ = "tickets"
    __table_args__ = (
        CheckConstraint("remaining >= 0", name="ck_tickets_remaining_non_negative"),
    )

    id = Column(Integer, primary_key=True, index=True)
    flight_id = Column(Integer, ForeignKey("flights.id"), nullable=False, index=True)
    seat_class = Column(String(50), nullable=False, default="economy")
    price = Column(Numeric(10, 2), nullable=False)
    remaining = Column(Integer, nullable=False, default=0)
    last_seat_number = Column(Integer, nullable=False, default=0, server_default="0")  # highest seat ever issued
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    flight = relationship("Flight", back_populates="tickets")
    orders = relationship("Order", back_populates="ticket")

# ================================
# Orders & Passengers
# ================================
class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    ticket_id = Column(Integer, ForeignKey("tickets.id"), nullable=False, index=True)
    booking_code = Column(String(16), index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    user = relationship("User", back_populates="orders")
    ticket = relationship("Ticket", back_populates="orders")
    items = relationship(
        "OrderItem", back_populates="order",
        cascade="all, delete-orphan", order_by="OrderItem.seat_number"
    )
    checkout = relationship("Checkout", back_populates="order", uselist=False, cascade="all, delete-orphan")

class OrderItem(Base):
    __tablename__ = "order_items"
    __table_args__ = (
        UniqueConstraint("ticket_id", "seat_number", name="uq_order_items_ticket_seat"),
    )

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    ticket_id = Column(Integer, ForeignKey("tickets.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    birth_date = Column(Date)
    nationality = Column(String(100))
    identity_number = Column(String(100))
    issuing_country = Column(String(100))
    document_valid_until = Column(Date)
    is_infant = Column(Boolean, nullable=False, default=False)
    seat_number = Column(Integer, nullable=False)

    # Relationships
    order = relationship("Order", back_populates="items")

# ================================
# Checkout & Payment
# ================================
class Checkout(Base):
    __tablename__ = "checkouts"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), unique=True, nullable=False)
    total = Column(Numeric(12, 2), nullable=False)
    payment_method = Column(String(50))
    is_paid = Column(Boolean, nullable=False, default=False)
    paid_at = Column(DateTime(timezone=True))
    created_at = Column(DateTime(timezone=True), nullable=False)
    valid_until = Column(DateTime(timezone=True), nullable=False)

    # Relationships
    order = relationship("Order", back_populates="checkout")
    history = relationship("TransactionHistory", back_populates="checkout", uselist=False, cascade="all, delete-orphan")

class TransactionHistory(Base):
    __tablename__ = "history_transactions"

    id = Column(Integer, primary_key=True, index=True)
    checkout_id = Column(Integer, ForeignKey("checkouts.id", ondelete="CASCADE"), unique=True, nullable=False)
    paid_at = Column(DateTime(timezone=True))
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    checkout = relationship("Checkout", back_populates="history")

# ================================
# Notifications
# ================================
class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    body = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)

    # Relationships
    user = relationship("User", back_populates="notifications")
