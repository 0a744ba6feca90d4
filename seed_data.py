#!/usr/bin/env python3

import sys
import os
from datetime import datetime, timedelta, timezone
from decimal import Decimal

# Add project root to path
sys.path.append(os.path.dirname(__file__))

from src.database import engine, SessionLocal, Base
from src.auth.utils import get_password_hash
from src.models import (
    User, Flight, Ticket, OrderItem, Order, Checkout, TransactionHistory, Notification
)

def create_seed_data():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()

    try:
        print("🚀 Creating seed data for the flight booking system...")

        # Clear existing data (in reverse dependency order)
        print("Clearing existing data...")
        db.query(TransactionHistory).delete()
        db.query(Checkout).delete()
        db.query(OrderItem).delete()
        db.query(Order).delete()
        db.query(Notification).delete()
        db.query(Ticket).delete()
        db.query(Flight).delete()
        db.query(User).delete()

        # 1. Create demo user
        print("Creating demo user...")
        user = User(
            name="Demo Traveller",
            email="demo@example.com",
            password=get_password_hash("demo-password")
        )
        db.add(user)
        db.flush()

        # 2. Create flights
        print("Creating flights...")
        tomorrow = datetime.now(timezone.utc).replace(hour=8, minute=0, second=0, microsecond=0) + timedelta(days=1)
        flights = [
            Flight(flight_number="GA-402", departure_airport="Soekarno-Hatta International (CGK)",
                   arrival_airport="Ngurah Rai International (DPS)",
                   departure_at=tomorrow, arrival_at=tomorrow + timedelta(hours=1, minutes=55)),
            Flight(flight_number="GA-151", departure_airport="Soekarno-Hatta International (CGK)",
                   arrival_airport="Kualanamu International (KNO)",
                   departure_at=tomorrow + timedelta(hours=3), arrival_at=tomorrow + timedelta(hours=5, minutes=20)),
            Flight(flight_number="QZ-7510", departure_airport="Juanda International (SUB)",
                   arrival_airport="Sultan Hasanuddin International (UPG)",
                   departure_at=tomorrow + timedelta(days=1), arrival_at=tomorrow + timedelta(days=1, hours=1, minutes=30)),
        ]
        db.add_all(flights)
        db.flush()

        # 3. Create ticket classes per flight
        print("Creating tickets...")
        tickets = []
        for flight in flights:
            tickets.extend([
                Ticket(flight_id=flight.id, seat_class="economy", price=Decimal("1250000.00"), remaining=120),
                Ticket(flight_id=flight.id, seat_class="business", price=Decimal("4800000.00"), remaining=24),
                Ticket(flight_id=flight.id, seat_class="first", price=Decimal("9500000.00"), remaining=8),
            ])
        db.add_all(tickets)

        db.commit()
        print("✅ Successfully created seed data!")
        print(f"Created:")
        print(f"  - 1 user (demo@example.com / demo-password)")
        print(f"  - {len(flights)} flights")
        print(f"  - {len(tickets)} tickets")

    except Exception as e:
        print(f"❌ Error creating seed data: {e}")
        db.rollback()
        raise
    finally:
        db.close()

if __name__ == "__main__":
    create_seed_data()
