import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

from datetime import datetime, timedelta
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from src.auth.utils import create_access_token, get_password_hash
from src.database import Base, build_engine, get_db
from src.main import app
from src.models import Flight, Ticket, User
from src.orders.schemas import PassengerCreate


@pytest.fixture
def engine():
    engine = build_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    yield session
    session.close()


@pytest.fixture
def create_user(db):
    """User factory (factories as fixtures)"""

    def _factory(name: str = "Test User", email: str = "user@example.com") -> User:
        user = User(name=name, email=email, password=get_password_hash("secret"))
        db.add(user)
        db.commit()
        return user

    return _factory


@pytest.fixture
def create_ticket(db):
    """Ticket factory; each ticket gets its own flight"""

    def _factory(price: Decimal = Decimal("100.00"), remaining: int = 10) -> Ticket:
        departure = datetime(2030, 1, 15, 8, 0)
        flight = Flight(
            flight_number="GA-402",
            departure_airport="Soekarno-Hatta International (CGK)",
            arrival_airport="Ngurah Rai International (DPS)",
            departure_at=departure,
            arrival_at=departure + timedelta(hours=2),
        )
        ticket = Ticket(flight=flight, seat_class="economy", price=price, remaining=remaining)
        db.add(ticket)
        db.commit()
        return ticket

    return _factory


@pytest.fixture
def passenger():
    """Passenger payload factory"""

    def _factory(name: str = "Budi Santoso", is_infant: bool = False, **fields) -> PassengerCreate:
        return PassengerCreate(name=name, is_infant=is_infant, **fields)

    return _factory


@pytest.fixture
def user(create_user):
    return create_user()


@pytest.fixture
def ticket(create_ticket):
    return create_ticket()


@pytest.fixture
def client(db):
    def _override_get_db():
        yield db

    app.dependency_overrides[get_db] = _override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(user):
    token = create_access_token({"sub": str(user.id)})
    return {"Authorization": f"Bearer {token}"}
