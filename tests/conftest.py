# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up test environment variables before any imports
# - Fresh in-memory SQLite schema per test
# - TestClient with fake payment gateway, mailer and assistant
# - Seeded users, admins, catalog and exchange rates
# =============================================================================

import os
from decimal import Decimal

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-jwt-signing")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("ADMIN_EMAIL", "admin@gisabogroup.ca")

import pytest
from fastapi.testclient import TestClient

from app.dependencies import get_assistant, get_mailer, get_square_client
from app.exceptions import PaymentDeclinedError
from app.main import app
from core.models.chat import ChatMessage
from lib.database import SessionLocal, engine
from lib.orm import Admin, Base, Category, ExchangeRate, Product, Service, User
from lib.security import create_access_token, hash_password
from lib.square_client import PaymentResult


# =============================================================================
# Fakes
# =============================================================================

class FakeGateway:
    """Stands in for SquareClient; records every charge attempt."""

    def __init__(self):
        self.calls: list[dict] = []
        self.decline: PaymentDeclinedError | None = None

    def create_payment(self, **kwargs) -> PaymentResult:
        self.calls.append(kwargs)
        if self.decline is not None:
            raise self.decline
        return PaymentResult(
            payment_id=f"pay_{len(self.calls)}",
            status="COMPLETED",
            source_type="CARD",
        )

    def close(self) -> None:
        pass


class FakeMailer:
    """Stands in for Mailer; records confirmations instead of sending."""

    def __init__(self):
        self.transfers: list[tuple] = []
        self.orders: list[tuple] = []

    def send_transfer_confirmation(self, transfer, user, payment_id) -> bool:
        self.transfers.append((transfer.id, user.id, payment_id))
        return True

    def send_order_confirmation(self, order, user, items, payment_id) -> bool:
        self.orders.append((order.id, user.id, payment_id, len(list(items))))
        return True


class FakeAssistant:
    """Stands in for the OpenAI-backed Assistant."""

    def __init__(self):
        self.messages: list[tuple[str, list[ChatMessage]]] = []

    def chat(self, message: str, history: list[ChatMessage] | None = None) -> str:
        self.messages.append((message, list(history or [])))
        return f"Echo: {message}"

    def suggestions(self) -> list[str]:
        return ["Quels sont vos frais de transfert ?"]


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest.fixture(autouse=True)
def db_schema():
    """Fresh schema for every test."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    """A session for seeding and asserting; shares the in-memory database with the app."""
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


# =============================================================================
# App Fixtures
# =============================================================================

@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def mailer():
    return FakeMailer()


@pytest.fixture
def assistant():
    return FakeAssistant()


@pytest.fixture
def client(gateway, mailer, assistant):
    """TestClient with external services replaced by fakes."""
    app.dependency_overrides[get_square_client] = lambda: gateway
    app.dependency_overrides[get_mailer] = lambda: mailer
    app.dependency_overrides[get_assistant] = lambda: assistant
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


# =============================================================================
# Account Fixtures
# =============================================================================

def _make_user(db, username: str, email: str, password: str = "secret1") -> User:
    user = User(
        username=username,
        email=email,
        password=hash_password(password),
        first_name="Jean",
        last_name="Niyonzima",
        phone="+15145550100",
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def user(db):
    """Customer with password 'secret1'."""
    return _make_user(db, "jean", "jean@example.com")


@pytest.fixture
def other_user(db):
    return _make_user(db, "aline", "aline@example.com")


@pytest.fixture
def auth_headers(user):
    return {"Authorization": f"Bearer {create_access_token(user.id, 'user')}"}


@pytest.fixture
def other_auth_headers(other_user):
    return {"Authorization": f"Bearer {create_access_token(other_user.id, 'user')}"}


@pytest.fixture
def admin(db):
    """Active admin with password 'admin-pass'."""
    row = Admin(
        username="boss",
        email="boss@gisabo.com",
        password=hash_password("admin-pass"),
        first_name="Admin",
        last_name="Gisabo",
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


@pytest.fixture
def admin_headers(admin):
    return {"Authorization": f"Bearer {create_access_token(admin.id, 'admin')}"}


# =============================================================================
# Seed Data Fixtures
# =============================================================================

@pytest.fixture
def catalog(db):
    """
    Two categories and three products:
    - rice: 20.00 CAD, in stock
    - pepper: 5.50 CAD, in stock
    - fish: 30.00 CAD, out of stock
    """
    food = Category(name="Alimentation", slug="food", icon="fas fa-seedling", color="green")
    spices = Category(name="Épices & Condiments", slug="spices", icon="fas fa-pepper-hot", color="orange")
    db.add_all([food, spices])
    db.flush()

    rice = Product(
        name_fr="Riz", name_en="Rice",
        description_fr="Riz local", description_en="Local rice",
        price=Decimal("20.00"), currency="CAD", category_id=food.id, in_stock=True,
    )
    pepper = Product(
        name_fr="Piment", name_en="Chili pepper",
        description_fr="Piment pili-pili", description_en="Pili-pili pepper",
        price=Decimal("5.50"), currency="CAD", category_id=spices.id, in_stock=True,
    )
    fish = Product(
        name_fr="Poisson", name_en="Fish",
        description_fr="Ndagala séché", description_en="Dried ndagala",
        price=Decimal("30.00"), currency="CAD", category_id=food.id, in_stock=False,
    )
    db.add_all([rice, pepper, fish])
    db.commit()
    return {"food": food, "spices": spices, "rice": rice, "pepper": pepper, "fish": fish}


@pytest.fixture
def services(db):
    """One active and one inactive service."""
    active = Service(
        name_fr="Traduction", name_en="Translation", slug="translation",
        short_description_fr="Traduction de documents", short_description_en="Document translation",
        full_description_fr="Traduction certifiée", full_description_en="Certified translation",
        is_active=True,
    )
    inactive = Service(
        name_fr="Événements", name_en="Events", slug="events",
        short_description_fr="Organisation", short_description_en="Planning",
        full_description_fr="Organisation d'événements", full_description_en="Event planning",
        is_active=False,
    )
    db.add_all([active, inactive])
    db.commit()
    return {"active": active, "inactive": inactive}


@pytest.fixture
def cad_bif_rate(db):
    """1 CAD = 2150.5 BIF."""
    rate = ExchangeRate(from_currency="CAD", to_currency="BIF", rate=Decimal("2150.5"))
    db.add(rate)
    db.commit()
    db.refresh(rate)
    return rate
