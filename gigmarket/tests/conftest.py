import os

# settings are read at import time by gigmarket.db.session
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET_KEY"] = "test-access-secret"
os.environ["JWT_REFRESH_SECRET_KEY"] = "test-refresh-secret"
os.environ.setdefault("LOG_LEVEL", "WARNING")

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# FORCE model registration
import gigmarket.models  # noqa

from gigmarket.core.clock import Clock
from gigmarket.core.config import Settings, get_settings
from gigmarket.core.deps import get_clock
from gigmarket.db.base import Base
from gigmarket.db.session import get_db
from gigmarket.schemas.auth import RegisterRequest
from gigmarket.schemas.gigs import GigCreateRequest
from gigmarket.services.auth_service import AuthService
from gigmarket.services.bid_service import BidService
from gigmarket.services.gig_service import GigService
from gigmarket.services.token_service import TokenService

PASSWORD = "Secret123"
PROPOSAL = "I have shipped this exact kind of project many times and can start today."


class FrozenClock(Clock):
    def __init__(self, now: datetime):
        self._now = now

    def now(self) -> datetime:
        return self._now

    def advance(self, **kwargs) -> None:
        self._now = self._now + timedelta(**kwargs)


@pytest.fixture
def clock():
    return FrozenClock(datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def settings():
    return Settings(
        database_url="sqlite://",
        jwt_secret_key="test-access-secret",
        jwt_refresh_secret_key="test-refresh-secret",
        bcrypt_rounds=4,
    )


@pytest.fixture(scope="function")
def db():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    session = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def tokens(settings, clock):
    return TokenService(settings, clock=clock)


@pytest.fixture
def auth(settings, tokens, clock):
    return AuthService(settings, tokens=tokens, clock=clock)


@pytest.fixture
def gigs():
    return GigService()


@pytest.fixture
def bids():
    return BidService()


@pytest.fixture
def register(db, auth):
    """Factory: register an account and return its AuthSession."""

    def _register(email: str, role: str = "freelancer", password: str = PASSWORD):
        req = RegisterRequest(
            email=email,
            password=password,
            confirm_password=password,
            first_name="Test",
            last_name="User",
            role=role,
        )
        return auth.register(db, req)

    return _register


@pytest.fixture
def make_gig(db, gigs):
    def _make_gig(owner_id, title: str = "Build a landing page"):
        req = GigCreateRequest(
            title=title,
            description="A responsive landing page with a contact form and analytics wired in.",
            category="development",
            subcategory="web",
            tags=["html", "css"],
            pricing={"type": "fixed", "amount": 150},
            delivery_time=7,
            revisions=2,
        )
        return gigs.create(db, owner_id=owner_id, data=req)

    return _make_gig


@pytest.fixture
def place_bid(db, bids):
    def _place_bid(gig_id, freelancer_id, amount: float = 100):
        return bids.create(
            db,
            gig_id=gig_id,
            freelancer_id=freelancer_id,
            amount=amount,
            delivery_time=5,
            proposal=PROPOSAL,
        )

    return _place_bid


@pytest.fixture
def client(db, settings, clock):
    from gigmarket.main import create_app

    app = create_app()
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_clock] = lambda: clock

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()
