import fnmatch
from typing import Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from gameplane.auth import Identity, IdentityProviderError, IdentityVerificationError
from gameplane.cache import Cache
from gameplane.database import Base
from gameplane.domain.payments.gateway import PaymentGatewayError
from gameplane.main import create_app
from gameplane.models import Booking, Coupon, Court, Payment, User

ADMIN_EMAIL = "admin@example.com"
ALICE_EMAIL = "alice@example.com"
BOB_EMAIL = "bob@example.com"


class FakeVerifier:
    """Maps bearer tokens to identities instead of calling Firebase"""

    def __init__(self):
        self.tokens = {
            "admin-token": Identity(uid="uid-admin", email=ADMIN_EMAIL),
            "alice-token": Identity(uid="uid-alice", email=ALICE_EMAIL),
            "bob-token": Identity(uid="uid-bob", email=BOB_EMAIL),
        }
        self.broken = False

    async def verify(self, token: str) -> Identity:
        if self.broken:
            raise IdentityProviderError("Firebase not configured")
        if token not in self.tokens:
            raise IdentityVerificationError("unknown token")
        return self.tokens[token]


class FakePayments:
    def __init__(self):
        self.available = True
        self.fail = False
        self.calls = []

    def is_available(self) -> bool:
        return self.available

    async def create_payment_intent(self, amount, customer_email=None, metadata=None):
        self.calls.append({"amount": amount, "email": customer_email, "metadata": metadata})
        if self.fail:
            raise PaymentGatewayError("card network unavailable")
        return {
            "clientSecret": "cks_test_123",
            "checkoutUrl": "https://checkout.test/cks_test_123",
            "amount": amount,
        }


class FakeRedis:
    """In-memory stand-in for the redis client calls the cache makes"""

    def __init__(self):
        self.store = {}

    def get(self, key):
        return self.store.get(key)

    def setex(self, key, ttl, value):
        self.store[key] = value

    def delete(self, *keys):
        removed = 0
        for key in keys:
            if self.store.pop(key, None) is not None:
                removed += 1
        return removed

    def scan_iter(self, match="*"):
        return [key for key in list(self.store) if fnmatch.fnmatch(key, match)]


class Seeder:
    """Inserts rows directly and returns their ids"""

    def __init__(self, session_factory):
        self.session_factory = session_factory

    def _add(self, row) -> int:
        with self.session_factory() as db:
            db.add(row)
            db.commit()
            return row.id

    def user(self, email: str, role: str = "user", name: Optional[str] = None, **fields) -> int:
        return self._add(User(email=email, role=role, name=name, **fields))

    def court(
        self,
        name: str = "Court A",
        sport_type: str = "tennis",
        price: float = 20,
        slots: Optional[list] = None,
    ) -> int:
        if slots is None:
            slots = [
                {"startTime": "09:00", "endTime": "10:00", "available": True},
                {"startTime": "10:00", "endTime": "11:00", "available": True},
            ]
        return self._add(Court(name=name, sport_type=sport_type, price=price, slots=slots))

    def booking(
        self,
        court_id: int,
        user: str = ALICE_EMAIL,
        status: str = "pending",
        slots: Optional[list] = None,
        **fields,
    ) -> int:
        if slots is None:
            slots = [{"startTime": "09:00", "endTime": "10:00"}]
        fields.setdefault("court_name", "Court A")
        fields.setdefault("court_type", "tennis")
        return self._add(
            Booking(user=user, court_id=court_id, status=status, slots=slots, price=20, **fields)
        )

    def coupon(self, code: str = "SUMMER10", active: bool = True, max_uses: int = 5, **fields) -> int:
        fields.setdefault("discount_amount", 10)
        return self._add(Coupon(code=code, active=active, max_uses=max_uses, **fields))

    def payment(self, email: str = ALICE_EMAIL, amount: float = 20, **fields) -> int:
        fields.setdefault("court_name", "Court A")
        return self._add(Payment(email=email, amount=amount, **fields))


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def seed(session_factory):
    return Seeder(session_factory)


@pytest.fixture
def verifier():
    return FakeVerifier()


@pytest.fixture
def payments():
    return FakePayments()


@pytest.fixture
def redis_client():
    return FakeRedis()


@pytest.fixture
def cache(redis_client):
    return Cache(client=redis_client)


@pytest.fixture
def app(engine, verifier, payments, cache):
    return create_app(engine=engine, identity_verifier=verifier, payments=payments, cache=cache)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def admin(seed):
    seed.user(ADMIN_EMAIL, role="admin", name="Admin")
    return ADMIN_EMAIL


def auth(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(admin):
    return auth("admin-token")


@pytest.fixture
def alice_headers():
    return auth("alice-token")


@pytest.fixture
def bob_headers():
    return auth("bob-token")


@pytest.fixture
def reload(session_factory):
    """Load a row in a new session so the test sees committed state"""

    def _reload(model, row_id):
        with session_factory() as db:
            row = db.get(model, row_id)
            if row is not None:
                db.expunge(row)
            return row

    return _reload
