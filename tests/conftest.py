"""
Shared pytest fixtures for the PassGuard test suite.

Environment is pinned before any passguard module is imported, because
settings and the global engine are created at import time:
  - ENCRYPTION_KEY / SECRET_KEY -> fixed test secrets
  - DATABASE_URL               -> throwaway SQLite file (only touched by the lifespan)

Each test then gets its own SQLite database under tmp_path.
"""

import asyncio
import os
import tempfile

os.environ["ENCRYPTION_KEY"] = "test-encryption-secret"
os.environ["SECRET_KEY"] = "test-jwt-secret"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///" + os.path.join(
    tempfile.gettempdir(), f"passguard-test-{os.getpid()}.db"
)

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from passguard.app.api import deps  # noqa: E402
from passguard.app.core.errors import MailDeliveryError  # noqa: E402
from passguard.app.db.session import build_engine, build_sessionmaker, get_db, init_models  # noqa: E402
from passguard.app.main import app  # noqa: E402
from passguard.app.models.user import User  # noqa: E402
from passguard.app.security.encryption import VaultCipher  # noqa: E402
from passguard.app.services.vault import VaultService  # noqa: E402
from passguard.app.services.vault_store import VaultStore  # noqa: E402

TEST_SECRET = os.environ["ENCRYPTION_KEY"]


class FakeMailer:
    """Records verification emails instead of talking to SMTP."""

    def __init__(self):
        self.sent = []
        self.fail = False

    async def send_verification_code(self, to, name, code, resend=False):
        if self.fail:
            raise MailDeliveryError("SMTP unavailable")
        self.sent.append({"to": to, "name": name, "code": code, "resend": resend})

    def last_code(self, to):
        for message in reversed(self.sent):
            if message["to"] == to:
                return message["code"]
        raise AssertionError(f"no code sent to {to}")


@pytest.fixture
def cipher():
    return VaultCipher.from_secret(TEST_SECRET)


# ── Async fixtures for store/service tests ──────────────────────────


@pytest_asyncio.fixture
async def engine(tmp_path):
    eng = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'vault.db'}")
    await init_models(eng)
    yield eng
    await eng.dispose()


@pytest_asyncio.fixture
async def db(engine):
    session_factory = build_sessionmaker(engine)
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def owners(db):
    """Two accounts: (alice, bob)."""
    alice = User(name="Alice", email="alice@example.com", hashed_password="x")
    bob = User(name="Bob", email="bob@example.com", hashed_password="x")
    db.add_all([alice, bob])
    await db.commit()
    await db.refresh(alice)
    await db.refresh(bob)
    return alice, bob


@pytest.fixture
def store(db):
    return VaultStore(db)


@pytest.fixture
def vault(store, cipher):
    return VaultService(store, cipher)


# ── HTTP fixtures ───────────────────────────────────────────────────


@pytest.fixture
def mailer():
    return FakeMailer()


@pytest.fixture
def client(tmp_path, mailer):
    """TestClient on a per-test database with the mailer replaced."""
    eng = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'api.db'}")
    asyncio.run(init_models(eng))
    session_factory = build_sessionmaker(eng)

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[deps.get_mailer] = lambda: mailer
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
    asyncio.run(eng.dispose())


def sign_up(client, mailer, name="Alice", email="alice@example.com", password="CorrectHorse9"):
    """Register and verify an account; returns the verify-otp response body."""
    resp = client.post("/api/auth/register", json={"name": name, "email": email, "password": password})
    assert resp.status_code == 200, resp.text
    code = mailer.last_code(email.lower())
    resp = client.post("/api/auth/verify-otp", json={"email": email, "otp": code})
    assert resp.status_code == 201, resp.text
    return resp.json()


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def alice_headers(client, mailer):
    return bearer(sign_up(client, mailer)["token"])


@pytest.fixture
def bob_headers(client, mailer):
    return bearer(sign_up(client, mailer, name="Bob", email="bob@example.com")["token"])
