import os
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import List, Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, delete
from sqlalchemy.orm import Session

TEST_DB_DIR = Path(__file__).parent / ".tmp"
TEST_DB_PATH = TEST_DB_DIR / "test.db"

TEST_DB_DIR.mkdir(parents=True, exist_ok=True)
if TEST_DB_PATH.exists():
    TEST_DB_PATH.unlink()

os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{TEST_DB_PATH}"
os.environ.pop("RESEND_API_KEY", None)
os.environ.pop("CONTENT_WEBHOOK_SECRET", None)

from app.main import app  # noqa: E402
from app.api.deps import get_clock  # noqa: E402
from app.core.exceptions import EmailDeliveryError  # noqa: E402
from app.core.security import get_password_hash  # noqa: E402
from app.db.database import Base  # noqa: E402
from app.models import User, ResetCode, SupportTicket, SiteContent, InterviewRequest, ExpertConnection  # noqa: E402
from app.utils.email import EmailClient, get_email_client  # noqa: E402

sync_engine = create_engine(f"sqlite:///{TEST_DB_PATH}")


class FakeEmailClient(EmailClient):
    """Records messages instead of calling the provider."""

    def __init__(self, fail: bool = False):
        super().__init__(api_key="test", default_sender="ExpertGate <test@expertgate.cc>")
        self.fail = fail
        self.sent: List[dict] = []

    async def send(self, recipients, subject, html, sender: Optional[str] = None):
        if self.fail:
            raise EmailDeliveryError()
        self.sent.append({
            "to": list(recipients),
            "subject": subject,
            "html": html,
            "from": sender or self.default_sender,
        })
        return f"msg-{len(self.sent)}"


class FrozenClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture(scope="session")
def client():
    Base.metadata.create_all(bind=sync_engine)
    with TestClient(app) as test_client:
        yield test_client
    sync_engine.dispose()
    if TEST_DB_PATH.exists():
        TEST_DB_PATH.unlink()


@pytest.fixture(autouse=True)
def clean_tables(client):
    yield
    with Session(sync_engine) as session:
        for model in (ResetCode, SupportTicket, SiteContent, InterviewRequest, ExpertConnection, User):
            session.execute(delete(model))
        session.commit()
    app.dependency_overrides.clear()
    app.state.content_cache.invalidate()


@pytest.fixture()
def db_session():
    with Session(sync_engine, expire_on_commit=False) as session:
        yield session


@pytest.fixture()
def email_outbox():
    fake = FakeEmailClient()
    app.dependency_overrides[get_email_client] = lambda: fake
    return fake


@pytest.fixture()
def failing_email():
    fake = FakeEmailClient(fail=True)
    app.dependency_overrides[get_email_client] = lambda: fake
    return fake


@pytest.fixture()
def clock():
    frozen = FrozenClock(datetime.now(timezone.utc).replace(microsecond=0))
    app.dependency_overrides[get_clock] = lambda: frozen
    return frozen


@pytest.fixture()
def make_user(db_session):
    def _make_user(
        email: str,
        password: str = "OldPass123",
        full_name: str = "Test User",
        user_type: str = "researcher",
        **fields,
    ) -> User:
        user = User(
            email=email,
            password_hash=get_password_hash(password),
            full_name=full_name,
            user_type=user_type,
            **fields,
        )
        db_session.add(user)
        db_session.commit()
        return user

    return _make_user
