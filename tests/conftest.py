import os

# Must be set before the app (and its settings / engine) are imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["OPENAI_API_KEY"] = ""
os.environ["REQUIRE_EMAIL_VERIFICATION"] = "true"
os.environ["AUTO_CREATE_TABLES"] = "false"

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.api.v1.endpoints import auth as auth_endpoints
from app.core.database import Base, enable_sqlite_foreign_keys, get_db
from app.core.security import create_access_token, get_password_hash
from app.main import app
from app.models.user import User, UserRoleEnum
from app.services.ai_service import get_ai_service
from app.services.email_service import EmailService

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
enable_sqlite_foreign_keys(engine)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

DEFAULT_PASSWORD = "secret123"


class FakeAIService:
    """Stands in for the OpenAI-backed service; records every call."""

    def __init__(self):
        self.chat_calls = []
        self.insight_calls = []
        self.error = None

    @property
    def is_available(self) -> bool:
        return True

    def chat_reply(self, system_prompt, history, message):
        self.chat_calls.append({"system_prompt": system_prompt, "history": history, "message": message})
        if self.error is not None:
            raise self.error
        return {
            "content": f"Here is some advice about: {message}",
            "model": "fake-model",
            "tokens": 42,
            "processing_time_ms": 7,
        }

    def generate_financial_insights(self, context):
        self.insight_calls.append(context)
        if self.error is not None:
            raise self.error
        return {
            "summary": "Healthy savings rate.",
            "insights": ["You save 30% of your income"],
            "recommendations": ["Build a six month emergency fund"],
            "model": "fake-model",
        }


@pytest.fixture
def db_session():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def fake_ai():
    return FakeAIService()


@pytest.fixture(autouse=True)
def sent_emails(monkeypatch):
    """Capture verification emails instead of calling Resend."""
    sent = []

    def fake_send(self, to, name, token):
        sent.append({"to": to, "name": name, "token": token})
        return True

    monkeypatch.setattr(EmailService, "send_verification_email", fake_send)
    return sent


@pytest.fixture(autouse=True)
def no_rate_limit(monkeypatch):
    monkeypatch.setattr(auth_endpoints, "allow_for_email", lambda *args, **kwargs: True)


@pytest.fixture
async def client(db_session, fake_ai):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_ai_service] = lambda: fake_ai
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


def create_user(
    db,
    email: str = "user@example.com",
    password: str = DEFAULT_PASSWORD,
    verified: bool = True,
    role: UserRoleEnum = UserRoleEnum.CLIENT,
    is_active: bool = True,
) -> User:
    user = User(
        email=email,
        username=email.split("@")[0],
        password_hash=get_password_hash(password),
        first_name="Test",
        last_name="User",
        role=role,
        is_active=is_active,
        is_verified=verified,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def auth_headers(user: User) -> dict:
    token = create_access_token({"sub": user.id, "email": user.email})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user(db_session):
    return create_user(db_session)


@pytest.fixture
def admin(db_session):
    return create_user(db_session, email="admin@example.com", role=UserRoleEnum.ADMIN)
