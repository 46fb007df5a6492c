"""Pytest configuration and fixtures."""

import os

# Settings are cached on first import, so test values go in before src loads
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("JWT_SECRET", "test-access-secret")
os.environ.setdefault("REFRESH_SECRET", "test-refresh-secret")
os.environ.setdefault("PASSWORD_RESET_SECRET", "test-reset-secret")
os.environ.setdefault("LIVEKIT_API_KEY", "test-livekit-key")
os.environ.setdefault("LIVEKIT_API_SECRET", "test-livekit-secret-with-enough-length")

# Use test database - PostgreSQL in Docker, SQLite locally
if os.getenv("DATABASE_URL"):
    SQLALCHEMY_DATABASE_URL = os.environ["DATABASE_URL"].replace("/campus_connect", "/campus_connect_test")
else:
    SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"
    os.environ["DATABASE_URL"] = SQLALCHEMY_DATABASE_URL

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from src import models  # noqa: E402, F401
from src.database import Base, get_db  # noqa: E402
from src.main import app  # noqa: E402
from src.models.user import User  # noqa: E402
from src.services.mailer import get_mailer  # noqa: E402

TEST_PASSWORD = "Passw0rd!"

connect_args = {"check_same_thread": False} if "sqlite" in SQLALCHEMY_DATABASE_URL else {}
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args=connect_args)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class AuthHeaders(dict):
    """Dict subclass that also stores user_id and email."""

    def __init__(self, *args, user_id: int | None = None, email: str | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.user_id = user_id
        self.email = email


class FakeMailer:
    """Records outgoing emails instead of sending them."""

    def __init__(self):
        self.verification_emails: list[tuple[str, str]] = []
        self.reset_emails: list[tuple[str, str, str]] = []
        self.fail = False

    async def send_verification_email(self, to: str, token: str) -> None:
        if self.fail:
            raise ConnectionError("SMTP unavailable")
        self.verification_emails.append((to, token))

    async def send_password_reset_email(self, to: str, token: str, first_name: str) -> None:
        if self.fail:
            raise ConnectionError("SMTP unavailable")
        self.reset_emails.append((to, token, first_name))


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create test database schema once at the start of the test session."""
    if "postgresql" in SQLALCHEMY_DATABASE_URL:
        from sqlalchemy_utils import create_database, database_exists

        if not database_exists(SQLALCHEMY_DATABASE_URL):
            create_database(SQLALCHEMY_DATABASE_URL)

    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture(scope="function", autouse=True)
def db():
    """Create a fresh database session for each test with cleanup."""
    session = TestingSessionLocal()

    yield session

    # Clean up all data after test
    session.rollback()
    for table in reversed(Base.metadata.sorted_tables):
        session.execute(table.delete())
    session.commit()
    session.close()


@pytest.fixture
def mailer():
    return FakeMailer()


@pytest.fixture(scope="function")
def client(db, mailer):
    """Create a test client with database and mailer overrides."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_mailer] = lambda: mailer
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def register(client, email: str, password: str = TEST_PASSWORD, first_name: str = "Test", last_name: str = "User"):
    return client.post(
        "/api/v1/users/register",
        json={"email": email, "password": password, "firstName": first_name, "lastName": last_name},
    )


def login(client, email: str, password: str = TEST_PASSWORD):
    return client.post("/api/v1/users/login", json={"email": email, "password": password})


@pytest.fixture
def make_user(client, db):
    """Factory: register, verify, and log in a user. Returns their auth headers."""

    def _make_user(email: str = "test@my.csun.edu", first_name: str = "Test", last_name: str = "User"):
        response = register(client, email, first_name=first_name, last_name=last_name)
        assert response.status_code == 201

        token = db.query(User).filter(User.email == email).one().verification_token
        assert client.get("/api/v1/users/verify", params={"token": token}).status_code == 200

        response = login(client, email)
        assert response.status_code == 200
        data = response.json()
        headers = AuthHeaders(
            {"Authorization": f"Bearer {data['accessToken']}"},
            user_id=data["user"]["id"],
            email=email,
        )
        headers.refresh_token = data["refreshToken"]
        return headers

    return _make_user


@pytest.fixture
def auth_headers(make_user):
    """Create a verified user and return auth headers with user info."""
    return make_user()


@pytest.fixture
def other_headers(make_user):
    """A second verified user."""
    return make_user("other@my.csun.edu", first_name="Other", last_name="Person")
