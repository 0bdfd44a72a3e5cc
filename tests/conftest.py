"""Shared fixtures: temporary SQLite database, fast bcrypt, app with test settings."""
import pytest
from fastapi.testclient import TestClient

from finance_copilot.config import Settings
from finance_copilot.core.credentials import CredentialStore, build_password_context
from finance_copilot.core.ledger import LedgerStore
from finance_copilot.database import create_db_engine, create_session_factory, init_db
from finance_copilot.main import create_app


TEST_SECRET = "test-secret-key"


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        jwt_secret_key=TEST_SECRET,
        database_url=f"sqlite:///{tmp_path / 'finance.db'}",
        bcrypt_rounds=4,
        openai_api_key=None,
    )


@pytest.fixture
def engine(settings):
    engine = create_db_engine(settings.database_url)
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = create_session_factory(engine)()
    yield session
    session.close()


@pytest.fixture
def pwd_context():
    return build_password_context(rounds=4)


@pytest.fixture
def credentials(db, pwd_context) -> CredentialStore:
    return CredentialStore(db, pwd_context)


@pytest.fixture
def ledger(db) -> LedgerStore:
    return LedgerStore(db)


@pytest.fixture
def alice(credentials):
    return credentials.register("alice", "alice@x.com", "secret1")


@pytest.fixture
def bob(credentials):
    return credentials.register("bob", "bob@x.com", "hunter22")


@pytest.fixture
def app(settings):
    app = create_app(settings)
    yield app
    app.dependency_overrides.clear()
    app.state.engine.dispose()


@pytest.fixture
def client(app):
    with TestClient(app) as client:
        yield client


@pytest.fixture
def auth_headers(client):
    """Register alice through the API and return her bearer header."""
    response = client.post("/api/register", json={
        "username": "alice",
        "email": "alice@x.com",
        "password": "secret1",
    })
    assert response.status_code == 201
    return {"Authorization": f"Bearer {response.json()['token']}"}
