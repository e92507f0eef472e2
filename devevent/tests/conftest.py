import pytest
from fastapi.testclient import TestClient
from sqlalchemy import Engine, StaticPool, create_engine, delete

from devevent.database.db import (
    Base,
    ConnectionManager,
    Database,
    DatabaseConfig,
    get_connection_manager,
)
from devevent.main import app
from devevent.models.bookings import Booking
from devevent.models.events import Event
from devevent.services.uploads import get_image_uploader
from devevent.tests.factories import FakeUploader

# Use an in-memory SQLite database for testing
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"
engine: Engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
testing_database = Database(engine)


@pytest.fixture(scope="session", autouse=True)
def setup_database():
    """Set up and tear down the database for the test session."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def clean_tables():
    yield
    with testing_database.session() as db:
        db.execute(delete(Booking))
        db.execute(delete(Event))
        db.commit()


@pytest.fixture
def db_session():
    with testing_database.session() as db:
        yield db


@pytest.fixture
def connections() -> ConnectionManager:
    return ConnectionManager(connector=lambda cfg: testing_database)


@pytest.fixture
def uploader() -> FakeUploader:
    return FakeUploader()


@pytest.fixture
def client(connections: ConnectionManager, uploader: FakeUploader):
    app.dependency_overrides[get_connection_manager] = lambda: connections
    app.dependency_overrides[get_image_uploader] = lambda: uploader
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def file_database(tmp_path):
    """A file-backed SQLite database that tolerates concurrent sessions."""
    database = Database.connect(
        DatabaseConfig(url=f"sqlite:///{tmp_path / 'devevent.db'}", connect_timeout=10)
    )
    yield database
    database.dispose()
