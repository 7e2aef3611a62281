"""
Test configuration and fixtures
"""
import pytest
from datetime import datetime, timedelta
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
import random
import string
import uuid

from database.connection import Base, get_db

# Import all models BEFORE importing app to ensure they're registered
from models.note import Note, NoteColor
from models.like import Like
from models.report import Report

from main import app
from utils.context import BoardContext, get_context
from utils.storage import ImageStore

# Test database (file-based SQLite for better connection handling)
TEST_DATABASE_URL = "sqlite:///./test.db"

engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    echo=False  # Set to True to debug SQL
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session():
    """Create a fresh database for each test"""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def board_context(tmp_path):
    """Fresh change feed and an image store under a temporary directory"""
    return BoardContext(images=ImageStore(str(tmp_path / "uploads")), page_size=8)


@pytest.fixture
def client(db_session, board_context):
    """Create a test client with test database"""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_context] = lambda: board_context
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def other_client(client):
    """A second browser: same app and database, its own session cookie"""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def add_note(db_session):
    """Insert a note directly with a controlled creation time"""
    def _add_note(message="A note", minutes_ago=0, session_id=None, **fields):
        note = Note(
            short_id=''.join(random.choices(string.ascii_uppercase + string.digits, k=6)),
            message=message,
            color=fields.pop("color", NoteColor.ORANGE),
            session_id=session_id or str(uuid.uuid4()),
            created_at=datetime.utcnow() - timedelta(minutes=minutes_ago),
            **fields
        )
        db_session.add(note)
        db_session.commit()
        db_session.refresh(note)
        return note

    return _add_note
