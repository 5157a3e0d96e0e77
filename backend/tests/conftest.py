"""Shared test fixtures for all test modules."""

import contextlib
import uuid
from datetime import UTC, datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, text
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

import ecare.models  # noqa: F401
from ecare.core import database as db_module
from ecare.core.auth import Actor
from ecare.core.database import Base, get_db
from ecare.main import app
from ecare.models.account import ActorRole, Admin, Technician, User
from ecare.models.complaint import ComplaintType
from ecare.schemas.complaint import ComplaintCreate

# Create an in-memory SQLite engine with StaticPool so all connections
# share the same database state and there are no file-locking issues.
_test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
_TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=_test_engine)

# Well-known account IDs seeded for every test
USER_ID = uuid.UUID("00000000-0000-0000-0000-00000000a001")
OTHER_USER_ID = uuid.UUID("00000000-0000-0000-0000-00000000a002")
ADMIN_ID = uuid.UUID("00000000-0000-0000-0000-00000000b001")
SECOND_ADMIN_ID = uuid.UUID("00000000-0000-0000-0000-00000000b002")
TECH_ID = uuid.UUID("00000000-0000-0000-0000-00000000c001")
OTHER_TECH_ID = uuid.UUID("00000000-0000-0000-0000-00000000c002")
INACTIVE_TECH_ID = uuid.UUID("00000000-0000-0000-0000-00000000c003")

USER_ACTOR = Actor(id=USER_ID, role=ActorRole.USER)
OTHER_USER_ACTOR = Actor(id=OTHER_USER_ID, role=ActorRole.USER)
ADMIN_ACTOR = Actor(id=ADMIN_ID, role=ActorRole.ADMIN)
TECH_ACTOR = Actor(id=TECH_ID, role=ActorRole.TECHNICIAN)
OTHER_TECH_ACTOR = Actor(id=OTHER_TECH_ID, role=ActorRole.TECHNICIAN)

# 16:30 in Kuala Lumpur
FIXED_NOW = datetime(2026, 2, 3, 8, 30, tzinfo=UTC)


def fixed_clock() -> datetime:
    return FIXED_NOW


def actor_headers(actor: Actor) -> dict[str, str]:
    """Headers the auth gateway forwards for ``actor``."""
    return {"X-Actor-Id": str(actor.id), "X-Actor-Role": actor.role.value}


def complaint_data(**overrides) -> ComplaintCreate:
    """A valid complaint registration payload."""
    payload = {
        "category_id": 1,
        "subcategory": "Refrigerator",
        "complaint_type": ComplaintType.OVER_WARRANTY,
        "state": "Selangor",
        "brand_name": "Acme",
        "model_no": "FR-200",
        "details": "Compressor makes a loud noise and does not cool.",
    }
    payload.update(overrides)
    return ComplaintCreate(**payload)


def _seed_accounts(session: Session) -> None:
    """Insert the well-known user, admin and technician accounts."""
    if session.query(User).filter(User.id == USER_ID).first() is not None:
        return
    session.add_all(
        [
            User(id=USER_ID, full_name="Siti Aminah", ic_number="900101-14-5678"),
            User(id=OTHER_USER_ID, full_name="Tan Wei Ming", ic_number="850505-10-1234"),
            Admin(
                id=ADMIN_ID,
                username="admin",
                admin_name="Head Office",
                created_at=datetime(2025, 1, 1, tzinfo=UTC),
            ),
            Admin(
                id=SECOND_ADMIN_ID,
                username="admin2",
                admin_name="Branch Office",
                created_at=datetime(2025, 6, 1, tzinfo=UTC),
            ),
            Technician(id=TECH_ID, name="Ahmad Tech", username="ahmad"),
            Technician(id=OTHER_TECH_ID, name="Raj Tech", username="raj"),
            Technician(
                id=INACTIVE_TECH_ID, name="Retired Tech", username="retired", is_active=False
            ),
        ]
    )
    session.commit()


@pytest.fixture(autouse=True)
def setup_database():
    """Create tables before each test and truncate all data after.

    Patches the module-level engine and SessionLocal so all application code
    uses the in-memory test database. Clears data after each test.
    """
    # Patch module-level engine and session factory
    original_engine = db_module.engine
    original_session = db_module.SessionLocal
    db_module.engine = _test_engine
    db_module.SessionLocal = _TestSessionLocal

    Base.metadata.create_all(bind=_test_engine)

    session = _TestSessionLocal()
    try:
        _seed_accounts(session)
    finally:
        session.close()

    yield
    with _test_engine.connect() as conn:
        conn.execute(text("PRAGMA foreign_keys = OFF"))
        for table in reversed(Base.metadata.sorted_tables):
            with contextlib.suppress(OperationalError):
                conn.execute(table.delete())
        conn.execute(text("PRAGMA foreign_keys = ON"))
        conn.commit()

    # Restore originals
    db_module.engine = original_engine
    db_module.SessionLocal = original_session


@pytest.fixture
def db_session():
    """Create a database session for direct service and repository testing."""
    gen = get_db()
    db = next(gen)
    try:
        yield db
    finally:
        for _ in gen:
            pass


@pytest.fixture
def client():
    """Create test client."""
    return TestClient(app)
