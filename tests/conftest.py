"""Shared fixtures: a throwaway SQLite database and a seeded directory."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

TEST_DB_DIR = Path(tempfile.mkdtemp(prefix="baronda-tests-"))
os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DB_DIR / 'test.db'}"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["APP_TIMEZONE"] = "Asia/Makassar"

from baronda.config import reset_settings_cache  # noqa: E402
from baronda.domain.entities import CallerContext, Payment, Recipient  # noqa: E402
from baronda.infrastructure import database  # noqa: E402
from baronda.infrastructure.repositories import (  # noqa: E402
    PaymentRepository,
    RecipientRepository,
)
from baronda.infrastructure.security import create_access_token  # noqa: E402

RESIDENTS = (
    Recipient(id="res-a", display_name="Andi Saputra", email="andi@example.com", role="resident"),
    Recipient(id="res-b", display_name="Budi Santoso", email="budi@example.com", role="resident"),
    Recipient(id="res-c", display_name="Citra Lestari", email="citra@example.com", role="resident"),
)
ADMIN = Recipient(id="adm-1", display_name="Dewi Admin", email="dewi@example.com", role="admin")
TREASURER = Recipient(
    id="trs-1", display_name="Eko Bendahara", email="eko@example.com", role="treasurer"
)
INACTIVE = Recipient(
    id="res-x", display_name="Fajar Pindah", email=None, role="resident", is_active=False
)


@pytest.fixture(autouse=True)
def fresh_database():
    """Give every test empty tables and freshly read settings."""

    reset_settings_cache()
    from baronda.infrastructure import models  # noqa: F401

    database.Base.metadata.drop_all(bind=database.engine, checkfirst=True)
    database.Base.metadata.create_all(bind=database.engine)
    yield
    reset_settings_cache()


@pytest.fixture()
def session():
    db = database.SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def directory(session):
    """Seed three active residents, two staff members and one inactive resident."""

    repository = RecipientRepository(session)
    for recipient in (*RESIDENTS, ADMIN, TREASURER, INACTIVE):
        repository.create(
            Recipient(
                id=recipient.id,
                display_name=recipient.display_name,
                email=recipient.email,
                role=recipient.role,
                is_active=recipient.is_active,
            )
        )
    return {recipient.id: recipient for recipient in (*RESIDENTS, ADMIN, TREASURER, INACTIVE)}


@pytest.fixture()
def july_payment(session, directory):
    """Resident A has paid July 2024 dues."""

    return PaymentRepository(session).create(
        Payment(id=None, recipient_id="res-a", month=7, year=2024, amount=50000, recorded_by="trs-1")
    )


@pytest.fixture()
def admin_caller() -> CallerContext:
    return CallerContext(recipient_id=ADMIN.id, role=ADMIN.role)


@pytest.fixture()
def treasurer_caller() -> CallerContext:
    return CallerContext(recipient_id=TREASURER.id, role=TREASURER.role)


@pytest.fixture()
def resident_caller():
    def _build(recipient_id: str) -> CallerContext:
        return CallerContext(recipient_id=recipient_id, role="resident")

    return _build


@pytest.fixture()
def auth_headers():
    """Return a factory for bearer headers signed like the identity provider."""

    def _build(recipient_id: str) -> dict[str, str]:
        token = create_access_token({"sub": recipient_id})
        return {"Authorization": f"Bearer {token}"}

    return _build


@pytest.fixture()
def client(directory):
    """Return a test client bound to a fresh application instance."""

    from main import create_app

    with TestClient(create_app()) as test_client:
        yield test_client
