import itertools
import os
from datetime import date, time, timedelta
from decimal import Decimal

# Must be set before anything imports app.database
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import Base, get_db
from app.models import (
    User, UserRole, Client, CaseUser, CaseSession, SessionStatus, Document, Invoice, Task, TaskStatus
)
from app.auth.utils import create_access_token, get_password_hash
from app.cases.schemas import CaseCreate
from app.services.case_service import CaseService
from main import app

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    try:
        # No context manager: the startup admin bootstrap would hit the real engine
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    counter = itertools.count(1)

    def _make(role=UserRole.LAWYER, username=None, password="secret123"):
        n = next(counter)
        user = User(
            username=username or f"user{n}",
            password=get_password_hash(password),
            name=f"User {n}",
            role=role
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def make_client(db):
    counter = itertools.count(1)

    def _make(name=None, created_by=None, **fields):
        n = next(counter)
        record = Client(name=name or f"Client {n}", created_by=created_by, **fields)
        db.add(record)
        db.commit()
        db.refresh(record)
        return record

    return _make


@pytest.fixture
def make_case(db):
    """Cases go through CaseService so the creator gets the primary assignment."""
    def _make(client, creator, title="Land dispute", **fields):
        data = CaseCreate(title=title, type=fields.pop("type", "civil"), client_id=client.id, **fields)
        return CaseService(db).create_case(data, created_by=creator.id)

    return _make


@pytest.fixture
def make_session(db):
    def _make(case, on=date(2025, 3, 10), at=time(10, 0), status=SessionStatus.SCHEDULED, title="Hearing"):
        record = CaseSession(case_id=case.id, title=title, date=on, time=at, status=status)
        db.add(record)
        db.commit()
        db.refresh(record)
        return record

    return _make


@pytest.fixture
def make_document(db):
    def _make(case, title="Affidavit", file_path="uploads/documents/affidavit.pdf"):
        record = Document(case_id=case.id, title=title, file_path=file_path)
        db.add(record)
        db.commit()
        db.refresh(record)
        return record

    return _make


@pytest.fixture
def make_invoice(db):
    def _make(case=None, amount="100.00", paid=False):
        record = Invoice(case_id=case.id if case else None, amount=Decimal(amount), paid=paid)
        db.add(record)
        db.commit()
        db.refresh(record)
        return record

    return _make


@pytest.fixture
def make_task(db):
    def _make(case=None, title="File submissions", status=TaskStatus.PENDING, assigned_to=None, created_by=None):
        record = Task(
            case_id=case.id if case else None,
            title=title,
            status=status,
            assigned_to=assigned_to,
            created_by=created_by
        )
        db.add(record)
        db.commit()
        db.refresh(record)
        return record

    return _make


@pytest.fixture
def assign(db):
    def _assign(case, user, role="secondary"):
        record = CaseUser(case_id=case.id, user_id=user.id, role=role)
        db.add(record)
        db.commit()
        return record

    return _assign


def auth_headers(user):
    token = create_access_token(
        data={"sub": user.username, "role": user.role.value},
        expires_delta=timedelta(minutes=30)
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def headers():
    return auth_headers
