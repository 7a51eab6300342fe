# tests/conftest.py
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("JWT_SECRET", "test-secret-key-with-enough-length-for-hs256")
os.environ.setdefault("ADMIN_USERNAME", "admin")
os.environ.setdefault("ADMIN_PASSWORD", "admin-pass")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from app import models
from app.db import Base, engine, SessionLocal
from app.main import app
from app.utils import get_now

NOW = datetime(2026, 3, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    yield session
    session.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def clock():
    """Mutable clock used by the app; tests move `clock["now"]` around."""
    state = {"now": NOW}
    app.dependency_overrides[get_now] = lambda: state["now"]
    yield state
    app.dependency_overrides.pop(get_now, None)


@pytest.fixture
def client(db, clock):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def auction(db):
    window = models.AuctionSettings(
        is_active=True,
        start_date=NOW - timedelta(days=1),
        end_date=NOW + timedelta(days=1),
    )
    db.add(window)
    db.commit()
    return window


@pytest.fixture
def painting(db):
    obj = models.Painting(
        artist_name="M. F. Husain",
        painting_name="Horses",
        image_url="http://img/horses.jpg",
        base_price=Decimal("1000"),
    )
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj


@pytest.fixture
def admin_headers(client):
    res = client.post("/admin/login", json={"username": "admin", "password": "admin-pass"})
    return {"Authorization": f"Bearer {res.json()['data']['token']}"}
