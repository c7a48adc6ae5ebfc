import os

# Must be set before config/database are imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["USERS_SERVICE_API_URL"] = "http://users.test"
os.environ["USERS_SERVICE_API_KEY"] = "test-key"

import pytest
from fastapi import HTTPException, Request
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database import Base, get_db
import models.product, models.customer, models.order, models.log  # noqa: F401,E401
from main import app
from schemas.user import CurrentUser
from utils.session import get_current_user


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=eng)
    yield eng
    Base.metadata.drop_all(bind=eng)
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    db = session_factory()
    yield db
    db.close()


@pytest.fixture
def override_db(session_factory):
    def _get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = _get_db
    yield
    app.dependency_overrides.clear()


def _user_from_header(request: Request) -> CurrentUser:
    # Identity comes from a test header instead of the users service
    user_id = request.headers.get("X-Test-User")
    if not user_id:
        raise HTTPException(status_code=401, detail="Could not validate credentials")
    return CurrentUser(id=user_id, email=f"{user_id}@example.com")


@pytest.fixture
def client(override_db):
    app.dependency_overrides[get_current_user] = _user_from_header
    with TestClient(app) as c:
        yield c


@pytest.fixture
def alice(client):
    client.headers["X-Test-User"] = "alice"
    return client


@pytest.fixture
def bob(override_db):
    app.dependency_overrides[get_current_user] = _user_from_header
    with TestClient(app, headers={"X-Test-User": "bob"}) as c:
        yield c


@pytest.fixture
def make_product(alice):
    def _make(client=None, **overrides):
        data = {"name": "Widget", "price": 10.0, "category": "Tools", "stock_quantity": 5}
        data.update(overrides)
        resp = (client or alice).post("/api/products", json=data)
        assert resp.status_code == 201, resp.text
        return resp.json()
    return _make


@pytest.fixture
def make_customer(alice):
    def _make(client=None, **overrides):
        data = {"name": "Ann", "email": "ann@x.com"}
        data.update(overrides)
        resp = (client or alice).post("/api/customers", json=data)
        assert resp.status_code == 201, resp.text
        return resp.json()
    return _make
