import fnmatch
import os

# settings are read at import time, so the environment has to be ready first
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "1"
os.environ["CELERY_BROKER_URL"] = "memory://"
os.environ["CELERY_RESULT_BACKEND"] = "cache+memory://"
os.environ["EVENT_PRODUCER_URL"] = ""
os.environ["JWT_SECRET"] = "test-secret"

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from storefront.data.database import Base, get_db
from storefront.data.models import CartModel, ProductModel
from storefront.domain.errors import DeadlineExceeded
from storefront.main import create_app
from storefront.utils.deadline import Deadline
from storefront.utils.security import generate_token


class InMemoryListingCache:
    """Dict-backed stand-in for the Redis listing cache."""

    def __init__(self):
        self.data = {}
        self.ttls = {}

    def get(self, key):
        return self.data.get(key)

    def set(self, key, value, ttl):
        self.data[key] = value
        self.ttls[key] = ttl

    def delete_by_pattern(self, pattern):
        keys = [k for k in self.data if fnmatch.fnmatchcase(k, pattern)]
        for k in keys:
            del self.data[k]
            self.ttls.pop(k, None)
        return len(keys)


class ExpiresAt(Deadline):
    """Deadline that runs out right before the named step."""

    def __init__(self, step):
        super().__init__(None)
        self.step = step

    def check(self, step):
        if step == self.step:
            raise DeadlineExceeded(f"Request deadline exceeded before {step}")


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(bind=engine, autoflush=False, autocommit=False)()
    yield session
    session.close()


@pytest.fixture
def cache():
    return InMemoryListingCache()


@pytest.fixture
def app(db, cache):
    app = create_app(listing_cache=cache)

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    return app


@pytest.fixture
def client(app):
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c


@pytest.fixture
def make_product(db):
    def _make(name="Mug", price="12.00", description="Ceramic mug", image="mug.png"):
        product = ProductModel(name=name, description=description, image=image, price=Decimal(price))
        db.add(product)
        db.commit()
        db.refresh(product)
        return product

    return _make


@pytest.fixture
def make_cart(db):
    def _make(user_id, product_info):
        cart = CartModel(user_id=user_id, product_info=product_info, version=1)
        db.add(cart)
        db.commit()
        db.refresh(cart)
        return cart

    return _make


@pytest.fixture
def auth_headers():
    def _headers(user_id="u1", role="user"):
        return {"Authorization": f"Bearer {generate_token(user_id, role)}"}

    return _headers


@pytest.fixture
def expires_at():
    return ExpiresAt
