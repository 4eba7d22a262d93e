# tests/conftest.py
import os
import tempfile

# configure a throwaway database and media root before the app modules load
_tmp = tempfile.mkdtemp(prefix="listings-test-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_tmp, 'test.db')}"
os.environ["MEDIA_ROOT"] = os.path.join(_tmp, "media")
os.environ["MAP_TOKEN"] = ""

import pytest
from fastapi.testclient import TestClient

from app import models
from app.db import Base, engine, SessionLocal
from app.main import app
from app.web import current_user, get_geocoder
from app.geocoding import GeocodingError


class FakeGeocoder:
    """Resolves known places; raises for 'boom'; returns nothing otherwise."""

    def __init__(self):
        self.places = {"Goa": [73.8278, 15.4909], "Paris": [2.3522, 48.8566]}
        self.queries = []

    def forward_geocode(self, query, limit=1):
        self.queries.append(query)
        if "boom" in query.lower():
            raise GeocodingError("provider down")
        for name, coords in self.places.items():
            if query.startswith(name):
                return [{"geometry": {"type": "Point", "coordinates": coords}}]
        return []


@pytest.fixture
def db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def owner(db):
    user = models.User(username="host", email="host@example.com")
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def geocoder():
    return FakeGeocoder()


@pytest.fixture
def client(db, owner, geocoder):
    user = models.User(id=owner.id, username=owner.username)
    app.dependency_overrides[get_geocoder] = lambda: geocoder
    app.dependency_overrides[current_user] = lambda: user
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def anon_client(db, geocoder):
    app.dependency_overrides[get_geocoder] = lambda: geocoder
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def make_listing(db, owner):
    def _make(title, price=1000, location="Goa", country="India", category=(), image_url=None):
        obj = models.Listing(
            title=title, description=f"{title} description", price=price,
            location=location, country=country, owner_id=owner.id,
            image_filename="listings/a.jpg",
            image_url=image_url or "https://res.example.com/demo/image/upload/listings/a.jpg",
        )
        obj.category = list(category)
        obj.geometry = {"type": "Point", "coordinates": [1.0, 2.0]}
        db.add(obj)
        db.commit()
        db.refresh(obj)
        return obj
    return _make
