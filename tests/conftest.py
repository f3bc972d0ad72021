"""Shared test fixtures."""

import os

# Keep the app's own engine off the local database file
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from zoocare.core.database import Base, build_engine, get_db
from zoocare.main import app
from zoocare.models.models import Animal, Diet, DietComponent, FeedItem, Species
from zoocare.services.file_storage import MedicalFileStorage, get_file_storage

engine = build_engine("sqlite://")
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def upload_dir(tmp_path):
    return tmp_path / "uploads" / "medical"


@pytest.fixture
def client(db_session, upload_dir):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_file_storage] = lambda: MedicalFileStorage(upload_dir)
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def species(db_session):
    row = Species(species_name="African Elephant")
    db_session.add(row)
    db_session.commit()
    return row


@pytest.fixture
def animal(db_session, species):
    row = Animal(animal_name="Tembo", gender="Female", weight_kg=3200, species_id=species.species_id)
    db_session.add(row)
    db_session.commit()
    return row


@pytest.fixture
def add_feed(db_session):
    """Factory creating a feed item."""
    def _add_feed(name, cost_per_kg, **nutrients):
        feed = FeedItem(feed_name=name, cost_per_kg=cost_per_kg, **nutrients)
        db_session.add(feed)
        db_session.commit()
        return feed
    return _add_feed


@pytest.fixture
def add_diet(db_session):
    """Factory creating a diet; components are (feed, percentage_in_diet) pairs."""
    def _add_diet(name, components=(), **ration):
        diet = Diet(diet_name=name, **ration)
        for feed, percentage in components:
            diet.components.append(DietComponent(feed_id=feed.feed_id, percentage_in_diet=percentage))
        db_session.add(diet)
        db_session.commit()
        return diet
    return _add_diet
