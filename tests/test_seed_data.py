"""Tests for sample data seeding and the reports over it."""

import pytest

from zoocare.models.models import Animal, Diet, DietComponent, FeedItem, Species
from zoocare.seed_data import seed_all


def test_seed_is_idempotent(db_session):
    seed_all(db_session)
    seed_all(db_session)

    assert db_session.query(Species).count() == 4
    assert db_session.query(FeedItem).count() == 4
    assert db_session.query(Diet).count() == 3
    assert db_session.query(DietComponent).count() == 8
    assert db_session.query(Animal).count() == 5


def test_daily_feed_cost_over_seed(client, db_session):
    seed_all(db_session)

    data = client.get("/api/reports/daily-feed-cost").json()
    per_animal = {a["animal_name"]: a for a in data["perAnimal"]}

    # Joey has no diet
    assert set(per_animal) == {"Tembo", "Kito", "Twiga", "Stripe"}

    # 56 kg hay, 16 kg browse, 8 kg supplement
    assert per_animal["Tembo"]["total_cost_per_day"] == pytest.approx(72.4)
    assert per_animal["Twiga"]["daily_kg"] == 18
    assert per_animal["Twiga"]["daily_kg_basis"] == "ration_size_kg*feeding_frequency"
    assert per_animal["Twiga"]["total_cost_per_day"] == pytest.approx(22.86)
    assert per_animal["Stripe"]["total_cost_per_day"] == pytest.approx(4.5225)
    assert data["totalCostPerDay"] == pytest.approx(172.1825)


def test_diet_health_over_seed(client, db_session):
    seed_all(db_session)

    data = client.get("/api/reports/diet-health").json()
    assert data["overview"]["totalAnimals"] == 4
    assert data["overview"]["totalDiets"] == 3
    assert data["overview"]["averageHealthScore"] == 100
    assert all(d["health_score"] == 100 for d in data["diets"])
    counts = {d["diet_name"]: d["animal_count"] for d in data["diets"]}
    assert counts == {"Elephant Maintenance": 2, "Giraffe Browser": 1, "Grazer Standard": 1}
