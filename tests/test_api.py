"""Tests for API endpoints."""

from datetime import datetime

import pytest
from sqlalchemy.exc import OperationalError

from zoocare.api.reports import get_report_repository
from zoocare.main import app
from zoocare.models.models import Location


class TestSpeciesEndpoints:
    """Tests for species API endpoints."""

    def test_add_species(self, client):
        response = client.post("/api/species/add", json={
            "species_name": "  Snow Leopard ",
            "base_notes": "Carnivore",
        })
        assert response.status_code == 201
        data = response.json()
        assert data["message"] == "Species added successfully!"
        assert data["species_name"] == "Snow Leopard"
        assert data["insertId"] is not None

    def test_add_species_blank_name(self, client):
        response = client.post("/api/species/add", json={"species_name": "   "})
        assert response.status_code == 400

    def test_add_duplicate_species(self, client, species):
        response = client.post("/api/species/add", json={"species_name": "African Elephant"})
        assert response.status_code == 409
        assert "already exists" in response.json()["detail"]

    def test_list_species_sorted(self, client):
        for name in ("Zebra", "Aardvark", "Lion"):
            client.post("/api/species/add", json={"species_name": name})

        response = client.get("/api/species")
        assert response.status_code == 200
        assert [s["species_name"] for s in response.json()] == ["Aardvark", "Lion", "Zebra"]


class TestFeedItemEndpoints:
    """Tests for feed item API endpoints."""

    def test_add_feed_item(self, client):
        response = client.post("/api/feeditems/add", json={
            "feed_name": "Timothy Hay",
            "manufacturer": "Valley Farms",
            "cost_per_kg": 0.45,
            "protein_percentage": 8,
        })
        assert response.status_code == 201
        data = response.json()
        assert data["message"] == "Feed Item added successfully!"
        assert data["feed_name"] == "Timothy Hay"

    def test_add_feed_item_requires_cost(self, client):
        response = client.post("/api/feeditems/add", json={"feed_name": "Hay"})
        assert response.status_code == 422

    def test_add_feed_item_rejects_negative_cost(self, client):
        response = client.post("/api/feeditems/add", json={"feed_name": "Hay", "cost_per_kg": -1})
        assert response.status_code == 422

    def test_add_duplicate_feed_item(self, client, add_feed):
        add_feed("Timothy Hay", 0.45)
        response = client.post("/api/feeditems/add", json={"feed_name": "Timothy Hay", "cost_per_kg": 1})
        assert response.status_code == 409

    def test_feed_item_details_include_diet_usage(self, client, add_feed, add_diet):
        hay = add_feed("Timothy Hay", 0.45, protein_percentage=8)
        pellets = add_feed("Alfalfa Pellets", 0.8)
        add_diet("Grazer", [(hay, 85), (pellets, 15)], total_ration_size_kg=9)
        add_diet("Browser", [(hay, 30)], total_ration_size_kg=5)

        response = client.get("/api/feeditems/details")
        assert response.status_code == 200
        details = {d["feed_name"]: d for d in response.json()}

        assert details["Timothy Hay"]["protein_percentage"] == 8
        assert details["Timothy Hay"]["cost_per_kg"] == 0.45
        assert {(u["diet_name"], u["percentage"]) for u in details["Timothy Hay"]["diets"]} == {
            ("Grazer", 85), ("Browser", 30),
        }
        assert details["Alfalfa Pellets"]["diets"] == [{"diet_name": "Grazer", "percentage": 15}]

    def test_list_feed_items(self, client, add_feed):
        add_feed("Browse Mix", 1.2)
        add_feed("Alfalfa Pellets", 0.8)

        response = client.get("/api/feeditems")
        assert response.status_code == 200
        assert [f["feed_name"] for f in response.json()] == ["Alfalfa Pellets", "Browse Mix"]


class TestDietEndpoints:
    """Tests for diet API endpoints."""

    def test_add_diet_with_components(self, client, add_feed):
        hay = add_feed("Timothy Hay", 0.45)
        browse = add_feed("Browse Mix", 1.2)

        response = client.post("/api/diets/add", json={
            "diet_name": "Elephant Maintenance",
            "total_ration_size_kg": 80,
            "ration_size_kg": 20,
            "feeding_frequency": 4,
            "components": [
                {"feed_id": hay.feed_id, "percentage_in_diet": 70},
                {"feed_id": browse.feed_id, "percentage_in_diet": 30},
            ],
        })
        assert response.status_code == 201
        data = response.json()
        assert data["diet_name"] == "Elephant Maintenance"
        assert data["message"] == "Diet added successfully with components."

        details = {d["feed_name"]: d for d in client.get("/api/feeditems/details").json()}
        assert details["Browse Mix"]["diets"][0]["diet_name"] == "Elephant Maintenance"

    def test_add_diet_unknown_feed(self, client):
        response = client.post("/api/diets/add", json={
            "diet_name": "Mystery",
            "ration_size_kg": 1,
            "feeding_frequency": 2,
            "components": [{"feed_id": 999, "percentage_in_diet": 100}],
        })
        assert response.status_code == 400
        assert "999" in response.json()["detail"]
        assert client.get("/api/diets").json() == []

    def test_add_diet_missing_fields(self, client):
        response = client.post("/api/diets/add", json={"diet_name": "Incomplete"})
        assert response.status_code == 422

    def test_add_duplicate_diet(self, client, add_diet):
        add_diet("Grazer Standard", total_ration_size_kg=9)
        response = client.post("/api/diets/add", json={
            "diet_name": "Grazer Standard",
            "ration_size_kg": 4.5,
            "feeding_frequency": 2,
        })
        assert response.status_code == 409


class TestAnimalEndpoints:
    """Tests for animal API endpoints."""

    def test_create_animal(self, client, species):
        response = client.post("/api/animals", json={
            "animal_name": "Kito",
            "birth_date": "2015-04-01",
            "gender": "Male",
            "weight_kg": 4100,
            "species_id": species.species_id,
        })
        assert response.status_code == 201
        data = response.json()
        assert data["message"] == "Animal added successfully!"
        assert data["animal_name"] == "Kito"

    def test_create_animal_unknown_species(self, client):
        response = client.post("/api/animals", json={
            "animal_name": "Ghost",
            "gender": "Male",
            "weight_kg": 10,
            "species_id": 999,
        })
        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid Species ID or Diet ID provided."

    def test_create_animal_unknown_diet(self, client, species):
        response = client.post("/api/animals", json={
            "animal_name": "Ghost",
            "gender": "Male",
            "weight_kg": 10,
            "species_id": species.species_id,
            "current_diet_id": 999,
        })
        assert response.status_code == 400

    def test_get_animal(self, client, animal):
        response = client.get(f"/api/animals/{animal.animal_id}")
        assert response.status_code == 200
        data = response.json()
        assert data["animal_name"] == "Tembo"
        assert data["weight_kg"] == 3200
        assert data["current_diet_id"] is None

    def test_get_animal_not_found(self, client):
        response = client.get("/api/animals/999")
        assert response.status_code == 404
        assert response.json()["detail"] == "Animal with ID 999 not found."

    def test_list_animals(self, client, animal, species):
        client.post("/api/animals", json={
            "animal_name": "Amara", "gender": "Female", "weight_kg": 2900,
            "species_id": species.species_id,
        })

        summary = client.get("/api/animals").json()
        assert [a["animal_name"] for a in summary] == ["Amara", "Tembo"]
        assert set(summary[0]) == {"animal_id", "animal_name"}

        profiles = client.get("/api/allAnimals").json()
        assert [a["animal_name"] for a in profiles] == ["Amara", "Tembo"]
        assert profiles[1]["gender"] == "Female"

    def test_update_animal_assigns_diet(self, client, animal, species, add_diet):
        diet = add_diet("Elephant Maintenance", total_ration_size_kg=80)

        response = client.put(f"/api/animals/{animal.animal_id}", json={
            "animal_name": "Tembo",
            "gender": "Female",
            "weight_kg": 3250,
            "species_id": species.species_id,
            "current_diet_id": diet.diet_id,
        })
        assert response.status_code == 200
        assert response.json()["message"] == "Animal 'Tembo' updated successfully!"

        data = client.get(f"/api/animals/{animal.animal_id}").json()
        assert data["weight_kg"] == 3250
        assert data["current_diet_id"] == diet.diet_id

    def test_update_animal_not_found(self, client, species):
        response = client.put("/api/animals/999", json={
            "animal_name": "Ghost", "gender": "Male", "weight_kg": 1,
            "species_id": species.species_id,
        })
        assert response.status_code == 404


class TestReportEndpoints:
    """Tests for the feed cost and diet health reports."""

    def _assign(self, db_session, animal, diet):
        animal.current_diet_id = diet.diet_id
        db_session.commit()

    def test_daily_feed_cost_empty(self, client):
        response = client.get("/api/reports/daily-feed-cost")
        assert response.status_code == 200
        assert response.json() == {"perAnimal": [], "perFeed": [], "totalCostPerDay": 0}

    def test_daily_feed_cost_direct_total(self, client, db_session, animal, add_feed, add_diet):
        """Diet total 10 kg with one 50% component at 2/kg."""
        feed = add_feed("Pellets", 2)
        diet = add_diet("Simple", [(feed, 50)], total_ration_size_kg=10, ration_size_kg=1, feeding_frequency=1)
        self._assign(db_session, animal, diet)

        data = client.get("/api/reports/daily-feed-cost").json()
        entry = data["perAnimal"][0]
        assert entry["animal_name"] == "Tembo"
        assert entry["diet_name"] == "Simple"
        assert entry["daily_kg"] == 10
        assert entry["daily_kg_basis"] == "total_ration_size_kg"
        assert entry["feed_components"] == [{
            "feed_id": feed.feed_id,
            "feed_name": "Pellets",
            "percentage_in_diet": 50,
            "kg_per_day": 5,
            "cost_per_day": 10,
        }]
        assert entry["total_cost_per_day"] == 10
        assert data["perFeed"] == [
            {"feed_id": feed.feed_id, "feed_name": "Pellets", "kg_per_day": 5, "cost_per_day": 10}
        ]
        assert data["totalCostPerDay"] == 10

    def test_daily_feed_cost_fallback_ration(self, client, db_session, animal, add_diet):
        diet = add_diet("Per Feeding", ration_size_kg=2, feeding_frequency=3)
        self._assign(db_session, animal, diet)

        entry = client.get("/api/reports/daily-feed-cost").json()["perAnimal"][0]
        assert entry["daily_kg"] == 6
        assert entry["daily_kg_basis"] == "ration_size_kg*feeding_frequency"
        assert entry["feed_components"] == []
        assert entry["total_cost_per_day"] == 0

    def test_daily_feed_cost_skips_animals_without_diet(self, client, animal):
        data = client.get("/api/reports/daily-feed-cost").json()
        assert data["perAnimal"] == []

    def test_daily_feed_cost_totals_agree(self, client, db_session, species, add_feed, add_diet):
        hay = add_feed("Hay", 0.45)
        supplement = add_feed("Supplement", 3.5)
        big = add_diet("Big", [(hay, 70), (supplement, 30)], total_ration_size_kg=80)
        small = add_diet("Small", [(hay, 100)], ration_size_kg=1.5, feeding_frequency=3)
        for name, diet in (("A", big), ("B", big), ("C", small)):
            client.post("/api/animals", json={
                "animal_name": name, "gender": "Female", "weight_kg": 100,
                "species_id": species.species_id, "current_diet_id": diet.diet_id,
            })

        data = client.get("/api/reports/daily-feed-cost").json()
        assert len(data["perAnimal"]) == 3

        per_animal_sum = sum(a["total_cost_per_day"] for a in data["perAnimal"])
        per_feed_sum = sum(f["cost_per_day"] for f in data["perFeed"])
        assert data["totalCostPerDay"] == pytest.approx(per_animal_sum, abs=1e-3)
        assert data["totalCostPerDay"] == pytest.approx(per_feed_sum, abs=1e-3)

        hay_total = next(f for f in data["perFeed"] if f["feed_name"] == "Hay")
        # 56 + 56 + 4.5 kg
        assert hay_total["kg_per_day"] == pytest.approx(116.5)

    def test_daily_feed_cost_ignores_unassigned_diets(self, client, db_session, animal, add_feed, add_diet):
        pellets = add_feed("Pellets", 2)
        caviar = add_feed("Caviar", 500)
        diet = add_diet("Assigned", [(pellets, 50)], total_ration_size_kg=10)
        add_diet("Shelved", [(caviar, 100), (pellets, 50)], total_ration_size_kg=40)
        self._assign(db_session, animal, diet)

        data = client.get("/api/reports/daily-feed-cost").json()
        assert [f["feed_name"] for f in data["perFeed"]] == ["Pellets"]
        assert data["perFeed"][0]["kg_per_day"] == 5
        assert data["totalCostPerDay"] == 10

    def test_diet_health(self, client, db_session, animal, add_feed, add_diet):
        """A 100% protein-20 component with no other nutrients scores 20."""
        feed = add_feed("Lean Pellets", 1, protein_percentage=20)
        diet = add_diet("Lean", [(feed, 100)], total_ration_size_kg=5)
        add_diet("Unused", total_ration_size_kg=1)
        self._assign(db_session, animal, diet)

        response = client.get("/api/reports/diet-health")
        assert response.status_code == 200
        data = response.json()
        diets = {d["diet_name"]: d for d in data["diets"]}

        lean = diets["Lean"]
        assert lean["health_score"] == 20
        assert lean["animal_count"] == 1
        assert lean["alert_count"] == 0
        assert lean["alert_level"] == "low"
        assert lean["weight_gain"] == "0.4 kg/week"
        assert lean["feed_efficiency"] == "2.3"

        assert diets["Unused"]["health_score"] == 0
        assert diets["Unused"]["animal_count"] == 0
        assert data["overview"] == {
            "totalAnimals": 1,
            "averageHealthScore": 10,
            "totalDiets": 2,
        }

    def test_diet_health_scores_clamped(self, client, add_feed, add_diet):
        feed = add_feed("Dense", 1, calories_per_kg=4000)
        add_diet("Dense Diet", [(feed, 100)], total_ration_size_kg=1)

        diet = client.get("/api/reports/diet-health").json()["diets"][0]
        assert diet["health_score"] == 100
        assert diet["weight_gain"] == "2.0 kg/week"
        assert diet["feed_efficiency"] == "1.5"

    def test_report_store_failure(self, client):
        class FailingRepository:
            def _fail(self, *args, **kwargs):
                raise OperationalError("SELECT", {}, Exception("database is down"))

            list_animals_with_diet = _fail
            list_diet_components = _fail
            list_all_feed_nutrition = _fail
            list_all_diet_components = _fail
            list_diets_with_animal_counts = _fail

        app.dependency_overrides[get_report_repository] = FailingRepository

        response = client.get("/api/reports/daily-feed-cost")
        assert response.status_code == 500
        assert response.json() == {"detail": "Database error computing daily feed cost."}

        response = client.get("/api/reports/diet-health")
        assert response.status_code == 500
        assert response.json() == {"detail": "Error generating diet health report."}


class TestLocationEndpoints:
    """Tests for live locations."""

    def test_live_locations_latest_per_animal(self, client, db_session, animal, species):
        other = client.post("/api/animals", json={
            "animal_name": "Kito", "gender": "Male", "weight_kg": 4100,
            "species_id": species.species_id,
        }).json()["animal_id"]

        db_session.add_all([
            Location(animal_id=animal.animal_id, location_timestamp=datetime(2024, 5, 1, 8, 0),
                     latitude=1.0, longitude=2.0, location_status="Resting"),
            Location(animal_id=animal.animal_id, location_timestamp=datetime(2024, 5, 1, 9, 0),
                     latitude=1.5, longitude=2.5, speed=3.2, location_status="Moving"),
            Location(animal_id=other, location_timestamp=datetime(2024, 5, 1, 8, 30),
                     latitude=5.0, longitude=6.0),
        ])
        db_session.commit()

        response = client.get("/api/locations/live")
        assert response.status_code == 200
        data = response.json()
        assert [(d["animal_name"], d["latitude"]) for d in data] == [("Tembo", 1.5), ("Kito", 5.0)]
        assert data[0]["location_status"] == "Moving"
        assert data[0]["speed"] == 3.2

    def test_live_locations_empty(self, client):
        assert client.get("/api/locations/live").json() == []


class TestHealthEndpoints:
    """Tests for health and root endpoints."""

    def test_health_check(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        data = response.json()
        assert data["endpoints"]["reports"] == "/api/reports"
