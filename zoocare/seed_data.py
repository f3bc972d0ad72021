"""
Seed data for the ZooCare database.

Includes:
- Common species
- Sample feed items with cost and nutrition data
- Sample diets with feed components
- Sample animals assigned to those diets

Every seed function is idempotent; rows are matched by name.
"""

import logging

from zoocare.core.app_logging import configure_logging
from zoocare.core.database import SessionLocal, engine, Base
from zoocare.models.models import Animal, Diet, DietComponent, FeedItem, Species

logger = logging.getLogger(__name__)


def seed_species(db):
    """Seed a handful of species."""
    species = [
        {"species_name": "African Elephant", "base_notes": "Herbivore, browses and grazes"},
        {"species_name": "Reticulated Giraffe", "base_notes": "Browser, needs high-fiber diet"},
        {"species_name": "Plains Zebra", "base_notes": "Grazer"},
        {"species_name": "Red Kangaroo", "base_notes": None},
    ]

    for data in species:
        existing = db.query(Species).filter(Species.species_name == data["species_name"]).first()
        if not existing:
            db.add(Species(**data))

    db.commit()
    logger.info("Species seeded.")


def seed_feed_items(db):
    """Seed sample feed items.

    Costs are per kg. Nutrients are approximate as-fed values; calcium is
    mg per kg and energy is kcal per kg.
    """
    feeds = [
        {
            "feed_name": "Timothy Hay",
            "manufacturer": "Valley Farms",
            "cost_per_kg": 0.45,
            "calories_per_kg": 1800,
            "protein_percentage": 8.0,
            "fat_percentage": 2.0,
            "fiber_percentage": 32.0,
            "calcium_mg_per_kg": 4000,
        },
        {
            "feed_name": "Alfalfa Pellets",
            "manufacturer": "Valley Farms",
            "cost_per_kg": 0.80,
            "calories_per_kg": 2200,
            "protein_percentage": 17.0,
            "fat_percentage": 2.5,
            "fiber_percentage": 25.0,
            "calcium_mg_per_kg": 14000,
        },
        {
            "feed_name": "Browse Mix",
            "manufacturer": None,
            "cost_per_kg": 1.20,
            "calories_per_kg": 1500,
            "protein_percentage": 12.0,
            "fat_percentage": 3.0,
            "fiber_percentage": 40.0,
            "calcium_mg_per_kg": 9000,
        },
        {
            "feed_name": "Herbivore Supplement",
            "manufacturer": "ZooNutri",
            "cost_per_kg": 3.50,
            "calories_per_kg": 2900,
            "protein_percentage": 15.0,
            "fat_percentage": 4.0,
            "fiber_percentage": 18.0,
            "calcium_mg_per_kg": None,
        },
    ]

    for data in feeds:
        existing = db.query(FeedItem).filter(FeedItem.feed_name == data["feed_name"]).first()
        if not existing:
            db.add(FeedItem(**data))

    db.commit()
    logger.info("Feed items seeded.")


def seed_diets(db):
    """Seed sample diets with their feed components."""
    diets = [
        {
            "diet_name": "Elephant Maintenance",
            "total_ration_size_kg": 80.0,
            "ration_size_kg": 20.0,
            "feeding_frequency": 4,
            "components": [("Timothy Hay", 70), ("Browse Mix", 20), ("Herbivore Supplement", 10)],
        },
        {
            # No total ration; the daily ration comes from serving size × frequency
            "diet_name": "Giraffe Browser",
            "total_ration_size_kg": None,
            "ration_size_kg": 6.0,
            "feeding_frequency": 3,
            "components": [("Browse Mix", 50), ("Alfalfa Pellets", 40), ("Herbivore Supplement", 10)],
        },
        {
            "diet_name": "Grazer Standard",
            "total_ration_size_kg": 9.0,
            "ration_size_kg": 4.5,
            "feeding_frequency": 2,
            "components": [("Timothy Hay", 85), ("Alfalfa Pellets", 15)],
        },
    ]

    feeds_by_name = {f.feed_name: f for f in db.query(FeedItem).all()}

    for data in diets:
        if db.query(Diet).filter(Diet.diet_name == data["diet_name"]).first():
            continue

        components = data.pop("components")
        missing = [name for name, _ in components if name not in feeds_by_name]
        if missing:
            logger.warning("Skipping diet %s, missing feed items: %s", data["diet_name"], missing)
            continue

        diet = Diet(**data)
        for feed_name, percentage in components:
            diet.components.append(DietComponent(
                feed_id=feeds_by_name[feed_name].feed_id,
                percentage_in_diet=percentage,
            ))
        db.add(diet)

    db.commit()
    logger.info("Diets seeded.")


def seed_animals(db):
    """Seed sample animals, one of them without a diet."""
    animals = [
        ("Tembo", "African Elephant", "Female", 3200.0, "Elephant Maintenance"),
        ("Kito", "African Elephant", "Male", 4100.0, "Elephant Maintenance"),
        ("Twiga", "Reticulated Giraffe", "Female", 830.0, "Giraffe Browser"),
        ("Stripe", "Plains Zebra", "Male", 320.0, "Grazer Standard"),
        ("Joey", "Red Kangaroo", "Male", 55.0, None),
    ]

    species_by_name = {s.species_name: s for s in db.query(Species).all()}
    diets_by_name = {d.diet_name: d for d in db.query(Diet).all()}

    for name, species_name, gender, weight_kg, diet_name in animals:
        if db.query(Animal).filter(Animal.animal_name == name).first():
            continue
        species = species_by_name.get(species_name)
        if species is None:
            logger.warning("Skipping animal %s, species %s not seeded", name, species_name)
            continue
        diet = diets_by_name.get(diet_name) if diet_name else None
        db.add(Animal(
            animal_name=name,
            gender=gender,
            weight_kg=weight_kg,
            species_id=species.species_id,
            current_diet_id=diet.diet_id if diet else None,
        ))

    db.commit()
    logger.info("Animals seeded.")


def seed_all(db):
    """Run every seed function in dependency order."""
    seed_species(db)
    seed_feed_items(db)
    seed_diets(db)
    seed_animals(db)


def run_seed():
    """Create tables and seed the configured database."""
    configure_logging()
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        seed_all(db)
        logger.info("Seed data complete!")
    finally:
        db.close()


if __name__ == "__main__":
    run_seed()
