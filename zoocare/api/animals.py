"""Animal API endpoints."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from zoocare.core.database import get_db
from zoocare.models.models import Animal, Diet, Species
from zoocare.schemas.schemas import (
    AnimalCreate,
    AnimalCreated,
    AnimalResponse,
    AnimalSummary,
    AnimalUpdate,
    AnimalUpdated,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["animals"])


def _check_references(db: Session, species_id: int, diet_id: Optional[int]) -> None:
    """Reject unknown species or diet ids with a 400."""
    species_ok = db.query(Species.species_id).filter(Species.species_id == species_id).first()
    diet_ok = diet_id is None or db.query(Diet.diet_id).filter(Diet.diet_id == diet_id).first()
    if not species_ok or not diet_ok:
        raise HTTPException(status_code=400, detail="Invalid Species ID or Diet ID provided.")


@router.post("/animals", response_model=AnimalCreated, status_code=201)
def create_animal(animal: AnimalCreate, db: Session = Depends(get_db)):
    """Register a new animal."""
    _check_references(db, animal.species_id, animal.current_diet_id)

    db_animal = Animal(**animal.model_dump())
    db.add(db_animal)
    db.commit()
    db.refresh(db_animal)

    return AnimalCreated(
        message="Animal added successfully!",
        animal_id=db_animal.animal_id,
        animal_name=db_animal.animal_name,
    )


@router.get("/animals", response_model=list[AnimalSummary])
def list_animals(db: Session = Depends(get_db)):
    """Minimal animal list (id and name) ordered by name."""
    try:
        return db.query(Animal).order_by(Animal.animal_name.asc()).all()
    except SQLAlchemyError:
        logger.exception("Database error listing animals")
        raise HTTPException(status_code=500, detail="Database error fetching animals.")


@router.get("/allAnimals", response_model=list[AnimalResponse])
def list_all_animals(db: Session = Depends(get_db)):
    """Full animal profiles ordered by name."""
    try:
        return db.query(Animal).order_by(Animal.animal_name.asc()).all()
    except SQLAlchemyError:
        logger.exception("Database error listing animal profiles")
        raise HTTPException(status_code=500, detail="Database error fetching all animals.")


@router.get("/animals/{animal_id}", response_model=AnimalResponse)
def get_animal(animal_id: int, db: Session = Depends(get_db)):
    """Get a single animal profile."""
    animal = db.query(Animal).filter(Animal.animal_id == animal_id).first()
    if not animal:
        raise HTTPException(status_code=404, detail=f"Animal with ID {animal_id} not found.")
    return animal


@router.put("/animals/{animal_id}", response_model=AnimalUpdated)
def update_animal(animal_id: int, animal_update: AnimalUpdate, db: Session = Depends(get_db)):
    """Replace an animal profile. Omitting current_diet_id clears the diet."""
    animal = db.query(Animal).filter(Animal.animal_id == animal_id).first()
    if not animal:
        raise HTTPException(status_code=404, detail=f"Animal with ID {animal_id} not found.")

    _check_references(db, animal_update.species_id, animal_update.current_diet_id)

    for field, value in animal_update.model_dump().items():
        setattr(animal, field, value)

    db.commit()
    return AnimalUpdated(
        message=f"Animal '{animal.animal_name}' updated successfully!",
        animal_id=animal_id,
    )
