"""Species API endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from zoocare.core.database import get_db
from zoocare.models.models import Species
from zoocare.schemas.schemas import SpeciesCreate, SpeciesCreated, SpeciesResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/species", tags=["species"])


@router.get("", response_model=list[SpeciesResponse])
def list_species(db: Session = Depends(get_db)):
    """List all species by name."""
    try:
        return db.query(Species).order_by(Species.species_name.asc()).all()
    except SQLAlchemyError:
        logger.exception("Database error listing species")
        raise HTTPException(status_code=500, detail="Database error fetching species")


@router.post("/add", response_model=SpeciesCreated, status_code=201)
def add_species(species: SpeciesCreate, db: Session = Depends(get_db)):
    """Add a new species. Names are unique."""
    name = species.species_name.strip()
    if not name:
        raise HTTPException(status_code=400, detail="Species Name is required to add a new species.")

    db_species = Species(species_name=name, base_notes=species.base_notes or None)
    db.add(db_species)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(
            status_code=409,
            detail=f"Species name '{name}' already exists. Please select it from the list or use a different name.",
        )
    db.refresh(db_species)

    return SpeciesCreated(
        message="Species added successfully!",
        insertId=db_species.species_id,
        species_name=db_species.species_name,
    )
