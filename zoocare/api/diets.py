"""Diet API endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from zoocare.core.database import get_db
from zoocare.models.models import Diet, DietComponent, FeedItem
from zoocare.schemas.schemas import DietCreate, DietCreated, DietSummary

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/diets", tags=["diets"])


@router.get("", response_model=list[DietSummary])
def list_diets(db: Session = Depends(get_db)):
    """List all diets by name."""
    try:
        return db.query(Diet).order_by(Diet.diet_name.asc()).all()
    except SQLAlchemyError:
        logger.exception("Database error listing diets")
        raise HTTPException(status_code=500, detail="Database error fetching diets")


@router.post("/add", response_model=DietCreated, status_code=201)
def add_diet(diet: DietCreate, db: Session = Depends(get_db)):
    """
    Create a diet together with its feed components.

    The diet and its components are committed together. Component
    percentages are stored as given; they are not normalized to 100.
    """
    feed_ids = {c.feed_id for c in diet.components}
    if feed_ids:
        known = {
            row.feed_id
            for row in db.query(FeedItem.feed_id).filter(FeedItem.feed_id.in_(feed_ids)).all()
        }
        missing = sorted(feed_ids - known)
        if missing:
            raise HTTPException(status_code=400, detail=f"Unknown feed item ID(s): {missing}")

    db_diet = Diet(
        diet_name=diet.diet_name,
        total_ration_size_kg=diet.total_ration_size_kg,
        ration_size_kg=diet.ration_size_kg,
        feeding_frequency=diet.feeding_frequency,
        notes=diet.notes,
    )
    for component in diet.components:
        db_diet.components.append(DietComponent(
            feed_id=component.feed_id,
            percentage_in_diet=component.percentage_in_diet,
        ))
    db.add(db_diet)

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(
            status_code=409,
            detail=f"Diet name '{diet.diet_name}' already exists. Please select it from the list or use a different name.",
        )
    db.refresh(db_diet)

    logger.info("Created diet %s with %d component(s)", db_diet.diet_id, len(diet.components))
    return DietCreated(
        insertId=db_diet.diet_id,
        diet_name=db_diet.diet_name,
        message="Diet added successfully with components.",
    )
