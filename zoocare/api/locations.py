"""Live location API endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import and_, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from zoocare.core.database import get_db
from zoocare.models.models import Animal, Location
from zoocare.schemas.schemas import LiveLocation

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/locations", tags=["locations"])


@router.get("/live", response_model=list[LiveLocation])
def live_locations(db: Session = Depends(get_db)):
    """Most recent location record for each animal, newest first."""
    latest = (
        db.query(
            Location.animal_id,
            func.max(Location.location_timestamp).label("latest_ts"),
        )
        .group_by(Location.animal_id)
        .subquery()
    )
    try:
        rows = (
            db.query(
                Location.location_id,
                Location.animal_id,
                Location.location_timestamp,
                Location.latitude,
                Location.longitude,
                Location.speed,
                Location.location_status,
                Animal.animal_name,
            )
            .join(Animal, Animal.animal_id == Location.animal_id)
            .join(latest, and_(
                latest.c.animal_id == Location.animal_id,
                latest.c.latest_ts == Location.location_timestamp,
            ))
            .order_by(Location.location_timestamp.desc())
            .all()
        )
    except SQLAlchemyError:
        logger.exception("Database error fetching live locations")
        raise HTTPException(status_code=500, detail="Database error fetching live locations.")

    return [row._asdict() for row in rows]
