"""Feed item API endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from zoocare.core.calculations import group_by
from zoocare.core.database import get_db
from zoocare.models.models import Diet, DietComponent, FeedItem
from zoocare.schemas.schemas import (
    FeedDietUsage,
    FeedItemCreate,
    FeedItemCreated,
    FeedItemDetail,
    FeedItemSummary,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/feeditems", tags=["feed items"])


@router.get("", response_model=list[FeedItemSummary])
def list_feed_items(db: Session = Depends(get_db)):
    """List all feed items by name."""
    try:
        return db.query(FeedItem).order_by(FeedItem.feed_name.asc()).all()
    except SQLAlchemyError:
        logger.exception("Database error listing feed items")
        raise HTTPException(status_code=500, detail="Database error fetching feed items.")


@router.get("/details", response_model=list[FeedItemDetail])
def list_feed_item_details(db: Session = Depends(get_db)):
    """List feed items with cost, nutrition and the diets using each one."""
    try:
        feeds = db.query(FeedItem).order_by(FeedItem.feed_name.asc()).all()
        usage_rows = (
            db.query(
                DietComponent.feed_id,
                Diet.diet_name,
                DietComponent.percentage_in_diet.label("percentage"),
            )
            .join(Diet, Diet.diet_id == DietComponent.diet_id)
            .order_by(DietComponent.component_id)
            .all()
        )
    except SQLAlchemyError:
        logger.exception("Database error listing feed item details")
        raise HTTPException(status_code=500, detail="Database error fetching feed item details.")

    usage_by_feed = group_by((row._asdict() for row in usage_rows), "feed_id")

    return [
        FeedItemDetail(
            feed_id=feed.feed_id,
            feed_name=feed.feed_name,
            manufacturer=feed.manufacturer,
            cost_per_kg=feed.cost_per_kg,
            calories_per_kg=feed.calories_per_kg,
            protein_percentage=feed.protein_percentage,
            fat_percentage=feed.fat_percentage,
            fiber_percentage=feed.fiber_percentage,
            calcium_mg_per_kg=feed.calcium_mg_per_kg,
            diets=[
                FeedDietUsage(diet_name=u["diet_name"], percentage=u["percentage"])
                for u in usage_by_feed.get(feed.feed_id, [])
            ],
        )
        for feed in feeds
    ]


@router.post("/add", response_model=FeedItemCreated, status_code=201)
def add_feed_item(feed: FeedItemCreate, db: Session = Depends(get_db)):
    """Add a feed item. Nutrient fields are optional."""
    db_feed = FeedItem(**feed.model_dump())
    db.add(db_feed)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(
            status_code=409,
            detail=f"Feed Item name '{feed.feed_name}' already exists. Please use a different name.",
        )
    db.refresh(db_feed)

    return FeedItemCreated(
        message="Feed Item added successfully!",
        insertId=db_feed.feed_id,
        feed_name=db_feed.feed_name,
    )
