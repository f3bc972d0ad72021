"""Report API endpoints: daily feed cost and diet health."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from zoocare.core.calculations import (
    HealthScoreWeights,
    calculate_daily_feed_cost,
    calculate_diet_health,
)
from zoocare.core.config import settings
from zoocare.core.database import get_db
from zoocare.schemas.schemas import DailyFeedCostReport, DietHealthReport
from zoocare.services.report_repository import ReportRepository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/reports", tags=["reports"])


def get_report_repository(db: Session = Depends(get_db)) -> ReportRepository:
    return ReportRepository(db)


def get_health_score_weights() -> HealthScoreWeights:
    """Score weights from settings, overridable per deployment."""
    return HealthScoreWeights(
        protein=settings.HEALTH_WEIGHT_PROTEIN,
        fat=settings.HEALTH_WEIGHT_FAT,
        fiber=settings.HEALTH_WEIGHT_FIBER,
        calcium=settings.HEALTH_WEIGHT_CALCIUM,
        calories=settings.HEALTH_WEIGHT_CALORIES,
    )


@router.get("/daily-feed-cost", response_model=DailyFeedCostReport)
def daily_feed_cost(repo: ReportRepository = Depends(get_report_repository)):
    """
    Daily feed cost per animal, per feed item and in total.

    Each animal's daily ration comes from its diet's total_ration_size_kg
    when positive, otherwise ration_size_kg × feeding_frequency. The basis
    used is reported per animal.
    """
    try:
        animals = repo.list_animals_with_diet()
        components = repo.list_diet_components(a["diet_id"] for a in animals)
    except SQLAlchemyError:
        logger.exception("Database error computing daily feed cost")
        raise HTTPException(status_code=500, detail="Database error computing daily feed cost.")

    report = calculate_daily_feed_cost(animals, components)
    logger.info(
        "Daily feed cost report: animals=%d feeds=%d total=%s",
        len(report["perAnimal"]), len(report["perFeed"]), report["totalCostPerDay"],
    )
    return report


@router.get("/diet-health", response_model=DietHealthReport)
def diet_health(
    repo: ReportRepository = Depends(get_report_repository),
    weights: HealthScoreWeights = Depends(get_health_score_weights),
):
    """
    Composite 0-100 health score per diet with population overview.

    The score is a weighted sum of percentage-weighted nutrient totals.
    It is a placeholder formula, not a calibrated nutrition model.
    """
    try:
        feed_nutrition = repo.list_all_feed_nutrition()
        components = repo.list_all_diet_components()
        diets = repo.list_diets_with_animal_counts()
    except SQLAlchemyError:
        logger.exception("Database error computing diet health report")
        raise HTTPException(status_code=500, detail="Error generating diet health report.")

    return calculate_diet_health(diets, components, feed_nutrition, weights)
