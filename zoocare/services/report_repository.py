"""Relational reads backing the feed cost and diet health reports."""

from typing import Iterable

from sqlalchemy import distinct, func
from sqlalchemy.orm import Session

from zoocare.models.models import Animal, Diet, DietComponent, FeedItem


class ReportRepository:
    """Read-only queries returning plain row dicts for the report calculators."""

    def __init__(self, db: Session):
        self.db = db

    def list_animals_with_diet(self) -> list[dict]:
        """Animals with a current diet, joined to the diet's ration fields."""
        rows = (
            self.db.query(
                Animal.animal_id,
                Animal.animal_name,
                Animal.weight_kg,
                Animal.current_diet_id.label("diet_id"),
                Diet.diet_name,
                Diet.ration_size_kg,
                Diet.feeding_frequency,
                Diet.total_ration_size_kg,
            )
            .outerjoin(Diet, Animal.current_diet_id == Diet.diet_id)
            .filter(Animal.current_diet_id.isnot(None))
            .order_by(Animal.animal_id)
            .all()
        )
        return [row._asdict() for row in rows]

    def list_diet_components(self, diet_ids: Iterable[int]) -> list[dict]:
        """Components of the given diets with their feed's name and cost."""
        diet_ids = set(diet_ids)
        if not diet_ids:
            return []
        rows = (
            self.db.query(
                DietComponent.diet_id,
                DietComponent.feed_id,
                DietComponent.percentage_in_diet,
                FeedItem.feed_name,
                FeedItem.cost_per_kg,
            )
            .join(FeedItem, DietComponent.feed_id == FeedItem.feed_id)
            .filter(DietComponent.diet_id.in_(diet_ids))
            .order_by(DietComponent.component_id)
            .all()
        )
        return [row._asdict() for row in rows]

    def list_all_feed_nutrition(self) -> list[dict]:
        rows = self.db.query(
            FeedItem.feed_id,
            FeedItem.calories_per_kg,
            FeedItem.protein_percentage,
            FeedItem.fat_percentage,
            FeedItem.fiber_percentage,
            FeedItem.calcium_mg_per_kg,
        ).all()
        return [row._asdict() for row in rows]

    def list_all_diet_components(self) -> list[dict]:
        rows = (
            self.db.query(
                DietComponent.diet_id,
                DietComponent.feed_id,
                DietComponent.percentage_in_diet,
            )
            .order_by(DietComponent.component_id)
            .all()
        )
        return [row._asdict() for row in rows]

    def list_diets_with_animal_counts(self) -> list[dict]:
        """Every diet with the number of animals currently assigned to it."""
        rows = (
            self.db.query(
                Diet.diet_id,
                Diet.diet_name,
                func.count(distinct(Animal.animal_id)).label("animal_count"),
            )
            .outerjoin(Animal, Animal.current_diet_id == Diet.diet_id)
            .group_by(Diet.diet_id, Diet.diet_name)
            .order_by(Diet.diet_id)
            .all()
        )
        return [row._asdict() for row in rows]
