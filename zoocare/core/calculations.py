"""
Report math for daily feed cost and diet health.

Daily ration:  daily_kg = total_ration_size_kg            (when positive)
               daily_kg = ration_size_kg × feeding_frequency (otherwise)
Feed cost:     kg = pct/100 × daily_kg,  cost = kg × cost_per_kg
Health score:  clamp(Σ weight_n × Σ(pct/100 × nutrient_n), 0, 100)

Every function here is pure and works on plain row dicts as returned by
the report repository. Missing or malformed numbers are read as zero.
"""

import math
from collections import defaultdict
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Hashable, Iterable, Optional


DAILY_KG_BASIS_TOTAL = "total_ration_size_kg"
DAILY_KG_BASIS_PER_FEEDING = "ration_size_kg*feeding_frequency"

# Decimal places for emitted mass and cost figures
REPORT_PRECISION = 4

HEALTH_SCORE_MIN = 0.0
HEALTH_SCORE_MAX = 100.0

# Display-only indicators derived from the score
MAX_WEIGHT_GAIN_KG_PER_WEEK = 2.0
BASE_FEED_EFFICIENCY = 1.5

DEFAULT_ALERT_COUNT = 0
DEFAULT_ALERT_LEVEL = "low"


@dataclass(frozen=True)
class HealthScoreWeights:
    """Coefficients combining weighted nutrient totals into a raw score.

    These are placeholders, not a calibrated nutrition model. There is no
    per-species ideal nutrient normalization yet.
    """
    protein: float = 1.0
    fat: float = 1.0
    fiber: float = 1.0
    calcium: float = 0.1
    calories: float = 0.5


DEFAULT_HEALTH_WEIGHTS = HealthScoreWeights()


@dataclass
class WeightedNutrients:
    """Percentage-weighted nutrient totals for one diet."""
    protein_percentage: float = 0
    fat_percentage: float = 0
    fiber_percentage: float = 0
    calcium_mg_per_kg: float = 0
    calories_per_kg: float = 0


def to_number_or_zero(value: Any) -> float:
    """
    Coerce a store value to a float, reading anything unusable as zero.

    Accepts ints, floats, Decimals and numeric strings. None, blank or
    non-numeric strings, booleans, NaN and infinities all become 0.0.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float, Decimal)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return 0.0
    else:
        return 0.0
    if math.isnan(number) or math.isinf(number):
        return 0.0
    return number


def round_figure(value: float, places: int = REPORT_PRECISION) -> float:
    """
    Round an output figure half away from zero, normalizing negative zero.

    The exact binary value is rounded, so 0.03125 becomes 0.0313 rather
    than the round-half-even 0.0312.
    """
    rounded = Decimal(value).quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)
    return float(rounded) + 0.0


def group_by(rows: Iterable[dict], key: str) -> dict[Hashable, list[dict]]:
    """Group row dicts by the value of one column, preserving row order."""
    grouped: dict[Hashable, list[dict]] = defaultdict(list)
    for row in rows:
        grouped[row.get(key)].append(row)
    return dict(grouped)


def _id_sort_key(value: Any) -> tuple:
    # Numeric ids sort numerically, anything else after them as text
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return (0, value, "")
    return (1, 0, str(value))


# =============================================================================
# Daily Feed Cost
# =============================================================================

def calculate_daily_ration(
    total_ration_size_kg: Any,
    ration_size_kg: Any,
    feeding_frequency: Any,
) -> tuple[float, str]:
    """
    Determine the daily ration in kg and which formula produced it.

    Args:
        total_ration_size_kg: Total kg eaten per day, if recorded
        ration_size_kg: kg per feeding
        feeding_frequency: Feedings per day (fractional values are truncated)

    Returns:
        Tuple of (daily_kg, basis)
    """
    total = to_number_or_zero(total_ration_size_kg)
    if total > 0:
        return total, DAILY_KG_BASIS_TOTAL

    per_feeding = to_number_or_zero(ration_size_kg)
    frequency = int(to_number_or_zero(feeding_frequency))
    return per_feeding * frequency, DAILY_KG_BASIS_PER_FEEDING


def calculate_feed_component_cost(
    percentage_in_diet: Any,
    daily_kg: float,
    cost_per_kg: Any,
) -> tuple[float, float]:
    """
    Calculate daily kg and cost of one feed within a diet.

    Formula: kg = (percentage / 100) × daily_kg, cost = kg × cost_per_kg

    Returns:
        Tuple of (kg_per_day, cost_per_day) at full precision
    """
    kg = (to_number_or_zero(percentage_in_diet) / 100) * daily_kg
    return kg, kg * to_number_or_zero(cost_per_kg)


def calculate_daily_feed_cost(animals: list[dict], components: list[dict]) -> dict:
    """
    Build the daily feed cost report.

    Args:
        animals: Rows with animal_id, animal_name, diet_id, diet_name,
            ration_size_kg, feeding_frequency and total_ration_size_kg
        components: Rows with diet_id, feed_id, feed_name,
            percentage_in_diet and cost_per_kg

    Returns:
        Dict with perAnimal, perFeed and totalCostPerDay
    """
    components_by_diet = group_by(components, "diet_id")

    per_animal = []
    per_feed_totals: dict[Hashable, dict] = {}
    grand_total = 0.0

    for animal in animals:
        diet_id = animal.get("diet_id")
        if diet_id is None:
            continue

        daily_kg, basis = calculate_daily_ration(
            animal.get("total_ration_size_kg"),
            animal.get("ration_size_kg"),
            animal.get("feeding_frequency"),
        )

        breakdown = []
        animal_total = 0.0
        for comp in components_by_diet.get(diet_id, []):
            kg, cost = calculate_feed_component_cost(
                comp.get("percentage_in_diet"), daily_kg, comp.get("cost_per_kg")
            )

            feed_id = comp.get("feed_id")
            totals = per_feed_totals.setdefault(feed_id, {
                "feed_name": comp.get("feed_name"),
                "kg_per_day": 0.0,
                "cost_per_day": 0.0,
            })
            totals["kg_per_day"] += kg
            totals["cost_per_day"] += cost

            animal_total += cost
            grand_total += cost

            breakdown.append({
                "feed_id": feed_id,
                "feed_name": comp.get("feed_name"),
                "percentage_in_diet": to_number_or_zero(comp.get("percentage_in_diet")),
                "kg_per_day": round_figure(kg),
                "cost_per_day": round_figure(cost),
            })

        per_animal.append({
            "animal_id": animal.get("animal_id"),
            "animal_name": animal.get("animal_name"),
            "diet_id": diet_id,
            "diet_name": animal.get("diet_name"),
            "daily_kg": round_figure(daily_kg),
            "daily_kg_basis": basis,
            "feed_components": breakdown,
            "total_cost_per_day": round_figure(animal_total),
        })

    per_feed = [
        {
            "feed_id": feed_id,
            "feed_name": totals["feed_name"],
            "kg_per_day": round_figure(totals["kg_per_day"]),
            "cost_per_day": round_figure(totals["cost_per_day"]),
        }
        for feed_id, totals in sorted(per_feed_totals.items(), key=lambda item: _id_sort_key(item[0]))
    ]

    return {
        "perAnimal": per_animal,
        "perFeed": per_feed,
        "totalCostPerDay": round_figure(grand_total),
    }


# =============================================================================
# Diet Health Score
# =============================================================================

def calculate_weighted_nutrients(
    components: list[dict],
    feed_nutrition: dict[Hashable, dict],
) -> WeightedNutrients:
    """
    Sum percentage-weighted nutrient values over a diet's components.

    Formula: nutrient_diet = Σ (percentage_i / 100) × nutrient_i

    Components whose feed is missing from feed_nutrition are skipped.
    """
    totals = WeightedNutrients()

    for comp in components:
        nutrition = feed_nutrition.get(comp.get("feed_id"))
        if nutrition is None:
            continue
        share = to_number_or_zero(comp.get("percentage_in_diet")) / 100
        totals.protein_percentage += to_number_or_zero(nutrition.get("protein_percentage")) * share
        totals.fat_percentage += to_number_or_zero(nutrition.get("fat_percentage")) * share
        totals.fiber_percentage += to_number_or_zero(nutrition.get("fiber_percentage")) * share
        totals.calcium_mg_per_kg += to_number_or_zero(nutrition.get("calcium_mg_per_kg")) * share
        totals.calories_per_kg += to_number_or_zero(nutrition.get("calories_per_kg")) * share

    return totals


def calculate_raw_health_score(
    nutrients: WeightedNutrients,
    weights: HealthScoreWeights = DEFAULT_HEALTH_WEIGHTS,
) -> float:
    """Combine weighted nutrient totals into an unbounded raw score."""
    return (
        weights.protein * nutrients.protein_percentage
        + weights.fat * nutrients.fat_percentage
        + weights.fiber * nutrients.fiber_percentage
        + weights.calcium * nutrients.calcium_mg_per_kg
        + weights.calories * nutrients.calories_per_kg
    )


def calculate_health_score(
    nutrients: WeightedNutrients,
    weights: HealthScoreWeights = DEFAULT_HEALTH_WEIGHTS,
) -> float:
    """Raw score clamped into [0, 100]."""
    raw = calculate_raw_health_score(nutrients, weights)
    return min(max(raw, HEALTH_SCORE_MIN), HEALTH_SCORE_MAX)


def estimate_weight_gain(health_score: float) -> str:
    """Display estimate of weekly weight gain, up to 2 kg/week at score 100."""
    gain = (health_score / 100) * MAX_WEIGHT_GAIN_KG_PER_WEEK
    return f"{gain:.1f} kg/week"


def estimate_feed_efficiency(health_score: float) -> str:
    """Display estimate of feed consumed per kg gained. Lower is better."""
    efficiency = BASE_FEED_EFFICIENCY + (100 - health_score) / 100
    return f"{efficiency:.1f}"


def calculate_diet_health(
    diets: list[dict],
    components: list[dict],
    feed_nutrition: list[dict],
    weights: Optional[HealthScoreWeights] = None,
) -> dict:
    """
    Build the diet health report.

    Args:
        diets: Rows with diet_id, diet_name and animal_count
        components: Rows with diet_id, feed_id and percentage_in_diet
        feed_nutrition: Rows with feed_id and the five nutrient columns
        weights: Score coefficients, defaults to DEFAULT_HEALTH_WEIGHTS

    Returns:
        Dict with overview and per-diet results
    """
    weights = weights or DEFAULT_HEALTH_WEIGHTS
    nutrition_by_feed = {row.get("feed_id"): row for row in feed_nutrition}
    components_by_diet = group_by(components, "diet_id")

    results = []
    total_animals = 0
    score_sum = 0.0

    for diet in diets:
        nutrients = calculate_weighted_nutrients(
            components_by_diet.get(diet.get("diet_id"), []), nutrition_by_feed
        )
        score = calculate_health_score(nutrients, weights)
        animal_count = int(to_number_or_zero(diet.get("animal_count")))

        results.append({
            "diet_id": diet.get("diet_id"),
            "diet_name": diet.get("diet_name"),
            "animal_count": animal_count,
            "health_score": round_figure(score, 1),
            "alert_count": DEFAULT_ALERT_COUNT,
            "alert_level": DEFAULT_ALERT_LEVEL,
            "weight_gain": estimate_weight_gain(score),
            "feed_efficiency": estimate_feed_efficiency(score),
        })

        total_animals += animal_count
        score_sum += score

    return {
        "overview": {
            "totalAnimals": total_animals,
            "averageHealthScore": score_sum / max(len(results), 1),
            "totalDiets": len(results),
        },
        "diets": results,
    }
