"""Digital maturity aggregation engine.

Folds a survey answer map through a Taxonomy into per-category averages,
per-pillar averages and one overall average. Answers are on a 1-5 Likert
scale and are not normalised: a category value is the plain mean of the
answers present for it.

Aggregation is lenient. Missing or non-numeric answers are skipped when a
category mean is computed, a category with no numeric answers scores 0, and
that 0 still counts with full weight in its pillar average. Partial surveys
therefore render a degraded result instead of failing.

Rounding: category values are rounded to 2 decimals half away from zero,
applied to the shortest decimal representation of the float mean (3.335 ->
3.34). Pillar and overall averages are returned unrounded; callers that
serialise or display them use round_score() so every boundary rounds the same
way.

No imports from the API or adapter layers.
"""

import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from numbers import Real

from madurez_digital.core.taxonomy import Category, Taxonomy

# Answer values are Likert integers (or floats) for questions and plain
# strings for the identity fields.
AnswerValue = int | float | str
AnswerMap = Mapping[str, AnswerValue]

_TWO_PLACES = Decimal("0.01")


@dataclass(frozen=True)
class CategoryScore:
    """Average score for one category.

    Attributes:
        label: Category display label.
        value: Mean of the numeric answers present, rounded to 2 decimals.
            0.0 when no numeric answer is present.
    """

    label: str
    value: float


@dataclass(frozen=True)
class PillarScore:
    """Average score for one pillar.

    Attributes:
        name: Pillar identifier (e.g., 'Pilar1').
        label: Pillar display label (e.g., 'Estrategia').
        average: Unweighted mean of the category values.
        categories: Category scores in taxonomy order.
    """

    name: str
    label: str
    average: float
    categories: tuple[CategoryScore, ...]


def round_score(value: float) -> float:
    """Round a score to 2 decimals, half away from zero.

    Args:
        value: Score to round.

    Returns:
        The rounded score as a float.
    """
    # ROUND_HALF_UP in decimal rounds away from zero for negatives as well.
    return float(Decimal(repr(value)).quantize(_TWO_PLACES, rounding=ROUND_HALF_UP))


def _is_numeric(value: object) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool) and math.isfinite(value)


def compute_category_averages(
    answers: AnswerMap,
    categories: Sequence[Category],
) -> list[CategoryScore]:
    """Compute the mean answer for every category, in the given order.

    Args:
        answers: Question id -> answer value. Never mutated.
        categories: Ordered categories to score.

    Returns:
        One CategoryScore per category, same order as ``categories``.
    """
    scores: list[CategoryScore] = []
    for category in categories:
        values = [
            float(answers[qid])  # type: ignore[arg-type]
            for qid in category.question_ids
            if qid in answers and _is_numeric(answers[qid])
        ]
        if not values:
            scores.append(CategoryScore(label=category.label, value=0.0))
            continue
        scores.append(
            CategoryScore(label=category.label, value=round_score(sum(values) / len(values)))
        )
    return scores


def compute_pillar_scores(answers: AnswerMap, taxonomy: Taxonomy) -> list[PillarScore]:
    """Compute category scores and the pillar average for every pillar.

    Every category carries equal weight in its pillar, regardless of how many
    questions it has or how many of them were answered.

    Args:
        answers: Question id -> answer value. Never mutated.
        taxonomy: Taxonomy to fold the answers through.

    Returns:
        One PillarScore per pillar, in taxonomy order.
    """
    pillar_scores: list[PillarScore] = []
    for pillar in taxonomy:
        categories = compute_category_averages(answers, pillar.categories)
        average = sum(c.value for c in categories) / len(categories) if categories else 0.0
        pillar_scores.append(
            PillarScore(
                name=pillar.pillar_id,
                label=pillar.label,
                average=average,
                categories=tuple(categories),
            )
        )
    return pillar_scores


def compute_overall_average(pillar_scores: Sequence[PillarScore]) -> float:
    """Compute the equal-weighted mean of the pillar averages.

    Args:
        pillar_scores: Output of compute_pillar_scores().

    Returns:
        Overall average, or 0.0 for an empty sequence.
    """
    if not pillar_scores:
        return 0.0
    return sum(p.average for p in pillar_scores) / len(pillar_scores)
