"""Result models — fee estimate output contracts."""

from fee_estimator.models.results import (
    CATEGORY_LABELS,
    METHOD_CATEGORIES,
    FeeCategory,
    FeeReport,
    SavingsOpportunity,
)

__all__ = [
    "CATEGORY_LABELS",
    "METHOD_CATEGORIES",
    "FeeCategory",
    "FeeReport",
    "SavingsOpportunity",
]
