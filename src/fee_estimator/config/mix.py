"""Payment-method mix — percentage of monthly volume per rail."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator

from fee_estimator.config.methods import PaymentMethod

# Float slack allowed on the 100% ceiling after proportional rescaling.
MIX_TOTAL_TOLERANCE = 1e-6


class MethodMix(BaseModel):
    """Share of ``monthly_volume`` (0–100 each) attributed to every payment method.

    The total may sit below 100 (a transient state the engine prices as-is,
    from the raw percentages) but never above it.
    """

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    domestic_cards: float = Field(default=70.0, ge=0, le=100, description="Domestic card share (%)")
    international_cards: float = Field(default=10.0, ge=0, le=100, description="International card share (%)")
    ach: float = Field(default=10.0, ge=0, le=100, description="ACH direct debit share (%)")
    stablecoins: float = Field(default=10.0, ge=0, le=100, description="Stablecoin share (%)")

    @model_validator(mode="after")
    def _total_at_most_100(self) -> "MethodMix":
        if self.total > 100.0 + MIX_TOTAL_TOLERANCE:
            raise ValueError(f"method mix totals {self.total:.4f}%, which exceeds 100%")
        return self

    @property
    def total(self) -> float:
        return self.domestic_cards + self.international_cards + self.ach + self.stablecoins

    def percentage(self, method: PaymentMethod) -> float:
        return getattr(self, method.value)

    def as_dict(self) -> dict[PaymentMethod, float]:
        return {method: self.percentage(method) for method in PaymentMethod}

    @classmethod
    def from_percentages(cls, percentages: dict[PaymentMethod, float]) -> "MethodMix":
        """Build a mix from a partial mapping; absent methods are 0%."""
        return cls(**{method.value: float(percentages.get(method, 0.0)) for method in PaymentMethod})
