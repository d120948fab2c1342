"""Mix comparison — price the same merchant under alternative method mixes."""

from __future__ import annotations

from dataclasses import dataclass

from fee_estimator.config.inputs import Inputs
from fee_estimator.config.mix import MethodMix
from fee_estimator.engine.fee_engine import FeeEngine
from fee_estimator.models.results import FeeReport


DEFAULT_MIX_ALTERNATIVES: dict[str, MethodMix] = {
    "cards_only": MethodMix(domestic_cards=90, international_cards=10, ach=0, stablecoins=0),
    "ach_heavy": MethodMix(domestic_cards=50, international_cards=10, ach=40, stablecoins=0),
    "stablecoin_heavy": MethodMix(domestic_cards=50, international_cards=10, ach=10, stablecoins=30),
}


@dataclass(frozen=True)
class MixComparison:
    """One priced alternative."""

    name: str
    mix: MethodMix
    report: FeeReport

    @property
    def total_fees(self) -> float:
        return self.report.total_fees

    @property
    def effective_rate_percent(self) -> float:
        return self.report.effective_rate_percent


def compare_mixes(
    engine: FeeEngine,
    inputs: Inputs,
    mixes: dict[str, MethodMix],
) -> list[MixComparison]:
    """Price ``inputs`` once per named mix, cheapest effective rate first.

    Everything except the mix is held fixed.  Ties keep the caller's order.
    """
    comparisons = [
        MixComparison(
            name=name,
            mix=mix,
            report=engine.compute(inputs.model_copy(update={"method_mix": mix})),
        )
        for name, mix in mixes.items()
    ]
    comparisons.sort(key=lambda c: c.effective_rate_percent)
    return comparisons
