"""Fee engine — ``Inputs`` snapshot → ``FeeReport``.

Single pass, no I/O, no shared mutable state.  The engine only holds the
rate table and pricing policy it was built with, both frozen, so one
instance can serve any number of concurrent callers.

Evaluation order (also the breakdown order):
  domestic cards → international cards (+ conversion) → ACH
  → stablecoin gateway / network / conversion → platform add-ons
  → fraud protection → disputes → instant payouts
"""

from __future__ import annotations

import logging
import math

from fee_estimator.config.inputs import Inputs
from fee_estimator.config.methods import CARD_METHODS, PaymentMethod
from fee_estimator.config.policy import PricingPolicy
from fee_estimator.config.rates import RateTable
from fee_estimator.engine.allocation import (
    allocate_volume,
    card_transaction_count,
    round_half_up,
)
from fee_estimator.engine.features import (
    compute_dispute_fee,
    compute_fraud_fee,
    compute_instant_payout_fee,
    compute_platform_fees,
)
from fee_estimator.engine.methods import (
    FeeLines,
    compute_ach_fees,
    compute_card_fees,
    compute_stablecoin_fees,
)
from fee_estimator.engine.savings import compute_stablecoin_savings, find_savings_opportunities
from fee_estimator.errors import InvalidInputError
from fee_estimator.models.results import FeeCategory, FeeReport

logger = logging.getLogger(__name__)


def validate_inputs(inputs: Inputs) -> None:
    """Guard the divisor and the volume.

    Field constraints already reject these on construction; this catches
    snapshots built with ``model_copy(update=...)`` or ``model_construct``.
    """
    for name in ("monthly_volume", "avg_transaction_size"):
        value = getattr(inputs, name)
        if not math.isfinite(value):
            raise InvalidInputError(f"{name} must be finite, got {value}")
    if not inputs.avg_transaction_size > 0:
        raise InvalidInputError(
            f"avg_transaction_size must be positive, got {inputs.avg_transaction_size}"
        )
    if inputs.monthly_volume < 0:
        raise InvalidInputError(f"monthly_volume must be non-negative, got {inputs.monthly_volume}")


class FeeEngine:
    """Prices ``Inputs`` against an injected rate table and pricing policy."""

    def __init__(self, rates: RateTable | None = None, policy: PricingPolicy | None = None) -> None:
        self.rates = rates if rates is not None else RateTable()
        self.policy = policy if policy is not None else PricingPolicy()

    def compute(self, inputs: Inputs) -> FeeReport:
        """Compute the monthly fee estimate.

        Raises ``InvalidInputError`` when volume or average size is not finite,
        the average size is not positive, or volume is negative.  Raises
        ``ConfigurationError`` when the rate table lacks an entry the inputs
        select.
        """
        validate_inputs(inputs)

        rates = self.rates
        policy = self.policy
        avg_size = inputs.avg_transaction_size

        volumes = allocate_volume(inputs, policy)
        breakdown: dict[FeeCategory, float] = {}

        # ── Per-method fees ───────────────────────────────────────────
        for method in CARD_METHODS:
            if volumes[method] > 0:
                _accumulate(breakdown, compute_card_fees(method, volumes[method], avg_size, rates, policy))

        if volumes[PaymentMethod.ACH] > 0:
            _accumulate(breakdown, compute_ach_fees(volumes[PaymentMethod.ACH], avg_size, rates))

        stablecoin_savings = 0.0
        stablecoin_volume = volumes[PaymentMethod.STABLECOINS]
        if stablecoin_volume > 0:
            stablecoin_lines = compute_stablecoin_fees(stablecoin_volume, avg_size, inputs.stablecoin, rates)
            _accumulate(breakdown, stablecoin_lines)
            stablecoin_savings = compute_stablecoin_savings(
                stablecoin_volume,
                sum(amount for _, amount in stablecoin_lines),
                avg_size,
                rates,
            )

        # ── Platform add-ons ─────────────────────────────────────────
        _accumulate(breakdown, compute_platform_fees(inputs, rates, policy))

        # ── Cross-cutting features ───────────────────────────────────
        card_transactions = card_transaction_count(volumes, avg_size)
        _accumulate(breakdown, [
            (FeeCategory.FRAUD_PROTECTION, compute_fraud_fee(card_transactions, inputs, rates)),
            (FeeCategory.DISPUTES, compute_dispute_fee(card_transactions, inputs, rates)),
            (FeeCategory.INSTANT_PAYOUTS, compute_instant_payout_fee(inputs, rates, policy)),
        ])

        # ── Aggregation ──────────────────────────────────────────────
        # amounts below 0.00005 round away and are dropped
        breakdown = {c: r for c, amount in breakdown.items() if (r := round(amount, 4)) > 0}
        total_fees = round(sum(breakdown.values()), 4)
        volume = inputs.monthly_volume
        effective_rate = total_fees / volume * 100.0 if volume > 0 else 0.0

        opportunities = find_savings_opportunities(inputs, volumes, stablecoin_savings, policy)

        logger.debug(
            "priced %.2f volume: total_fees=%.4f effective_rate=%.4f%% categories=%d",
            volume, total_fees, effective_rate, len(breakdown),
        )

        return FeeReport(
            total_fees=total_fees,
            effective_rate_percent=round(effective_rate, 4),
            transaction_count=round_half_up(volume / avg_size),
            card_transaction_count=round(card_transactions, 4),
            breakdown=breakdown,
            net_revenue=round(volume - total_fees, 4),
            stablecoin_savings=round(stablecoin_savings, 4),
            per_method_volume={method: round(v, 4) for method, v in volumes.items()},
            savings_opportunities=opportunities,
            rate_table_version=rates.version,
        )


def _accumulate(breakdown: dict[FeeCategory, float], lines: FeeLines) -> None:
    """Add positive amounts; zero-volume categories never appear."""
    for category, amount in lines:
        if amount > 0:
            breakdown[category] = breakdown.get(category, 0.0) + amount


def compute(inputs: Inputs, rates: RateTable | None = None, policy: PricingPolicy | None = None) -> FeeReport:
    """Functional shortcut for ``FeeEngine(rates, policy).compute(inputs)``."""
    return FeeEngine(rates, policy).compute(inputs)
