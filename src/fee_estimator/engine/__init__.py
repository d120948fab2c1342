"""Engine — deterministic fee computation."""

from fee_estimator.engine.allocation import allocate_volume, set_method_percentage
from fee_estimator.engine.methods import compute_ach_fees, compute_card_fees, compute_stablecoin_fees
from fee_estimator.engine.features import (
    compute_dispute_fee,
    compute_fraud_fee,
    compute_instant_payout_fee,
    compute_platform_fees,
)
from fee_estimator.engine.savings import compute_stablecoin_savings, find_savings_opportunities
from fee_estimator.engine.fee_engine import FeeEngine, compute, validate_inputs

__all__ = [
    "allocate_volume",
    "set_method_percentage",
    "compute_ach_fees",
    "compute_card_fees",
    "compute_stablecoin_fees",
    "compute_dispute_fee",
    "compute_fraud_fee",
    "compute_instant_payout_fee",
    "compute_platform_fees",
    "compute_stablecoin_savings",
    "find_savings_opportunities",
    "FeeEngine",
    "compute",
    "validate_inputs",
]
