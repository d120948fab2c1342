"""Cross-cutting fees — fraud screening, disputes, instant payouts, platform add-ons.

These are priced from totals rather than from one method's allocation:
fraud and disputes from card transaction counts, payouts from the whole
monthly volume, add-ons from an assumed share of it.
"""

from __future__ import annotations

from fee_estimator.config.inputs import Inputs
from fee_estimator.config.methods import PlatformFeature
from fee_estimator.config.policy import PricingPolicy
from fee_estimator.config.rates import RateTable
from fee_estimator.engine.allocation import transactions_for
from fee_estimator.engine.methods import FeeLines, percentage_plus_fixed
from fee_estimator.models.results import FeeCategory

PLATFORM_CATEGORIES: dict[PlatformFeature, FeeCategory] = {
    PlatformFeature.TERMINAL: FeeCategory.TERMINAL,
    PlatformFeature.BILLING: FeeCategory.BILLING,
    PlatformFeature.CONNECT: FeeCategory.CONNECT,
    PlatformFeature.LINK: FeeCategory.LINK,
    PlatformFeature.WALLETS: FeeCategory.WALLETS,
}


def compute_platform_fees(inputs: Inputs, rates: RateTable, policy: PricingPolicy) -> FeeLines:
    """Enabled add-ons, each on its assumed fraction of volume.

    Nothing is charged at zero volume, including Connect's per-account fee.
    """
    if inputs.monthly_volume <= 0:
        return []

    lines: FeeLines = []
    for feature, category in PLATFORM_CATEGORIES.items():
        if not inputs.platform.is_enabled(feature):
            continue
        rate = rates.platform.rate_for(feature)
        feature_volume = inputs.monthly_volume * policy.volume_fraction(feature)
        transactions = transactions_for(feature_volume, inputs.avg_transaction_size)
        fee = (
            percentage_plus_fixed(feature_volume, transactions, rate)
            + policy.billable_units(feature) * rate.fixed_fee_per_unit
        )
        lines.append((category, fee))
    return lines


def compute_fraud_fee(card_transactions: float, inputs: Inputs, rates: RateTable) -> float:
    if not inputs.fraud_protection_enabled:
        return 0.0
    return card_transactions * rates.fraud.rate_for(inputs.fraud_tier)


def compute_dispute_fee(card_transactions: float, inputs: Inputs, rates: RateTable) -> float:
    """Disputes hit card volume only, whatever the rest of the mix is."""
    dispute_count = card_transactions * (inputs.dispute_rate_percent / 100.0)
    return dispute_count * rates.dispute.fee


def compute_instant_payout_fee(inputs: Inputs, rates: RateTable, policy: PricingPolicy) -> float:
    """max(percentage of volume, per-payout minimum × assumed payouts per month)."""
    if not inputs.instant_payouts_enabled or inputs.monthly_volume <= 0:
        return 0.0
    payout = rates.instant_payout
    return max(
        inputs.monthly_volume * payout.percentage_rate / 100.0,
        payout.minimum * policy.payouts_per_month,
    )
