"""Savings — stablecoin counterfactual and advisory opportunities."""

from __future__ import annotations

from fee_estimator.config.inputs import Inputs
from fee_estimator.config.methods import PaymentMethod
from fee_estimator.config.policy import PricingPolicy
from fee_estimator.config.rates import RateTable
from fee_estimator.engine.methods import equivalent_domestic_card_fee
from fee_estimator.models.results import SavingsOpportunity


def compute_stablecoin_savings(
    stablecoin_volume: float,
    actual_stablecoin_fee: float,
    avg_transaction_size: float,
    rates: RateTable,
) -> float:
    """Domestic-card cost of the stablecoin volume minus what it actually cost.

    A comparison, not a deduction; floored at 0.
    """
    if stablecoin_volume <= 0:
        return 0.0
    card_equivalent = equivalent_domestic_card_fee(stablecoin_volume, avg_transaction_size, rates)
    return max(0.0, card_equivalent - actual_stablecoin_fee)


def find_savings_opportunities(
    inputs: Inputs,
    volumes: dict[PaymentMethod, float],
    stablecoin_savings: float,
    policy: PricingPolicy,
) -> list[SavingsOpportunity]:
    opportunities: list[SavingsOpportunity] = []

    if inputs.monthly_volume > policy.enterprise_volume_threshold:
        opportunities.append(SavingsOpportunity(
            kind="volume",
            message="Eligible for enterprise pricing - potential 15-25% savings",
        ))

    if volumes[PaymentMethod.ACH] <= 0 and inputs.avg_transaction_size > policy.ach_suggestion_min_transaction:
        opportunities.append(SavingsOpportunity(
            kind="payment_method",
            message="Consider ACH for large transactions - save up to 2.1%",
        ))

    if volumes[PaymentMethod.INTERNATIONAL_CARDS] > 0:
        opportunities.append(SavingsOpportunity(
            kind="international",
            message="Use local payment methods to reduce international fees",
        ))

    if stablecoin_savings > 0:
        opportunities.append(SavingsOpportunity(
            kind="stablecoin",
            message=f"Stablecoin settlement saves ${stablecoin_savings:,.2f}/month versus domestic cards",
        ))

    return opportunities
