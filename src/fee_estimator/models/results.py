"""Result types — the contract between engine, API, narrative and dashboard.

A ``FeeReport`` is fully derived from one ``Inputs`` snapshot and one rate
table; it has no identity beyond the call that produced it.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

from fee_estimator.config.methods import PaymentMethod


class FeeCategory(str, Enum):
    """Breakdown line items, declared in the order the engine evaluates them."""

    DOMESTIC_CARDS = "domestic_cards"
    INTERNATIONAL_CARDS = "international_cards"
    CURRENCY_CONVERSION = "currency_conversion"
    ACH = "ach"
    STABLECOIN_GATEWAY = "stablecoin_gateway"
    STABLECOIN_NETWORK = "stablecoin_network"
    STABLECOIN_CONVERSION = "stablecoin_conversion"
    TERMINAL = "terminal"
    BILLING = "billing"
    CONNECT = "connect"
    LINK = "link"
    WALLETS = "wallets"
    FRAUD_PROTECTION = "fraud_protection"
    DISPUTES = "disputes"
    INSTANT_PAYOUTS = "instant_payouts"

    @property
    def label(self) -> str:
        return CATEGORY_LABELS[self]


CATEGORY_LABELS: dict[FeeCategory, str] = {
    FeeCategory.DOMESTIC_CARDS: "Domestic cards",
    FeeCategory.INTERNATIONAL_CARDS: "International cards",
    FeeCategory.CURRENCY_CONVERSION: "Currency conversion",
    FeeCategory.ACH: "ACH processing",
    FeeCategory.STABLECOIN_GATEWAY: "Stablecoin gateway",
    FeeCategory.STABLECOIN_NETWORK: "Stablecoin network",
    FeeCategory.STABLECOIN_CONVERSION: "Stablecoin conversion",
    FeeCategory.TERMINAL: "Terminal (in-person)",
    FeeCategory.BILLING: "Billing & subscriptions",
    FeeCategory.CONNECT: "Connect (platform)",
    FeeCategory.LINK: "Link",
    FeeCategory.WALLETS: "Digital wallets",
    FeeCategory.FRAUD_PROTECTION: "Fraud protection",
    FeeCategory.DISPUTES: "Disputes",
    FeeCategory.INSTANT_PAYOUTS: "Instant payouts",
}

METHOD_CATEGORIES: dict[PaymentMethod, tuple[FeeCategory, ...]] = {
    PaymentMethod.DOMESTIC_CARDS: (FeeCategory.DOMESTIC_CARDS,),
    PaymentMethod.INTERNATIONAL_CARDS: (
        FeeCategory.INTERNATIONAL_CARDS,
        FeeCategory.CURRENCY_CONVERSION,
    ),
    PaymentMethod.ACH: (FeeCategory.ACH,),
    PaymentMethod.STABLECOINS: (
        FeeCategory.STABLECOIN_GATEWAY,
        FeeCategory.STABLECOIN_NETWORK,
        FeeCategory.STABLECOIN_CONVERSION,
    ),
}
"""Explicit method → category association; categories absent here are cross-cutting."""


class SavingsOpportunity(BaseModel):
    """Advisory hint.  Never deducted from ``total_fees``."""

    kind: str
    """'volume' | 'payment_method' | 'international' | 'stablecoin'."""

    message: str


class FeeReport(BaseModel):
    """Monthly fee estimate for one ``Inputs`` snapshot."""

    total_fees: float
    """Sum of every breakdown entry ($/month)."""

    effective_rate_percent: float
    """total_fees / monthly_volume × 100.  Defined as 0 when volume is 0."""

    transaction_count: int
    """round(monthly_volume / avg_transaction_size), halves rounded up."""

    card_transaction_count: float
    """Domestic + international card transactions; basis for fraud and dispute fees."""

    breakdown: dict[FeeCategory, float] = Field(default_factory=dict)
    """Positive contributions only, in evaluation order."""

    net_revenue: float
    """monthly_volume − total_fees."""

    stablecoin_savings: float = 0.0
    """Counterfactual: domestic-card cost of the stablecoin volume minus its actual cost, floored at 0."""

    per_method_volume: dict[PaymentMethod, float] = Field(default_factory=dict)
    """monthly_volume × share / 100 per method (single-rate variant: card subtype + assumed ACH)."""

    savings_opportunities: list[SavingsOpportunity] = Field(default_factory=list)

    rate_table_version: str = ""

    def method_fees(self, method: PaymentMethod) -> float:
        """Total of the breakdown categories attributed to ``method``."""
        return round(sum(self.breakdown.get(c, 0.0) for c in METHOD_CATEGORIES[method]), 4)
