"""Estimation inputs — one immutable snapshot per fee computation."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from fee_estimator.config.methods import (
    CardSubtype,
    FraudTier,
    PlatformFeature,
    StablecoinGateway,
    StablecoinNetwork,
)
from fee_estimator.config.mix import MethodMix


class StablecoinConfig(BaseModel):
    """Settlement options.  Only priced when the mix gives stablecoins a share."""

    model_config = ConfigDict(frozen=True)

    gateway: StablecoinGateway = Field(default=StablecoinGateway.PRIMARY, description="Processing gateway")
    network: StablecoinNetwork = Field(
        default=StablecoinNetwork.LOW_COST,
        description="'low_cost' chains (e.g. Tron, Solana) or 'standard' (e.g. Ethereum)",
    )
    requires_fiat_conversion: bool = Field(default=True, description="Convert received stablecoins to fiat")


class PlatformFeatures(BaseModel):
    """Optional add-on toggles; assumed volume fractions live in ``PricingPolicy``."""

    model_config = ConfigDict(frozen=True)

    terminal_enabled: bool = Field(default=False, description="In-person payments")
    ach_enabled: bool = Field(
        default=False,
        description="ACH direct debit on an assumed share of volume. Single-rate variant only; "
                    "with an explicit method mix ACH volume comes from the mix.",
    )
    billing_enabled: bool = Field(default=False, description="Billing & subscriptions")
    connect_enabled: bool = Field(default=False, description="Platform / marketplace payouts")
    link_enabled: bool = Field(default=False, description="One-click checkout")
    wallets_enabled: bool = Field(default=False, description="Digital wallets")

    def is_enabled(self, feature: PlatformFeature) -> bool:
        return getattr(self, f"{feature.value}_enabled")


class Inputs(BaseModel):
    """Complete input bundle for one fee estimate."""

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    monthly_volume: float = Field(default=100_000.0, ge=0, description="Dollar volume processed per month")
    avg_transaction_size: float = Field(default=50.0, gt=0, description="Average dollars per transaction")
    method_mix: MethodMix | None = Field(
        default_factory=MethodMix,
        description="Share of volume per payment method. None = single-rate variant: "
                    "all volume priced as cards of ``card_subtype``.",
    )
    card_subtype: CardSubtype = Field(
        default=CardSubtype.DOMESTIC,
        description="Card rate table for the single-rate variant",
    )

    # --- Cross-cutting features ---
    fraud_protection_enabled: bool = Field(default=True, description="Screen card transactions for fraud")
    fraud_tier: FraudTier = Field(default=FraudTier.STANDARD, description="Fraud screening product")
    instant_payouts_enabled: bool = Field(default=False, description="Daily instant payouts")
    dispute_rate_percent: float = Field(
        default=0.1, ge=0, le=100,
        description="Share of card transactions disputed (%)",
    )

    stablecoin: StablecoinConfig = Field(default_factory=StablecoinConfig)
    platform: PlatformFeatures = Field(default_factory=PlatformFeatures)
