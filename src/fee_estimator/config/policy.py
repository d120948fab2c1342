"""Pricing policy — fixed modelling assumptions, kept separate from rates.

These constants are simplifications rather than published prices: how much
international volume needs currency conversion, what share of volume runs
through each add-on, how often instant payouts happen.  They are explicit
configuration so an operator can tune them per merchant.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from fee_estimator.config.methods import PlatformFeature
from fee_estimator.errors import ConfigurationError


class PricingPolicy(BaseModel):
    """Assumed fractions and counts used where the inputs say nothing."""

    model_config = ConfigDict(frozen=True)

    # --- Cards ---
    international_conversion_fraction: float = Field(
        default=0.20, ge=0, le=1.0,
        description="Share of international card volume assumed to need currency conversion. "
                    "A modelling simplification, not user-configurable per request.",
    )

    # --- Instant payouts ---
    payouts_per_month: int = Field(
        default=30, ge=0,
        description="Assumed payouts per month (30 = daily). Drives the minimum-fee floor.",
    )

    # --- Single-rate variant ---
    ach_volume_fraction: float = Field(
        default=0.20, ge=0, le=1.0,
        description="Share of volume assumed to be ACH when ACH is toggled on "
                    "without an explicit method mix.",
    )

    # --- Platform add-ons ---
    terminal_volume_fraction: float = Field(
        default=0.30, ge=0, le=1.0,
        description="Share of volume assumed to be in-person (Terminal).",
    )
    billing_volume_fraction: float = Field(default=1.0, ge=0, le=1.0, description="Share of volume billed")
    connect_volume_fraction: float = Field(
        default=1.0, ge=0, le=1.0,
        description="Share of volume routed through connected accounts",
    )
    connect_active_accounts: int = Field(default=100, ge=0, description="Assumed active connected accounts")
    link_volume_fraction: float = Field(default=0.10, ge=0, le=1.0, description="Share of volume paid via Link")
    wallets_volume_fraction: float = Field(
        default=0.15, ge=0, le=1.0,
        description="Share of volume paid via digital wallets",
    )

    # --- Savings-opportunity thresholds ---
    enterprise_volume_threshold: float = Field(
        default=500_000.0, ge=0,
        description="Monthly volume above which enterprise pricing is suggested ($)",
    )
    ach_suggestion_min_transaction: float = Field(
        default=100.0, ge=0,
        description="Average transaction size above which ACH is suggested ($)",
    )

    def volume_fraction(self, feature: PlatformFeature) -> float:
        return {
            PlatformFeature.TERMINAL: self.terminal_volume_fraction,
            PlatformFeature.BILLING: self.billing_volume_fraction,
            PlatformFeature.CONNECT: self.connect_volume_fraction,
            PlatformFeature.LINK: self.link_volume_fraction,
            PlatformFeature.WALLETS: self.wallets_volume_fraction,
        }[feature]

    def billable_units(self, feature: PlatformFeature) -> int:
        """Monthly units charged ``fixed_fee_per_unit`` (only Connect has any)."""
        return self.connect_active_accounts if feature is PlatformFeature.CONNECT else 0


def load_pricing_policy(path: str | Path) -> PricingPolicy:
    """Load a policy override from JSON; missing keys keep their defaults."""
    source = Path(path)
    try:
        raw = source.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"cannot read pricing policy {source}: {exc}") from exc
    try:
        return PricingPolicy.model_validate_json(raw)
    except ValidationError as exc:
        raise ConfigurationError(f"malformed pricing policy {source}: {exc}") from exc
