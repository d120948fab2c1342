"""Rate table — versioned reference pricing, injected into the engine.

Defaults reproduce the standard published schedule (USD).  Alternate
schedules are loaded from JSON with ``load_rate_table`` so tests and
deployments can substitute their own pricing without touching code.

Every lookup that depends on an input enum goes through an accessor that
raises ``ConfigurationError`` when the schedule has no entry for it.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from fee_estimator.config.methods import (
    FraudTier,
    PlatformFeature,
    StablecoinGateway,
    StablecoinNetwork,
)
from fee_estimator.errors import ConfigurationError


class ProcessingRate(BaseModel):
    """Percentage + fixed-per-transaction price, optionally capped per transaction."""

    model_config = ConfigDict(frozen=True)

    percentage_rate: float = Field(default=0.0, ge=0, description="Percent of volume (2.9 = 2.9%)")
    fixed_fee_per_transaction: float = Field(default=0.0, ge=0, description="Flat fee per transaction ($)")
    cap: float | None = Field(
        default=None, ge=0,
        description="Maximum percentage fee per transaction ($). None = uncapped.",
    )


class CardRates(BaseModel):
    model_config = ConfigDict(frozen=True)

    domestic: ProcessingRate = Field(
        default_factory=lambda: ProcessingRate(percentage_rate=2.9, fixed_fee_per_transaction=0.30),
    )
    international: ProcessingRate = Field(
        default_factory=lambda: ProcessingRate(percentage_rate=3.4, fixed_fee_per_transaction=0.30),
    )
    currency_conversion_rate: float = Field(
        default=1.0, ge=0,
        description="Surcharge (%) on the converted share of international card volume",
    )


def _default_ach() -> ProcessingRate:
    return ProcessingRate(percentage_rate=0.8, fixed_fee_per_transaction=0.0, cap=5.00)


class StablecoinRates(BaseModel):
    model_config = ConfigDict(frozen=True)

    gateways: dict[StablecoinGateway, float] = Field(
        default_factory=lambda: {
            StablecoinGateway.PRIMARY: 1.5,
            StablecoinGateway.ALTERNATIVE: 0.9,
        },
        description="Gateway fee (%) of stablecoin volume, per gateway",
    )
    network_fees: dict[StablecoinNetwork, float] = Field(
        default_factory=lambda: {
            StablecoinNetwork.LOW_COST: 0.05,
            StablecoinNetwork.STANDARD: 0.10,
        },
        description="On-chain network fee per transaction ($), per network class",
    )
    conversion_rate: float = Field(default=0.5, ge=0, description="Fiat conversion fee (%)")

    def gateway_rate(self, gateway: StablecoinGateway) -> float:
        try:
            return self.gateways[gateway]
        except KeyError:
            raise ConfigurationError(f"rate table has no stablecoin gateway '{gateway.value}'") from None

    def network_fee(self, network: StablecoinNetwork) -> float:
        try:
            return self.network_fees[network]
        except KeyError:
            raise ConfigurationError(f"rate table has no stablecoin network '{network.value}'") from None


class InstantPayoutRates(BaseModel):
    model_config = ConfigDict(frozen=True)

    percentage_rate: float = Field(default=1.5, ge=0, description="Percent of payout volume")
    minimum: float = Field(default=0.50, ge=0, description="Minimum fee per payout ($)")


class DisputeRates(BaseModel):
    model_config = ConfigDict(frozen=True)

    fee: float = Field(default=15.00, ge=0, description="Flat fee per dispute ($)")


class FraudRates(BaseModel):
    model_config = ConfigDict(frozen=True)

    per_transaction: dict[FraudTier, float] = Field(
        default_factory=lambda: {
            FraudTier.STANDARD: 0.05,
            FraudTier.FRAUD_TEAMS: 0.07,
        },
        description="Screening fee per card transaction ($), per tier",
    )

    def rate_for(self, tier: FraudTier) -> float:
        try:
            return self.per_transaction[tier]
        except KeyError:
            raise ConfigurationError(f"rate table has no fraud tier '{tier.value}'") from None


class PlatformFeatureRate(ProcessingRate):
    """Add-on price; ``fixed_fee_per_unit`` is charged per monthly unit (e.g. active account)."""

    fixed_fee_per_unit: float = Field(default=0.0, ge=0, description="Flat monthly fee per unit ($)")


class PlatformRates(BaseModel):
    model_config = ConfigDict(frozen=True)

    features: dict[PlatformFeature, PlatformFeatureRate] = Field(
        default_factory=lambda: {
            PlatformFeature.TERMINAL: PlatformFeatureRate(percentage_rate=2.7, fixed_fee_per_transaction=0.05),
            PlatformFeature.BILLING: PlatformFeatureRate(percentage_rate=0.5),
            PlatformFeature.CONNECT: PlatformFeatureRate(percentage_rate=0.25, fixed_fee_per_unit=2.00),
            PlatformFeature.LINK: PlatformFeatureRate(percentage_rate=2.9, fixed_fee_per_transaction=0.30),
            PlatformFeature.WALLETS: PlatformFeatureRate(percentage_rate=2.9, fixed_fee_per_transaction=0.30),
        },
    )

    def rate_for(self, feature: PlatformFeature) -> PlatformFeatureRate:
        try:
            return self.features[feature]
        except KeyError:
            raise ConfigurationError(f"rate table has no platform feature '{feature.value}'") from None


class RateTable(BaseModel):
    """Complete pricing schedule.  Process-wide constant; never mutated."""

    model_config = ConfigDict(frozen=True)

    version: str = Field(default="standard-2024", description="Schedule identifier, echoed in every report")
    currency: str = Field(default="USD", description="Currency all fees are quoted in")

    card: CardRates = Field(default_factory=CardRates)
    ach: ProcessingRate = Field(default_factory=_default_ach)
    stablecoin: StablecoinRates = Field(default_factory=StablecoinRates)
    instant_payout: InstantPayoutRates = Field(default_factory=InstantPayoutRates)
    dispute: DisputeRates = Field(default_factory=DisputeRates)
    fraud: FraudRates = Field(default_factory=FraudRates)
    platform: PlatformRates = Field(default_factory=PlatformRates)


STANDARD_RATES_PATH = Path(__file__).resolve().parent.parent / "data" / "standard_rates.json"


def load_rate_table(path: str | Path | None = None) -> RateTable:
    """Load a rate schedule from JSON.  ``None`` loads the bundled standard schedule."""
    source = Path(path) if path is not None else STANDARD_RATES_PATH
    try:
        raw = source.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"cannot read rate table {source}: {exc}") from exc
    try:
        return RateTable.model_validate_json(raw)
    except ValidationError as exc:
        raise ConfigurationError(f"malformed rate table {source}: {exc}") from exc
