"""Shared test fixtures — standard rates and the reference merchant."""

from __future__ import annotations

import pytest

from fee_estimator.config import (
    Inputs,
    MethodMix,
    PlatformFeatures,
    PricingPolicy,
    RateTable,
    StablecoinConfig,
    StablecoinGateway,
    StablecoinNetwork,
)
from fee_estimator.engine.fee_engine import FeeEngine


@pytest.fixture
def rates() -> RateTable:
    return RateTable()


@pytest.fixture
def policy() -> PricingPolicy:
    return PricingPolicy()


@pytest.fixture
def engine(rates: RateTable, policy: PricingPolicy) -> FeeEngine:
    return FeeEngine(rates, policy)


@pytest.fixture
def mix() -> MethodMix:
    return MethodMix(domestic_cards=70, international_cards=10, ach=10, stablecoins=10)


@pytest.fixture
def stablecoin() -> StablecoinConfig:
    return StablecoinConfig(
        gateway=StablecoinGateway.PRIMARY,
        network=StablecoinNetwork.LOW_COST,
        requires_fiat_conversion=True,
    )


@pytest.fixture
def inputs(mix: MethodMix, stablecoin: StablecoinConfig) -> Inputs:
    """$100k/month at $50 average, 70/10/10/10 mix, fraud on, 0.1% disputes."""
    return Inputs(
        monthly_volume=100_000,
        avg_transaction_size=50,
        method_mix=mix,
        fraud_protection_enabled=True,
        dispute_rate_percent=0.1,
        instant_payouts_enabled=False,
        stablecoin=stablecoin,
    )


@pytest.fixture
def single_rate_inputs() -> Inputs:
    """No mix: the whole volume is domestic cards."""
    return Inputs(
        monthly_volume=100_000,
        avg_transaction_size=50,
        method_mix=None,
        fraud_protection_enabled=True,
        dispute_rate_percent=0.0,
        platform=PlatformFeatures(),
    )
