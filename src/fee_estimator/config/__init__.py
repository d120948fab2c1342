"""Configuration models — inputs, rate table, pricing policy."""

from fee_estimator.config.methods import (
    CARD_METHODS,
    CardSubtype,
    FraudTier,
    PaymentMethod,
    PlatformFeature,
    StablecoinGateway,
    StablecoinNetwork,
)
from fee_estimator.config.mix import MethodMix
from fee_estimator.config.inputs import Inputs, PlatformFeatures, StablecoinConfig
from fee_estimator.config.policy import PricingPolicy, load_pricing_policy
from fee_estimator.config.rates import (
    CardRates,
    PlatformFeatureRate,
    ProcessingRate,
    RateTable,
    StablecoinRates,
    load_rate_table,
)

__all__ = [
    "CARD_METHODS",
    "CardSubtype",
    "FraudTier",
    "PaymentMethod",
    "PlatformFeature",
    "StablecoinGateway",
    "StablecoinNetwork",
    "MethodMix",
    "Inputs",
    "PlatformFeatures",
    "StablecoinConfig",
    "PricingPolicy",
    "load_pricing_policy",
    "CardRates",
    "PlatformFeatureRate",
    "ProcessingRate",
    "RateTable",
    "StablecoinRates",
    "load_rate_table",
]
