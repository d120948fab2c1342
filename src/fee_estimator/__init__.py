"""Payment fee estimator — monthly processing-fee estimates for a payment-method mix."""

from fee_estimator.config import Inputs, MethodMix, PaymentMethod, PricingPolicy, RateTable
from fee_estimator.engine import FeeEngine, set_method_percentage
from fee_estimator.errors import ConfigurationError, FeeEstimatorError, InvalidInputError
from fee_estimator.models import FeeCategory, FeeReport

__version__ = "1.0.0"

__all__ = [
    "Inputs",
    "MethodMix",
    "PaymentMethod",
    "PricingPolicy",
    "RateTable",
    "FeeEngine",
    "set_method_percentage",
    "ConfigurationError",
    "FeeEstimatorError",
    "InvalidInputError",
    "FeeCategory",
    "FeeReport",
]
