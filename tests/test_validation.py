"""Pydantic validation tests — ensure invalid inputs are rejected.

Covers every input model for boundary violations: negative values,
out-of-range percentages, a mix above 100%, zero where positive is required.
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from fee_estimator.config import (
    Inputs,
    MethodMix,
    PaymentMethod,
    PricingPolicy,
    ProcessingRate,
    StablecoinConfig,
)


# ═══════════════════════════════════════════════════════════════════════════
# MethodMix
# ═══════════════════════════════════════════════════════════════════════════

class TestMethodMixValidation:
    """Per-method range and the 100% ceiling."""

    def test_defaults_are_valid(self):
        mix = MethodMix()
        assert mix.total == pytest.approx(100.0)

    def test_total_above_100_rejected(self):
        with pytest.raises(ValidationError, match="exceeds 100%"):
            MethodMix(domestic_cards=90, international_cards=20, ach=0, stablecoins=0)

    def test_float_slack_tolerated(self):
        mix = MethodMix(domestic_cards=70.0000001, international_cards=10, ach=10, stablecoins=10)
        assert mix.total > 100.0

    def test_total_below_100_allowed(self):
        assert MethodMix(domestic_cards=10, international_cards=0, ach=0, stablecoins=0).total == 10

    @pytest.mark.parametrize("field", [m.value for m in PaymentMethod])
    def test_negative_share_rejected(self, field: str):
        with pytest.raises(ValidationError):
            MethodMix(**{field: -1})

    def test_share_above_100_rejected(self):
        with pytest.raises(ValidationError):
            MethodMix(domestic_cards=101, international_cards=0, ach=0, stablecoins=0)

    def test_from_percentages_fills_missing(self):
        mix = MethodMix.from_percentages({PaymentMethod.ACH: 40})
        assert mix.as_dict() == {
            PaymentMethod.DOMESTIC_CARDS: 0.0,
            PaymentMethod.INTERNATIONAL_CARDS: 0.0,
            PaymentMethod.ACH: 40.0,
            PaymentMethod.STABLECOINS: 0.0,
        }

    def test_frozen(self):
        mix = MethodMix()
        with pytest.raises(ValidationError):
            mix.ach = 50


# ═══════════════════════════════════════════════════════════════════════════
# Inputs
# ═══════════════════════════════════════════════════════════════════════════

class TestInputsValidation:

    def test_defaults_are_valid(self):
        inputs = Inputs()
        assert inputs.method_mix is not None
        assert inputs.avg_transaction_size > 0

    def test_zero_average_transaction_rejected(self):
        with pytest.raises(ValidationError):
            Inputs(avg_transaction_size=0)

    def test_negative_volume_rejected(self):
        with pytest.raises(ValidationError):
            Inputs(monthly_volume=-100)

    @pytest.mark.parametrize("field", ["monthly_volume", "avg_transaction_size"])
    @pytest.mark.parametrize("value", [float("inf"), float("nan")])
    def test_non_finite_rejected(self, field: str, value: float):
        with pytest.raises(ValidationError):
            Inputs(**{field: value})

    def test_non_finite_share_rejected(self):
        with pytest.raises(ValidationError):
            MethodMix(domestic_cards=float("nan"))

    def test_zero_volume_allowed(self):
        assert Inputs(monthly_volume=0).monthly_volume == 0

    @pytest.mark.parametrize("rate", [-0.1, 100.5])
    def test_dispute_rate_out_of_range(self, rate: float):
        with pytest.raises(ValidationError):
            Inputs(dispute_rate_percent=rate)

    def test_unknown_gateway_rejected(self):
        with pytest.raises(ValidationError):
            StablecoinConfig(gateway="offshore")

    def test_unknown_card_subtype_rejected(self):
        with pytest.raises(ValidationError):
            Inputs(method_mix=None, card_subtype="amex")

    def test_mix_none_selects_single_rate(self):
        assert Inputs(method_mix=None).method_mix is None

    def test_nested_mix_from_dict(self):
        inputs = Inputs.model_validate({"method_mix": {"domestic_cards": 100, "international_cards": 0,
                                                       "ach": 0, "stablecoins": 0}})
        assert inputs.method_mix.domestic_cards == 100


# ═══════════════════════════════════════════════════════════════════════════
# Rates and policy
# ═══════════════════════════════════════════════════════════════════════════

class TestRateValidation:

    def test_negative_percentage_rejected(self):
        with pytest.raises(ValidationError):
            ProcessingRate(percentage_rate=-1)

    def test_negative_cap_rejected(self):
        with pytest.raises(ValidationError):
            ProcessingRate(percentage_rate=1, cap=-5)

    def test_fraction_above_one_rejected(self):
        with pytest.raises(ValidationError):
            PricingPolicy(terminal_volume_fraction=1.5)

    def test_negative_payouts_rejected(self):
        with pytest.raises(ValidationError):
            PricingPolicy(payouts_per_month=-1)
