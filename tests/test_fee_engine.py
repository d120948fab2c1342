"""Tests for the fee engine — end-to-end pricing of one Inputs snapshot."""

from __future__ import annotations

import logging

import pytest

from fee_estimator.config import (
    CardRates,
    CardSubtype,
    Inputs,
    MethodMix,
    PaymentMethod,
    PlatformFeatures,
    ProcessingRate,
    RateTable,
)
from fee_estimator.engine.fee_engine import FeeEngine, compute
from fee_estimator.errors import InvalidInputError
from fee_estimator.models.results import FeeCategory


# ═══════════════════════════════════════════════════════════════════════════
# Reference merchant: $100k, $50 avg, 70/10/10/10
# ═══════════════════════════════════════════════════════════════════════════

class TestReferenceMerchant:

    def test_total(self, engine: FeeEngine, inputs: Inputs):
        report = engine.compute(inputs)
        assert report.total_fees == pytest.approx(3_264.0)
        assert report.effective_rate_percent == pytest.approx(3.264)
        assert report.net_revenue == pytest.approx(96_736.0)

    def test_breakdown(self, engine: FeeEngine, inputs: Inputs):
        report = engine.compute(inputs)
        assert report.breakdown == {
            FeeCategory.DOMESTIC_CARDS: pytest.approx(2_450.0),
            FeeCategory.INTERNATIONAL_CARDS: pytest.approx(400.0),
            FeeCategory.CURRENCY_CONVERSION: pytest.approx(20.0),
            FeeCategory.ACH: pytest.approx(80.0),
            FeeCategory.STABLECOIN_GATEWAY: pytest.approx(150.0),
            FeeCategory.STABLECOIN_NETWORK: pytest.approx(10.0),
            FeeCategory.STABLECOIN_CONVERSION: pytest.approx(50.0),
            FeeCategory.FRAUD_PROTECTION: pytest.approx(80.0),
            FeeCategory.DISPUTES: pytest.approx(24.0),
        }

    def test_breakdown_in_evaluation_order(self, engine: FeeEngine, inputs: Inputs):
        categories = list(engine.compute(inputs).breakdown)
        assert categories == sorted(categories, key=list(FeeCategory).index)

    def test_counts(self, engine: FeeEngine, inputs: Inputs):
        report = engine.compute(inputs)
        assert report.transaction_count == 2_000
        assert report.card_transaction_count == pytest.approx(1_600)

    def test_stablecoin_savings(self, engine: FeeEngine, inputs: Inputs):
        # domestic-card equivalent $350 vs actual $210
        assert engine.compute(inputs).stablecoin_savings == pytest.approx(140.0)

    def test_savings_not_deducted(self, engine: FeeEngine, inputs: Inputs):
        report = engine.compute(inputs)
        assert report.total_fees == pytest.approx(sum(report.breakdown.values()))

    def test_opportunities(self, engine: FeeEngine, inputs: Inputs):
        kinds = [o.kind for o in engine.compute(inputs).savings_opportunities]
        assert kinds == ["international", "stablecoin"]

    def test_method_fees(self, engine: FeeEngine, inputs: Inputs):
        report = engine.compute(inputs)
        assert report.method_fees(PaymentMethod.INTERNATIONAL_CARDS) == pytest.approx(420.0)
        assert report.method_fees(PaymentMethod.STABLECOINS) == pytest.approx(210.0)

    def test_functional_shortcut_matches(self, engine: FeeEngine, inputs: Inputs):
        assert compute(inputs) == engine.compute(inputs)

    def test_rate_table_version_echoed(self, engine: FeeEngine, inputs: Inputs):
        assert engine.compute(inputs).rate_table_version == "standard-2024"


# ═══════════════════════════════════════════════════════════════════════════
# Invariants
# ═══════════════════════════════════════════════════════════════════════════

class TestInvariants:

    @pytest.mark.parametrize("volume", [0, 1, 999.99, 50_000, 1_234_567.89])
    @pytest.mark.parametrize("avg", [0.5, 50, 1_000])
    def test_breakdown_sums_to_total(self, engine: FeeEngine, inputs: Inputs, volume, avg):
        report = engine.compute(inputs.model_copy(update={"monthly_volume": volume, "avg_transaction_size": avg}))
        assert report.total_fees == pytest.approx(sum(report.breakdown.values()), abs=1e-6)
        assert all(amount > 0 for amount in report.breakdown.values())
        assert report.stablecoin_savings >= 0

    def test_fees_non_decreasing_in_volume(self, engine: FeeEngine, inputs: Inputs):
        totals = [
            engine.compute(inputs.model_copy(update={"monthly_volume": v})).total_fees
            for v in (0, 100, 10_000, 100_000, 1_000_000)
        ]
        assert totals == sorted(totals)

    def test_amounts_that_round_away_are_omitted(self, engine: FeeEngine):
        report = engine.compute(Inputs(monthly_volume=0.001))
        assert report.breakdown == {}
        assert report.total_fees == 0.0

    def test_only_rounded_away_lines_dropped(self, engine: FeeEngine, inputs: Inputs):
        # $1 at $1000 average: the stablecoin network fee is 0.000005
        report = engine.compute(inputs.model_copy(update={"monthly_volume": 1, "avg_transaction_size": 1_000}))
        assert FeeCategory.STABLECOIN_NETWORK not in report.breakdown
        assert report.breakdown[FeeCategory.DOMESTIC_CARDS] == pytest.approx(0.0205)

    def test_zero_volume(self, engine: FeeEngine):
        everything_on = Inputs(
            monthly_volume=0,
            instant_payouts_enabled=True,
            platform=PlatformFeatures(terminal_enabled=True, connect_enabled=True, billing_enabled=True),
        )
        report = engine.compute(everything_on)
        assert report.total_fees == 0.0
        assert report.effective_rate_percent == 0.0
        assert report.breakdown == {}
        assert report.transaction_count == 0

    def test_inputs_not_mutated(self, engine: FeeEngine, inputs: Inputs):
        before = inputs.model_dump()
        engine.compute(inputs)
        assert inputs.model_dump() == before

    def test_deterministic(self, engine: FeeEngine, inputs: Inputs):
        assert engine.compute(inputs) == engine.compute(inputs)


# ═══════════════════════════════════════════════════════════════════════════
# Variants and edge cases
# ═══════════════════════════════════════════════════════════════════════════

class TestVariants:

    def test_single_rate_domestic(self, engine: FeeEngine, single_rate_inputs: Inputs):
        report = engine.compute(single_rate_inputs)
        assert report.breakdown == {
            FeeCategory.DOMESTIC_CARDS: pytest.approx(3_500.0),
            FeeCategory.FRAUD_PROTECTION: pytest.approx(100.0),
        }
        assert report.total_fees == pytest.approx(3_600.0)

    def test_single_rate_international(self, engine: FeeEngine, single_rate_inputs: Inputs):
        intl = single_rate_inputs.model_copy(update={"card_subtype": CardSubtype.INTERNATIONAL})
        report = engine.compute(intl)
        assert FeeCategory.DOMESTIC_CARDS not in report.breakdown
        assert report.breakdown[FeeCategory.CURRENCY_CONVERSION] == pytest.approx(200.0)

    def test_single_rate_ach_toggle(self, engine: FeeEngine, single_rate_inputs: Inputs):
        with_ach = single_rate_inputs.model_copy(update={"platform": PlatformFeatures(ach_enabled=True)})
        report = engine.compute(with_ach)
        # 20k of ACH at $50: 400 tx × $0.40
        assert report.breakdown[FeeCategory.ACH] == pytest.approx(160.0)

    def test_partial_mix_priced_as_is(self, engine: FeeEngine):
        half = Inputs(
            monthly_volume=100_000,
            method_mix=MethodMix(domestic_cards=50, international_cards=0, ach=0, stablecoins=0),
            fraud_protection_enabled=False,
            dispute_rate_percent=0,
        )
        assert engine.compute(half).total_fees == pytest.approx(1_750.0)

    def test_large_transactions_suggest_ach(self, engine: FeeEngine, single_rate_inputs: Inputs):
        large = single_rate_inputs.model_copy(update={"avg_transaction_size": 250})
        kinds = [o.kind for o in engine.compute(large).savings_opportunities]
        assert "payment_method" in kinds

    def test_enterprise_volume(self, engine: FeeEngine, inputs: Inputs):
        big = inputs.model_copy(update={"monthly_volume": 600_000})
        kinds = [o.kind for o in engine.compute(big).savings_opportunities]
        assert kinds[0] == "volume"

    def test_substituted_rate_table(self, inputs: Inputs):
        cheap = RateTable(
            version="negotiated",
            card=CardRates(domestic=ProcessingRate(percentage_rate=2.0, fixed_fee_per_transaction=0.30)),
        )
        standard = FeeEngine().compute(inputs)
        report = FeeEngine(cheap).compute(inputs)
        assert report.rate_table_version == "negotiated"
        # 70k × 0.9% cheaper on domestic cards
        assert standard.total_fees - report.total_fees == pytest.approx(630.0)


class TestInvalidInputs:

    def test_zero_average_transaction(self, engine: FeeEngine, inputs: Inputs):
        with pytest.raises(InvalidInputError, match="avg_transaction_size"):
            engine.compute(inputs.model_copy(update={"avg_transaction_size": 0}))

    def test_negative_volume(self, engine: FeeEngine, inputs: Inputs):
        with pytest.raises(InvalidInputError, match="monthly_volume"):
            engine.compute(inputs.model_copy(update={"monthly_volume": -1}))

    def test_invalid_input_is_value_error(self, engine: FeeEngine, inputs: Inputs):
        with pytest.raises(ValueError):
            engine.compute(inputs.model_copy(update={"avg_transaction_size": -5}))

    @pytest.mark.parametrize("field", ["monthly_volume", "avg_transaction_size"])
    @pytest.mark.parametrize("value", [float("inf"), float("nan")])
    def test_non_finite_rejected(self, engine: FeeEngine, inputs: Inputs, field: str, value: float):
        with pytest.raises(InvalidInputError, match=field):
            engine.compute(inputs.model_copy(update={field: value}))


def test_debug_summary_logged(engine: FeeEngine, inputs: Inputs, caplog):
    with caplog.at_level(logging.DEBUG, logger="fee_estimator.engine.fee_engine"):
        engine.compute(inputs)
    assert "total_fees=3264.0000" in caplog.text
