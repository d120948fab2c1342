"""Serialization tests — result and input models survive JSON encode/decode.

The report shape is what the API returns and what the archive stores, so
it must stay stable and serializable.
"""

from __future__ import annotations

import json

from fee_estimator.config import Inputs
from fee_estimator.engine.fee_engine import FeeEngine
from fee_estimator.models.results import FeeCategory, FeeReport


def test_report_round_trip(engine: FeeEngine, inputs: Inputs):
    """FeeReport → JSON → FeeReport preserves every field."""
    original = engine.compute(inputs)
    restored = FeeReport.model_validate_json(original.model_dump_json())
    assert restored == original


def test_report_json_uses_category_values(engine: FeeEngine, inputs: Inputs):
    data = json.loads(engine.compute(inputs).model_dump_json())
    assert list(data["breakdown"]) == [c.value for c in FeeCategory if c.value in data["breakdown"]]
    assert data["per_method_volume"]["stablecoins"] == 10_000
    assert data["savings_opportunities"][0]["kind"] == "international"


def test_breakdown_order_survives_round_trip(engine: FeeEngine, inputs: Inputs):
    restored = FeeReport.model_validate_json(engine.compute(inputs).model_dump_json())
    assert list(restored.breakdown)[0] is FeeCategory.DOMESTIC_CARDS
    assert list(restored.breakdown)[-1] is FeeCategory.DISPUTES


def test_inputs_round_trip(single_rate_inputs: Inputs):
    restored = Inputs.model_validate_json(single_rate_inputs.model_dump_json())
    assert restored == single_rate_inputs
    assert restored.method_mix is None
