"""Sensitivity / tornado analysis.

One-at-a-time sweeps: vary one numeric input, hold everything else fixed,
measure the change in monthly fees.  Produces tornado chart data sorted by
swing, plus dense sweeps over a ``numpy.linspace`` grid for charts.

Default sweep set:
  - monthly_volume ± 25%
  - avg_transaction_size ± 50%
  - dispute_rate_percent ± 100%
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from fee_estimator.config.inputs import Inputs
from fee_estimator.engine.fee_engine import FeeEngine

SWEEPABLE_FIELDS: tuple[str, ...] = ("monthly_volume", "avg_transaction_size", "dispute_rate_percent")


@dataclass(frozen=True)
class TornadoBar:
    """One bar in the tornado chart."""

    param_name: str
    """Human-readable parameter name."""

    field_name: str
    """``Inputs`` field that was swept."""

    base_value: float
    low_value: float
    high_value: float

    fees_at_low: float
    """Total monthly fees when the field = low_value."""

    fees_at_high: float

    delta_fees: float
    """abs(fees_at_high − fees_at_low) — total swing width."""


@dataclass
class SensitivityResult:
    """Complete sensitivity analysis output."""

    base_total_fees: float
    base_effective_rate_percent: float

    bars: list[TornadoBar] = field(default_factory=list)
    """Tornado bars sorted by delta_fees (descending)."""


@dataclass(frozen=True)
class SweepPoint:
    value: float
    total_fees: float
    effective_rate_percent: float


DEFAULT_SWEEPS: list[tuple[str, str, float, float]] = [
    ("Monthly volume", "monthly_volume", -0.25, 0.25),
    ("Average transaction size", "avg_transaction_size", -0.50, 0.50),
    ("Dispute rate", "dispute_rate_percent", -1.00, 1.00),
]


def _with_value(inputs: Inputs, field_name: str, value: float) -> Inputs:
    """Copy of ``inputs`` with one field replaced, re-validated."""
    if field_name not in SWEEPABLE_FIELDS:
        raise ValueError(f"cannot sweep '{field_name}'; choose one of {', '.join(SWEEPABLE_FIELDS)}")
    data = inputs.model_dump()
    data[field_name] = value
    return Inputs.model_validate(data)


def _clip(field_name: str, value: float) -> float:
    """Keep swept values inside the field's valid range."""
    if field_name == "dispute_rate_percent":
        return min(max(value, 0.0), 100.0)
    if field_name == "avg_transaction_size":
        return max(value, 0.01)
    return max(value, 0.0)


def sweep_parameter(
    engine: FeeEngine,
    inputs: Inputs,
    field_name: str,
    start: float,
    stop: float,
    num: int = 11,
) -> list[SweepPoint]:
    """Evaluate the engine at ``num`` evenly spaced values of one field."""
    points: list[SweepPoint] = []
    for value in np.linspace(start, stop, num):
        report = engine.compute(_with_value(inputs, field_name, _clip(field_name, float(value))))
        points.append(SweepPoint(
            value=round(float(value), 4),
            total_fees=report.total_fees,
            effective_rate_percent=report.effective_rate_percent,
        ))
    return points


def run_sensitivity(
    engine: FeeEngine,
    inputs: Inputs,
    sweeps: list[tuple[str, str, float, float]] | None = None,
) -> SensitivityResult:
    """Run sensitivity analysis around ``inputs``.

    Parameters
    ----------
    engine : FeeEngine
        Engine (rate table + policy) to price with.
    inputs : Inputs
        Base case.
    sweeps : list[tuple[name, field, low_pct, high_pct]] | None
        Parameter sweeps. None = use DEFAULT_SWEEPS.

    Returns
    -------
    SensitivityResult
        Tornado bars sorted by fee swing.
    """
    if sweeps is None:
        sweeps = DEFAULT_SWEEPS

    base = engine.compute(inputs)
    bars: list[TornadoBar] = []

    for name, field_name, low_pct, high_pct in sweeps:
        base_val = float(getattr(inputs, field_name))
        low_val = _clip(field_name, base_val * (1 + low_pct))
        high_val = _clip(field_name, base_val * (1 + high_pct))

        fees_low = engine.compute(_with_value(inputs, field_name, low_val)).total_fees
        fees_high = engine.compute(_with_value(inputs, field_name, high_val)).total_fees

        bars.append(TornadoBar(
            param_name=name,
            field_name=field_name,
            base_value=round(base_val, 4),
            low_value=round(low_val, 4),
            high_value=round(high_val, 4),
            fees_at_low=round(fees_low, 2),
            fees_at_high=round(fees_high, 2),
            delta_fees=round(abs(fees_high - fees_low), 2),
        ))

    # Sort by impact (largest swing first)
    bars.sort(key=lambda b: b.delta_fees, reverse=True)

    return SensitivityResult(
        base_total_fees=base.total_fees,
        base_effective_rate_percent=base.effective_rate_percent,
        bars=bars,
    )
