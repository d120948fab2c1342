"""FastAPI server — HTTP surface for the fee estimator.

Run with:
    uvicorn fee_estimator.api.server:app --reload --port 8000

Or:
    python -m fee_estimator.api.server

Endpoints:
    GET  /context              — self-describing manifest (inputs + endpoints)
    GET  /schema               — full JSON Schema for Inputs
    GET  /inputs/defaults      — complete default Inputs as JSON
    GET  /rates                — active rate table
    POST /estimate             — price partial Inputs merged onto defaults
    POST /estimate/compare     — rank alternative payment-method mixes
    POST /estimate/sensitivity — one-at-a-time sweeps → tornado data
    POST /estimate/sweep       — fees across a grid of one input
    POST /mix/normalize        — set one method's share, rescale the others
    GET  /sessions/{id}/calculations — estimates archived for a session

Environment:
    FEE_ESTIMATOR_RATE_TABLE      — path to a JSON rate schedule (default: standard)
    FEE_ESTIMATOR_PRICING_POLICY  — path to a JSON pricing policy (default: built-in)
"""

from __future__ import annotations

import logging
import os
from typing import Any, Literal

from fastapi import FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, ValidationError

from fee_estimator import __version__
from fee_estimator.analysis.compare import DEFAULT_MIX_ALTERNATIVES, compare_mixes
from fee_estimator.analysis.sensitivity import SWEEPABLE_FIELDS, run_sensitivity, sweep_parameter
from fee_estimator.api.context import build_context, get_default_inputs, get_inputs_schema
from fee_estimator.api.narrative import generate_comparison_narrative, generate_narrative
from fee_estimator.config import (
    Inputs,
    MethodMix,
    PaymentMethod,
    PricingPolicy,
    load_pricing_policy,
    load_rate_table,
)
from fee_estimator.engine.allocation import set_method_percentage
from fee_estimator.engine.fee_engine import FeeEngine
from fee_estimator.errors import ConfigurationError, InvalidInputError
from fee_estimator.sinks import InMemoryCalculationStore, LoggingEventSink, record_calculation

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════
# App setup
# ═══════════════════════════════════════════════════════════════════════════

def build_engine_from_env() -> FeeEngine:
    """Engine for this process; fails fast on a bad rate table or policy file."""
    rate_path = os.environ.get("FEE_ESTIMATOR_RATE_TABLE")
    policy_path = os.environ.get("FEE_ESTIMATOR_PRICING_POLICY")
    rates = load_rate_table(rate_path) if rate_path else load_rate_table()
    policy = load_pricing_policy(policy_path) if policy_path else PricingPolicy()
    logger.info("loaded rate table %s", rates.version)
    return FeeEngine(rates, policy)


app = FastAPI(
    title="Payment Fee Estimator API",
    version=__version__,
    description=(
        "Estimate monthly payment-processing fees for a merchant's payment-method mix. "
        "Start with GET /context to see every configurable input."
    ),
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.state.engine = build_engine_from_env()
app.state.store = InMemoryCalculationStore()
app.state.events = LoggingEventSink()


@app.exception_handler(InvalidInputError)
async def _invalid_input_handler(request: Request, exc: InvalidInputError) -> JSONResponse:
    return JSONResponse(status_code=422, content={"detail": str(exc)})


@app.exception_handler(ValidationError)
async def _validation_handler(request: Request, exc: ValidationError) -> JSONResponse:
    errors = [{"loc": list(e["loc"]), "msg": e["msg"], "type": e["type"]} for e in exc.errors()]
    return JSONResponse(status_code=422, content={"detail": errors})


@app.exception_handler(ConfigurationError)
async def _configuration_handler(request: Request, exc: ConfigurationError) -> JSONResponse:
    logger.error("rate configuration error: %s", exc)
    return JSONResponse(status_code=500, content={"detail": str(exc)})


# ═══════════════════════════════════════════════════════════════════════════
# Request / response models
# ═══════════════════════════════════════════════════════════════════════════

class EstimateRequest(BaseModel):
    """Request body for /estimate. All fields optional; missing ones use defaults."""
    inputs: dict[str, Any] = Field(
        default_factory=dict,
        description="Partial or full Inputs JSON. Missing fields use defaults. "
                    "A supplied method_mix replaces the default mix; absent methods are 0%. "
                    "Example: {'monthly_volume': 250000, 'method_mix': {'domestic_cards': 60, 'ach': 20}}",
    )
    session_id: str | None = Field(
        default=None,
        description="Opaque session identifier. When given, the estimate is archived.",
    )


class EstimateResponse(BaseModel):
    report: dict[str, Any]
    narrative: str = ""
    record_id: str | None = None


class CompareRequest(BaseModel):
    """Request body for /estimate/compare."""
    inputs: dict[str, Any] = Field(default_factory=dict)
    mixes: dict[str, dict[str, float]] = Field(
        default_factory=dict,
        description="Named alternative mixes; absent methods are 0%. "
                    "Empty = compare the current mix against built-in alternatives.",
    )


class CompareResponse(BaseModel):
    ranking: list[dict[str, Any]]
    comparison_narrative: str


class SensitivityRequest(BaseModel):
    inputs: dict[str, Any] = Field(default_factory=dict)
    sweeps: list[dict[str, Any]] | None = Field(
        default=None,
        description="Optional override. Format: "
                    "[{'name': 'Volume', 'field': 'monthly_volume', 'low_pct': -0.2, 'high_pct': 0.2}]",
    )


class SweepRequest(BaseModel):
    inputs: dict[str, Any] = Field(default_factory=dict)
    field: Literal["monthly_volume", "avg_transaction_size", "dispute_rate_percent"]
    start: float = Field(ge=0)
    stop: float = Field(ge=0)
    num: int = Field(default=11, ge=2, le=200)


class NormalizeRequest(BaseModel):
    mix: dict[str, float] = Field(
        default_factory=dict,
        description="Current mix; absent methods are 0%. Empty = default mix.",
    )
    method: PaymentMethod
    value: float = Field(description="Requested share (%); clamped to 0–100")


# ═══════════════════════════════════════════════════════════════════════════
# Helpers
# ═══════════════════════════════════════════════════════════════════════════

def _build_inputs(overrides: dict[str, Any]) -> Inputs:
    """Build Inputs from partial overrides merged onto defaults.

    A supplied ``method_mix`` is taken whole rather than merged onto the
    default shares.
    """
    defaults = get_default_inputs()
    _deep_merge(defaults, overrides)
    mix = overrides.get("method_mix")
    if isinstance(mix, dict):
        defaults["method_mix"] = {**{method.value: 0.0 for method in PaymentMethod}, **mix}
    return Inputs(**defaults)


def _deep_merge(base: dict, overrides: dict) -> dict:
    """Recursively merge overrides into base dict."""
    for key, val in overrides.items():
        if key in base and isinstance(base[key], dict) and isinstance(val, dict):
            _deep_merge(base[key], val)
        else:
            base[key] = val
    return base


def _mix_from_partial(percentages: dict[str, float]) -> MethodMix:
    data = {method.value: 0.0 for method in PaymentMethod}
    data.update(percentages)
    return MethodMix(**data)


def _engine() -> FeeEngine:
    return app.state.engine


# ═══════════════════════════════════════════════════════════════════════════
# Endpoints
# ═══════════════════════════════════════════════════════════════════════════

@app.get("/health")
def health_check():
    return {"status": "ok"}


@app.get("/")
def root():
    return {
        "name": "Payment Fee Estimator API",
        "version": __version__,
        "start_here": "GET /context",
        "docs": "GET /docs (interactive Swagger UI)",
    }


@app.get("/context")
def get_context():
    """Self-describing manifest: every input with defaults and constraints, every endpoint."""
    return build_context(_engine().rates, __version__)


@app.get("/schema")
def get_schema():
    return get_inputs_schema()


@app.get("/inputs/defaults")
def get_defaults():
    """Complete default Inputs as JSON. Use as a starting point for modifications."""
    return get_default_inputs()


@app.get("/rates")
def get_rates():
    """Active rate table and pricing policy."""
    engine = _engine()
    return {
        "rates": engine.rates.model_dump(mode="json"),
        "policy": engine.policy.model_dump(mode="json"),
    }


@app.post("/estimate", response_model=EstimateResponse)
def estimate(req: EstimateRequest):
    """Price a partial Inputs snapshot.

    Example minimal request:
    ```json
    {"inputs": {"monthly_volume": 250000, "instant_payouts_enabled": true}}
    ```
    """
    inputs = _build_inputs(req.inputs)
    report = _engine().compute(inputs)

    record_id = None
    if req.session_id:
        record_id = record_calculation(app.state.store, app.state.events, inputs, report, req.session_id)

    return EstimateResponse(
        report=report.model_dump(mode="json"),
        narrative=generate_narrative(report),
        record_id=record_id,
    )


@app.post("/estimate/compare", response_model=CompareResponse)
def estimate_compare(req: CompareRequest):
    """Price the same merchant under several mixes, cheapest first."""
    inputs = _build_inputs(req.inputs)

    if req.mixes:
        mixes = {name: _mix_from_partial(m) for name, m in req.mixes.items()}
    else:
        mixes = dict(DEFAULT_MIX_ALTERNATIVES)
        if inputs.method_mix is not None:
            mixes = {"current": inputs.method_mix, **mixes}

    comparisons = compare_mixes(_engine(), inputs, mixes)

    ranking = [
        {
            "name": c.name,
            "mix": c.mix.model_dump(),
            "total_fees": c.total_fees,
            "effective_rate_percent": c.effective_rate_percent,
            "stablecoin_savings": c.report.stablecoin_savings,
        }
        for c in comparisons
    ]
    return CompareResponse(ranking=ranking, comparison_narrative=generate_comparison_narrative(comparisons))


@app.post("/estimate/sensitivity")
def estimate_sensitivity(req: SensitivityRequest):
    """Tornado data: fee swing per input, largest first."""
    inputs = _build_inputs(req.inputs)

    sweeps = None
    if req.sweeps:
        sweeps = [
            (s.get("name", s.get("field", "")), s.get("field", ""), s.get("low_pct", -0.25), s.get("high_pct", 0.25))
            for s in req.sweeps
        ]
        unknown = [s[1] for s in sweeps if s[1] not in SWEEPABLE_FIELDS]
        if unknown:
            raise InvalidInputError(f"cannot sweep {', '.join(unknown)}")

    result = run_sensitivity(_engine(), inputs, sweeps)
    return {
        "base_total_fees": result.base_total_fees,
        "base_effective_rate_percent": result.base_effective_rate_percent,
        "tornado_bars": [
            {
                "param_name": bar.param_name,
                "field": bar.field_name,
                "base_value": bar.base_value,
                "low_value": bar.low_value,
                "high_value": bar.high_value,
                "fees_at_low": bar.fees_at_low,
                "fees_at_high": bar.fees_at_high,
                "delta_fees": bar.delta_fees,
            }
            for bar in result.bars
        ],
    }


@app.post("/estimate/sweep")
def estimate_sweep(req: SweepRequest):
    inputs = _build_inputs(req.inputs)
    points = sweep_parameter(_engine(), inputs, req.field, req.start, req.stop, req.num)
    return {
        "field": req.field,
        "points": [
            {"value": p.value, "total_fees": p.total_fees, "effective_rate_percent": p.effective_rate_percent}
            for p in points
        ],
    }


@app.post("/mix/normalize")
def normalize_mix(req: NormalizeRequest):
    """Set one method's share; the others shrink proportionally if the total would pass 100%."""
    mix = _mix_from_partial(req.mix) if req.mix else MethodMix()
    updated = set_method_percentage(mix, req.method, req.value)
    return {"mix": updated.model_dump(), "total": round(updated.total, 6)}


@app.get("/sessions/{session_id}/calculations")
def list_session_calculations(session_id: str, limit: int = Query(default=50, ge=1, le=500)):
    records = app.state.store.list_for_session(session_id, limit=limit)
    return {
        "session_id": session_id,
        "calculations": [
            {
                "record_id": r.record_id,
                "created_at": r.created_at.isoformat(),
                "total_fees": r.report.total_fees,
                "effective_rate_percent": r.report.effective_rate_percent,
                "inputs": r.inputs.model_dump(mode="json"),
            }
            for r in records
        ],
    }


# ═══════════════════════════════════════════════════════════════════════════
# CLI entry point
# ═══════════════════════════════════════════════════════════════════════════

def main():
    """Run the API server."""
    import uvicorn
    uvicorn.run(
        "fee_estimator.api.server:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )


if __name__ == "__main__":
    main()
