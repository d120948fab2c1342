"""Context manifest — makes the estimator self-describing for API clients.

``build_context`` lists every configurable input with its type, default,
description and constraints, pulled straight from the pydantic models, so
the manifest can never drift from the validation rules.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from fee_estimator.config import Inputs, MethodMix, PlatformFeatures, RateTable, StablecoinConfig


class ParameterInfo(BaseModel):
    """One configurable parameter, machine-readable."""
    name: str
    type: str
    default: Any
    description: str
    constraints: dict[str, Any] = Field(default_factory=dict)


class SectionSchema(BaseModel):
    """Schema for one input section (e.g. method_mix, stablecoin)."""
    section: str
    description: str
    parameters: list[ParameterInfo]


class EstimatorContext(BaseModel):
    name: str
    version: str
    rate_table_version: str
    description: str
    input_sections: list[SectionSchema]
    endpoints: list[dict[str, str]]


def _extract_params(model_cls: type[BaseModel]) -> list[ParameterInfo]:
    """Extract parameter info from a Pydantic model class (nested models skipped)."""
    params: list[ParameterInfo] = []
    for name, field_info in model_cls.model_fields.items():
        if field_info.default_factory is not None:
            continue

        constraints: dict[str, Any] = {}
        for meta in field_info.metadata:
            for attr in ("ge", "gt", "le", "lt"):
                if hasattr(meta, attr):
                    constraints[attr] = getattr(meta, attr)

        type_str = str(field_info.annotation) if field_info.annotation else "Any"
        type_str = type_str.replace("typing.", "").replace("<class '", "").replace("'>", "")

        params.append(ParameterInfo(
            name=name,
            type=type_str,
            default=field_info.default,
            description=field_info.description or "",
            constraints=constraints,
        ))
    return params


_SECTIONS: list[tuple[str, type[BaseModel], str]] = [
    ("inputs", Inputs, "Volume, average transaction size and cross-cutting feature toggles"),
    ("method_mix", MethodMix, "Percentage of volume per payment method (total ≤ 100)"),
    ("stablecoin", StablecoinConfig, "Stablecoin gateway, network and fiat conversion"),
    ("platform", PlatformFeatures, "Optional platform add-ons"),
]

_ENDPOINTS: list[dict[str, str]] = [
    {"method": "GET", "path": "/context", "description": "This manifest"},
    {"method": "GET", "path": "/schema", "description": "JSON Schema for Inputs"},
    {"method": "GET", "path": "/inputs/defaults", "description": "Default Inputs as JSON"},
    {"method": "GET", "path": "/rates", "description": "Active rate table"},
    {"method": "POST", "path": "/estimate", "description": "Price partial inputs merged onto defaults"},
    {"method": "POST", "path": "/estimate/compare", "description": "Rank alternative method mixes"},
    {"method": "POST", "path": "/estimate/sensitivity", "description": "Tornado data for key inputs"},
    {"method": "POST", "path": "/estimate/sweep", "description": "Fees across a grid of one input"},
    {"method": "POST", "path": "/mix/normalize", "description": "Set one method's share, rescale the rest"},
    {"method": "GET", "path": "/sessions/{session_id}/calculations", "description": "Archived estimates"},
]


def build_context(rates: RateTable, version: str) -> EstimatorContext:
    return EstimatorContext(
        name="Payment Fee Estimator",
        version=version,
        rate_table_version=rates.version,
        description=(
            "Estimates monthly payment-processing fees for a merchant from monthly volume, "
            "average transaction size, a payment-method mix and optional features. "
            "Deterministic; all amounts in " + rates.currency + "."
        ),
        input_sections=[
            SectionSchema(section=name, description=desc, parameters=_extract_params(model))
            for name, model, desc in _SECTIONS
        ],
        endpoints=_ENDPOINTS,
    )


def get_inputs_schema() -> dict:
    """Return the full JSON Schema for Inputs."""
    return Inputs.model_json_schema()


def get_default_inputs() -> dict:
    """Return default Inputs as a JSON-serializable dict."""
    return Inputs().model_dump(mode="json")
