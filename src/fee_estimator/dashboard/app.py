"""Payment Fee Estimator — Streamlit dashboard.

Layout: sidebar inputs → main area with two tabs (Estimate | Compare).
The dashboard only builds an ``Inputs`` snapshot and renders the
``FeeReport``; every number comes from ``FeeEngine``.

Run with:
    streamlit run src/fee_estimator/dashboard/app.py
"""

from __future__ import annotations

import os
import uuid

import pandas as pd
import plotly.graph_objects as go
import streamlit as st

from fee_estimator.analysis.compare import DEFAULT_MIX_ALTERNATIVES, compare_mixes
from fee_estimator.analysis.sensitivity import sweep_parameter
from fee_estimator.config import (
    CardSubtype,
    FraudTier,
    Inputs,
    MethodMix,
    PaymentMethod,
    PlatformFeatures,
    StablecoinConfig,
    StablecoinGateway,
    StablecoinNetwork,
    load_rate_table,
)
from fee_estimator.engine.allocation import set_method_percentage
from fee_estimator.engine.fee_engine import FeeEngine
from fee_estimator.sinks import (
    InMemoryCalculationStore,
    LoggingEventSink,
    record_calculation,
    track_feature_toggle,
)

# ---------------------------------------------------------------------------
# Sidebar defaults come from the model defaults
# ---------------------------------------------------------------------------
_DEF_IN = Inputs()
_DEF_MIX = MethodMix()
_DEF_SC = StablecoinConfig()

_METHOD_LABELS = {
    PaymentMethod.DOMESTIC_CARDS: "Domestic cards",
    PaymentMethod.INTERNATIONAL_CARDS: "International cards",
    PaymentMethod.ACH: "ACH",
    PaymentMethod.STABLECOINS: "Stablecoins",
}

st.set_page_config(page_title="Payment Fee Estimator", page_icon="💳", layout="wide")


@st.cache_resource
def _engine() -> FeeEngine:
    path = os.environ.get("FEE_ESTIMATOR_RATE_TABLE")
    return FeeEngine(load_rate_table(path) if path else load_rate_table())


@st.cache_resource
def _sinks() -> tuple[InMemoryCalculationStore, LoggingEventSink]:
    return InMemoryCalculationStore(), LoggingEventSink()


engine = _engine()

if "session_id" not in st.session_state:
    st.session_state.session_id = uuid.uuid4().hex
if "mix" not in st.session_state:
    st.session_state.mix = _DEF_MIX
    for _m in PaymentMethod:
        st.session_state[f"mix_{_m.value}"] = float(_DEF_MIX.percentage(_m))


def _on_mix_change(method: PaymentMethod) -> None:
    """Slider callback: rescale the other methods so the total stays ≤ 100%."""
    value = st.session_state[f"mix_{method.value}"]
    st.session_state.mix = set_method_percentage(st.session_state.mix, method, value)
    for m in PaymentMethod:
        st.session_state[f"mix_{m.value}"] = float(st.session_state.mix.percentage(m))


def _on_feature_toggle(feature: str) -> None:
    """Checkbox callback: emit ``feature_toggle`` for the analytics sink."""
    _, events = _sinks()
    track_feature_toggle(events, st.session_state.session_id, feature, st.session_state[f"feature_{feature}"])


def _feature_checkbox(label: str, feature: str, value: bool = False, **kwargs) -> bool:
    return st.checkbox(
        label, value=value, key=f"feature_{feature}",
        on_change=_on_feature_toggle, args=(feature,), **kwargs,
    )


# ---------------------------------------------------------------------------
# Sidebar inputs
# ---------------------------------------------------------------------------
st.sidebar.title("Inputs")

monthly_volume = st.sidebar.number_input(
    "Monthly processing volume ($)", min_value=0.0, value=_DEF_IN.monthly_volume, step=1_000.0,
)
avg_size = st.sidebar.number_input(
    "Average transaction size ($)", min_value=0.01, value=_DEF_IN.avg_transaction_size, step=1.0,
)

use_mix = st.sidebar.toggle("Price a payment-method mix", value=True)
card_subtype = CardSubtype.DOMESTIC
if use_mix:
    with st.sidebar.expander("Payment method mix", expanded=True):
        for method in PaymentMethod:
            st.slider(
                _METHOD_LABELS[method], 0.0, 100.0,
                step=0.5,
                key=f"mix_{method.value}",
                on_change=_on_mix_change,
                args=(method,),
            )
        st.caption(f"Total: {st.session_state.mix.total:.1f}%")
else:
    card_subtype = CardSubtype(st.sidebar.selectbox(
        "Primary card type", [c.value for c in CardSubtype],
    ))

with st.sidebar.expander("Features"):
    fraud_enabled = _feature_checkbox("Fraud protection", "fraud_protection", _DEF_IN.fraud_protection_enabled)
    fraud_tier = FraudTier(st.selectbox("Fraud tier", [t.value for t in FraudTier]))
    dispute_rate = st.number_input(
        "Dispute rate (%)", min_value=0.0, max_value=100.0, value=_DEF_IN.dispute_rate_percent, step=0.05,
    )
    instant_payouts = _feature_checkbox("Instant payouts", "instant_payouts", _DEF_IN.instant_payouts_enabled)

with st.sidebar.expander("Stablecoins"):
    gateway = StablecoinGateway(st.selectbox("Gateway", [g.value for g in StablecoinGateway]))
    network = StablecoinNetwork(st.selectbox("Network", [n.value for n in StablecoinNetwork]))
    conversion = st.checkbox("Requires fiat conversion", value=_DEF_SC.requires_fiat_conversion)

with st.sidebar.expander("Platform add-ons"):
    platform = PlatformFeatures(
        terminal_enabled=_feature_checkbox("Terminal (in-person)", "terminal"),
        ach_enabled=_feature_checkbox("ACH direct debit", "ach", disabled=use_mix),
        billing_enabled=_feature_checkbox("Billing & subscriptions", "billing"),
        connect_enabled=_feature_checkbox("Connect (platform)", "connect"),
        link_enabled=_feature_checkbox("Link", "link"),
        wallets_enabled=_feature_checkbox("Digital wallets", "wallets"),
    )

inputs = Inputs(
    monthly_volume=monthly_volume,
    avg_transaction_size=avg_size,
    method_mix=st.session_state.mix if use_mix else None,
    card_subtype=card_subtype,
    fraud_protection_enabled=fraud_enabled,
    fraud_tier=fraud_tier,
    instant_payouts_enabled=instant_payouts,
    dispute_rate_percent=dispute_rate,
    stablecoin=StablecoinConfig(gateway=gateway, network=network, requires_fiat_conversion=conversion),
    platform=platform,
)
report = engine.compute(inputs)

# ---------------------------------------------------------------------------
# Main area
# ---------------------------------------------------------------------------
st.title("Payment Fee Estimator")
st.caption(f"Rate table: {report.rate_table_version}. Estimates only; actual fees may vary.")

tab_estimate, tab_compare = st.tabs(["Estimate", "Compare"])

with tab_estimate:
    cols = st.columns(4)
    cols[0].metric("Total monthly fees", f"${report.total_fees:,.2f}")
    cols[1].metric("Effective rate", f"{report.effective_rate_percent:.3f}%")
    cols[2].metric("Monthly transactions", f"{report.transaction_count:,}")
    cols[3].metric("Stablecoin savings", f"${report.stablecoin_savings:,.2f}")

    if report.breakdown:
        table = pd.DataFrame(
            [
                {
                    "Category": category.label,
                    "Fee ($)": round(amount, 2),
                    "% of fees": round(amount / report.total_fees * 100, 1) if report.total_fees else 0.0,
                }
                for category, amount in report.breakdown.items()
            ]
        )
        fig = go.Figure(go.Bar(x=table["Fee ($)"], y=table["Category"], orientation="h"))
        fig.update_layout(height=360, margin=dict(l=10, r=10, t=10, b=10), yaxis=dict(autorange="reversed"))
        st.plotly_chart(fig, use_container_width=True)
        st.dataframe(table, use_container_width=True, hide_index=True)
    else:
        st.info("No fees apply at this volume.")

    for opp in report.savings_opportunities:
        st.success(opp.message)

    with st.expander("Fees vs. average transaction size"):
        points = sweep_parameter(engine, inputs, "avg_transaction_size", max(avg_size * 0.2, 0.01), avg_size * 3, 25)
        fig_sweep = go.Figure(go.Scatter(
            x=[p.value for p in points], y=[p.effective_rate_percent for p in points], mode="lines+markers",
        ))
        fig_sweep.update_layout(xaxis_title="Average transaction ($)", yaxis_title="Effective rate (%)", height=320)
        st.plotly_chart(fig_sweep, use_container_width=True)

    if st.button("Save this estimate"):
        store, events = _sinks()
        record_id = record_calculation(store, events, inputs, report, st.session_state.session_id)
        if record_id:
            st.toast(f"Saved {record_id}")
        else:
            st.warning("Estimate computed but could not be saved.")

with tab_compare:
    mixes = dict(DEFAULT_MIX_ALTERNATIVES)
    if inputs.method_mix is not None:
        mixes = {"current": inputs.method_mix, **mixes}
    comparisons = compare_mixes(engine, inputs, mixes)
    st.dataframe(
        pd.DataFrame(
            [
                {
                    "Mix": c.name,
                    **{_METHOD_LABELS[m]: c.mix.percentage(m) for m in PaymentMethod},
                    "Total fees ($)": round(c.total_fees, 2),
                    "Effective rate (%)": round(c.effective_rate_percent, 3),
                }
                for c in comparisons
            ]
        ),
        use_container_width=True,
        hide_index=True,
    )
