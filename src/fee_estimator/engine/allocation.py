"""Method-mix normalisation and volume allocation.

Pure arithmetic: a mix of percentages → dollar volume and transaction
count per payment method.
"""

from __future__ import annotations

from fee_estimator.config.inputs import Inputs
from fee_estimator.config.methods import CARD_METHODS, PaymentMethod
from fee_estimator.config.mix import MethodMix
from fee_estimator.config.policy import PricingPolicy


def clamp_percentage(value: float) -> float:
    return max(0.0, min(100.0, float(value)))


def set_method_percentage(mix: MethodMix, method: PaymentMethod, value: float) -> MethodMix:
    """Return a new mix with ``method`` at ``value`` (clamped to 0–100).

    When the other methods no longer fit in the remaining ``100 − value``
    they are scaled down proportionally so the total is exactly 100.
    Otherwise only ``method`` changes and the total may stay below 100.
    If every other method is already at 0 the remainder is left
    unallocated rather than spread.
    """
    new_value = clamp_percentage(value)
    current = mix.as_dict()
    others = [m for m in PaymentMethod if m is not method]
    others_total = sum(current[m] for m in others)

    updated = dict(current)
    updated[method] = new_value

    if others_total + new_value > 100.0:
        # others_total > 0 here: new_value alone never exceeds 100
        scale = (100.0 - new_value) / others_total
        for m in others:
            updated[m] = current[m] * scale

    return MethodMix.from_percentages(updated)


def allocate_volume(inputs: Inputs, policy: PricingPolicy) -> dict[PaymentMethod, float]:
    """Dollar volume per payment method, in ``PaymentMethod`` order.

    With an explicit mix each method gets ``monthly_volume × share / 100``.
    The single-rate variant puts the whole volume on ``card_subtype`` and,
    when ACH is toggled on, an assumed ACH share on top of it.
    """
    volume = inputs.monthly_volume

    if inputs.method_mix is not None:
        return {
            method: volume * (share / 100.0)
            for method, share in inputs.method_mix.as_dict().items()
        }

    volumes = {method: 0.0 for method in PaymentMethod}
    volumes[inputs.card_subtype.method] = volume
    if inputs.platform.ach_enabled:
        volumes[PaymentMethod.ACH] = volume * policy.ach_volume_fraction
    return volumes


def transactions_for(volume: float, avg_transaction_size: float) -> float:
    """Fractional transaction count for a slice of volume."""
    return volume / avg_transaction_size


def card_transaction_count(volumes: dict[PaymentMethod, float], avg_transaction_size: float) -> float:
    """Transactions on card rails only, the basis for fraud and dispute fees."""
    card_volume = sum(volumes[m] for m in CARD_METHODS)
    return transactions_for(card_volume, avg_transaction_size)


def round_half_up(value: float) -> int:
    return int(value + 0.5) if value >= 0 else -int(-value + 0.5)
