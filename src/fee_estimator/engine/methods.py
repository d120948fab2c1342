"""Per-method fee formulas — cards, ACH, stablecoins.

Each function prices one method's allocated volume and returns its
breakdown entries as ``(category, amount)`` pairs in evaluation order.
Zero amounts are returned too; the engine drops them when aggregating.
"""

from __future__ import annotations

from fee_estimator.config.inputs import StablecoinConfig
from fee_estimator.config.methods import PaymentMethod
from fee_estimator.config.policy import PricingPolicy
from fee_estimator.config.rates import ProcessingRate, RateTable
from fee_estimator.engine.allocation import transactions_for
from fee_estimator.models.results import FeeCategory

FeeLines = list[tuple[FeeCategory, float]]


def percentage_plus_fixed(volume: float, transactions: float, rate: ProcessingRate) -> float:
    """volume × pct/100 + transactions × fixed."""
    return volume * rate.percentage_rate / 100.0 + transactions * rate.fixed_fee_per_transaction


def compute_card_fees(
    method: PaymentMethod,
    volume: float,
    avg_transaction_size: float,
    rates: RateTable,
    policy: PricingPolicy,
) -> FeeLines:
    """Card processing; international adds a conversion surcharge on the assumed converted share."""
    transactions = transactions_for(volume, avg_transaction_size)

    if method is PaymentMethod.DOMESTIC_CARDS:
        return [(FeeCategory.DOMESTIC_CARDS, percentage_plus_fixed(volume, transactions, rates.card.domestic))]

    if method is PaymentMethod.INTERNATIONAL_CARDS:
        processing = percentage_plus_fixed(volume, transactions, rates.card.international)
        conversion = (
            volume
            * policy.international_conversion_fraction
            * rates.card.currency_conversion_rate / 100.0
        )
        return [
            (FeeCategory.INTERNATIONAL_CARDS, processing),
            (FeeCategory.CURRENCY_CONVERSION, conversion),
        ]

    raise ValueError(f"{method.value} is not a card method")


def ach_fee_per_transaction(avg_transaction_size: float, rate: ProcessingRate) -> float:
    """Percentage fee capped per transaction, then the fixed part.

    The cap binds each transaction, never the monthly aggregate.
    """
    percentage_fee = avg_transaction_size * rate.percentage_rate / 100.0
    if rate.cap is not None:
        percentage_fee = min(percentage_fee, rate.cap)
    return percentage_fee + rate.fixed_fee_per_transaction


def compute_ach_fees(volume: float, avg_transaction_size: float, rates: RateTable) -> FeeLines:
    transactions = transactions_for(volume, avg_transaction_size)
    per_transaction = ach_fee_per_transaction(avg_transaction_size, rates.ach)
    return [(FeeCategory.ACH, transactions * per_transaction)]


def compute_stablecoin_fees(
    volume: float,
    avg_transaction_size: float,
    stablecoin: StablecoinConfig,
    rates: RateTable,
) -> FeeLines:
    """Gateway + network + optional fiat conversion, one entry each.

    Raises ``ConfigurationError`` when the rate table lacks the selected
    gateway or network.
    """
    transactions = transactions_for(volume, avg_transaction_size)
    table = rates.stablecoin

    lines: FeeLines = [
        (FeeCategory.STABLECOIN_GATEWAY, volume * table.gateway_rate(stablecoin.gateway) / 100.0),
        (FeeCategory.STABLECOIN_NETWORK, transactions * table.network_fee(stablecoin.network)),
    ]
    if stablecoin.requires_fiat_conversion:
        lines.append((FeeCategory.STABLECOIN_CONVERSION, volume * table.conversion_rate / 100.0))
    return lines


def equivalent_domestic_card_fee(volume: float, avg_transaction_size: float, rates: RateTable) -> float:
    """What ``volume`` would have cost on domestic cards."""
    transactions = transactions_for(volume, avg_transaction_size)
    return percentage_plus_fixed(volume, transactions, rates.card.domestic)
