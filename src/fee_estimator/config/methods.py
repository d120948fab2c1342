"""Enumerations shared by inputs, rate tables and results."""

from enum import Enum


class PaymentMethod(str, Enum):
    """Rails a share of monthly volume can be allocated to."""

    DOMESTIC_CARDS = "domestic_cards"
    INTERNATIONAL_CARDS = "international_cards"
    ACH = "ach"
    STABLECOINS = "stablecoins"


CARD_METHODS: tuple[PaymentMethod, ...] = (
    PaymentMethod.DOMESTIC_CARDS,
    PaymentMethod.INTERNATIONAL_CARDS,
)


class CardSubtype(str, Enum):
    """Card rate table used by the single-rate variant."""

    DOMESTIC = "domestic"
    INTERNATIONAL = "international"

    @property
    def method(self) -> PaymentMethod:
        if self is CardSubtype.DOMESTIC:
            return PaymentMethod.DOMESTIC_CARDS
        return PaymentMethod.INTERNATIONAL_CARDS


class StablecoinGateway(str, Enum):
    PRIMARY = "primary"
    ALTERNATIVE = "alternative"


class StablecoinNetwork(str, Enum):
    LOW_COST = "low_cost"
    STANDARD = "standard"


class FraudTier(str, Enum):
    """Fraud screening product; each tier has its own per-transaction price."""

    STANDARD = "standard"
    FRAUD_TEAMS = "fraud_teams"


class PlatformFeature(str, Enum):
    """Optional add-ons priced on an assumed fraction of total volume."""

    TERMINAL = "terminal"
    BILLING = "billing"
    CONNECT = "connect"
    LINK = "link"
    WALLETS = "wallets"
