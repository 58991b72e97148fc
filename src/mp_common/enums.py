"""Global enums — must match DB CHECK constraints exactly."""

from enum import Enum


class PayoutKind(str, Enum):
    """Leg of the purchase fee waterfall a value transfer belongs to."""
    ROYALTY = "ROYALTY"
    APP_FEE = "APP_FEE"
    GRATITUDE = "GRATITUDE"
    SELLER_PROCEEDS = "SELLER_PROCEEDS"


class PaymentEntryType(str, Enum):
    # Buyer side
    PURCHASE_PAYMENT = "PURCHASE_PAYMENT"
    # Payee side, one per non-zero waterfall leg
    ROYALTY = "ROYALTY"
    APP_FEE = "APP_FEE"
    GRATITUDE = "GRATITUDE"
    SELLER_PROCEEDS = "SELLER_PROCEEDS"


class CustodyMovement(str, Enum):
    """Direction of an escrow movement recorded by the custody adapter."""
    INBOUND = "INBOUND"
    RELEASE = "RELEASE"
