"""Purchase fee waterfall — pure integer arithmetic.

Order (each leg takes from what the previous legs left):
  1. royalty   — oracle quote, skipped when the recipient is the seller or
                 the amount is 0
  2. app fee   — floor(remaining * fee_rate / 255); gratitude is
                 floor(app_fee_total * gratitude_rate / 255) carved out of it
                 for the platform, and the total is taken from remaining once
  3. seller    — whatever is left, so floor-division residue always
                 accrues to the seller
"""

import logging

from src.mp_common.errors import RoyaltyExceedsProceedsError
from src.mp_common.rates import apply_rate
from src.mp_settlement.domain.models import FeeSplit, RoyaltyQuote

logger = logging.getLogger(__name__)


def compute_fee_split(
    payment_amount: int,
    seller: str,
    fee_rate: int,
    gratitude_rate: int,
    royalty: RoyaltyQuote | None,
) -> FeeSplit:
    remaining = payment_amount

    royalty_recipient: str | None = None
    royalty_amount = 0
    if royalty is not None and royalty.recipient != seller and royalty.amount > 0:
        if royalty.amount > remaining:
            raise RoyaltyExceedsProceedsError(royalty.amount, remaining)
        royalty_recipient = royalty.recipient
        royalty_amount = royalty.amount
        remaining -= royalty_amount

    app_fee = 0
    gratitude = 0
    if remaining > 0:
        app_fee_total = apply_rate(remaining, fee_rate)
        if gratitude_rate > 0:
            gratitude = apply_rate(app_fee_total, gratitude_rate)
        app_fee = app_fee_total - gratitude
        remaining -= app_fee_total

    return FeeSplit(
        payment_amount=payment_amount,
        royalty_recipient=royalty_recipient,
        royalty_amount=royalty_amount,
        app_fee=app_fee,
        gratitude=gratitude,
        seller_profit=remaining,
    )


def verify_conservation(split: FeeSplit) -> None:
    """Raises AssertionError if the legs do not add up to the payment exactly.

    INV-1: royalty + app_fee + gratitude + seller_profit == payment_amount
    INV-2: every leg is non-negative
    """
    assert split.distributed == split.payment_amount, (
        f"INV-1 violated: distributed={split.distributed} != payment={split.payment_amount}"
    )
    assert min(
        split.royalty_amount, split.app_fee, split.gratitude, split.seller_profit
    ) >= 0, f"INV-2 violated: negative leg in {split}"
    logger.debug("Waterfall OK: payment=%d", split.payment_amount)
