"""Integer arithmetic for 8-bit fee rates and base-unit amounts.

Rates are fixed-point fractions over 255 (one rate byte). All amounts are
non-negative ints in the asset's smallest unit. No float, no Decimal.
"""

from src.mp_common.errors import InvalidRateError

RATE_DENOMINATOR = 255
MAX_RATE = 255

BPS_DENOMINATOR = 10_000

DEFAULT_DECIMALS = 18


def validate_rate(rate: int) -> None:
    """Validate that a rate fits in one byte."""
    if not (0 <= rate <= MAX_RATE):
        raise InvalidRateError(rate)


def apply_rate(amount: int, rate: int) -> int:
    """Floor of amount * rate / 255. The remainder stays with the payer."""
    if amount == 0 or rate == 0:
        return 0
    return amount * rate // RATE_DENOMINATOR


def apply_bps(amount: int, bps: int) -> int:
    """Floor of amount * bps / 10000 (royalty schedules are quoted in bps)."""
    if amount == 0 or bps == 0:
        return 0
    return amount * bps // BPS_DENOMINATOR


def units_to_display(amount: int, decimals: int = DEFAULT_DECIMALS) -> str:
    """Render a base-unit amount: 500000000000000000 -> '0.5', 2*10**18 -> '2'."""
    sign = "-" if amount < 0 else ""
    whole, frac = divmod(abs(amount), 10**decimals)
    if frac == 0:
        return f"{sign}{whole:,}"
    frac_str = f"{frac:0{decimals}d}".rstrip("0")
    return f"{sign}{whole:,}.{frac_str}"
