from decimal import ROUND_HALF_UP, Decimal


def round_half_up(value: float, digits: int = 0) -> Decimal:
    """Round away from zero on ties (``round(2.5) == 2`` in Python, 3 here)."""
    quantum = Decimal(1).scaleb(-digits)
    return Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP)
