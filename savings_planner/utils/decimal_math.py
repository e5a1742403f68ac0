from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP, getcontext

getcontext().prec = 28


def to_decimal(x) -> Decimal:
    if isinstance(x, Decimal):
        return x
    return Decimal(str(x))


def whole_units(x) -> Decimal:
    # Half-units round away from zero.
    return to_decimal(x).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
