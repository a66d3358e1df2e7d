import math
from decimal import Decimal, ROUND_HALF_UP, localcontext

_ONE = Decimal("1")

# Enough digits for any finite float, the largest of which has 309 integer digits
_PRECISION = 400


def round_cents(value: float) -> int:
    """Round to the nearest integer cent, halves away from zero.

    The float goes through its shortest repr so ``12400 * 1.1``
    (13640.000000000002) and ``0.5`` round the way a person reading them would.
    Raises ``ValueError`` for NaN and infinities.
    """
    if not math.isfinite(value):
        raise ValueError(f"cannot round non-finite amount {value!r}")
    with localcontext() as ctx:
        ctx.prec = _PRECISION
        return int(Decimal(str(value)).quantize(_ONE, rounding=ROUND_HALF_UP))
