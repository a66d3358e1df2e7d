import json
import logging
import math
from collections.abc import Mapping
from decimal import Decimal
from numbers import Real
from typing import Any, Optional

logger = logging.getLogger(__name__)

NEUTRAL_MULTIPLIER = 1.0


def _as_mapping(multipliers: Any) -> Optional[Mapping]:
    if isinstance(multipliers, (str, bytes)):
        try:
            multipliers = json.loads(multipliers)
        except ValueError:
            return None
    return multipliers if isinstance(multipliers, Mapping) else None


def _as_finite_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (Real, Decimal)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def resolve_multiplier(multipliers: Any, key: Optional[str], fallback: float = NEUTRAL_MULTIPLIER) -> float:
    """Pick ``multipliers[key]`` as a float, or ``fallback``.

    Multiplier maps are seller-managed JSON, so anything unusable (no map,
    no key, unknown key, non-numeric or non-finite value) resolves to the
    fallback instead of failing the quote. Values are returned unclamped.
    """
    if not key:
        return fallback
    mapping = _as_mapping(multipliers)
    if mapping is None or key not in mapping:
        return fallback
    number = _as_finite_number(mapping[key])
    if number is None:
        logger.debug(f"Ignoring malformed multiplier for key {key!r}: {mapping[key]!r}")
        return fallback
    return number


def month_key(month: Optional[int]) -> Optional[str]:
    return str(month) if month else None
