"""Exact parsing and comparison of Kubernetes resource quantities (``10Gi``, ``500m``, ``1e3``)."""

from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation
from typing import Any, Union

BINARY_MULTIPLIERS = {
    "Ki": Decimal(1024),
    "Mi": Decimal(1024) ** 2,
    "Gi": Decimal(1024) ** 3,
    "Ti": Decimal(1024) ** 4,
    "Pi": Decimal(1024) ** 5,
    "Ei": Decimal(1024) ** 6,
}

DECIMAL_MULTIPLIERS = {
    "n": Decimal("1e-9"),
    "u": Decimal("1e-6"),
    "m": Decimal("1e-3"),
    "": Decimal(1),
    "k": Decimal(10) ** 3,
    "K": Decimal(10) ** 3,
    "M": Decimal(10) ** 6,
    "G": Decimal(10) ** 9,
    "T": Decimal(10) ** 12,
    "P": Decimal(10) ** 15,
    "E": Decimal(10) ** 18,
}

_QUANTITY_PATTERN = re.compile(
    r"^(?P<number>[+-]?(?:\d+(?:\.\d*)?|\.\d+))"
    r"(?P<suffix>Ki|Mi|Gi|Ti|Pi|Ei|[eE][+-]?\d+|[numkKMGTPE])?$"
)

QuantityLike = Union[str, int, float, Decimal]


def parse_quantity(value: Any) -> Decimal:
    """Return the exact numeric value of a quantity.

    Raises ``ValueError`` for anything that is not a valid quantity.
    """

    if isinstance(value, bool):
        raise ValueError(f"invalid quantity: {value!r}")
    if isinstance(value, Decimal):
        return value
    if isinstance(value, (int, float)):
        return Decimal(str(value))
    if not isinstance(value, str):
        raise ValueError(f"invalid quantity: {value!r}")

    match = _QUANTITY_PATTERN.match(value.strip())
    if match is None:
        raise ValueError(f"invalid quantity: {value!r}")

    try:
        number = Decimal(match.group("number"))
    except InvalidOperation as exc:  # pragma: no cover - regex guards the format
        raise ValueError(f"invalid quantity: {value!r}") from exc

    suffix = match.group("suffix") or ""
    if suffix in BINARY_MULTIPLIERS:
        return number * BINARY_MULTIPLIERS[suffix]
    if suffix[:1] in ("e", "E") and len(suffix) > 1:
        return number.scaleb(int(suffix[1:]))
    return number * DECIMAL_MULTIPLIERS[suffix]


def compare_quantities(left: QuantityLike, right: QuantityLike) -> int:
    """Return -1, 0 or 1 as ``left`` is smaller than, equal to or larger than ``right``."""

    a = parse_quantity(left)
    b = parse_quantity(right)
    if a < b:
        return -1
    if a > b:
        return 1
    return 0


__all__ = ["compare_quantities", "parse_quantity"]
