# storefront/domain/money.py
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def round2(value: Decimal) -> Decimal:
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def line_total(price, count: int) -> Decimal:
    return round2(Decimal(str(price)) * count)


def lines_total(lines: Iterable) -> Decimal:
    return sum((line_total(line.price, line.count) for line in lines), ZERO)


def apply_discount(total: Decimal, percent: int) -> Decimal:
    return round2(Decimal(total) * (Decimal(100) - Decimal(percent)) / Decimal(100))
