"""
Money is an integer count of minor currency units (paise). Floats never
enter the system: schemas declare monetary fields with ``Money``, which
refuses floats, booleans, numeric strings and anything outside the
signed 64-bit range, and the ORM stores them in BigInteger columns.
"""
from typing import Annotated

from pydantic import Field, Strict

# Range of the signed 64-bit BigInteger columns
MONEY_MIN = -(2 ** 63)
MONEY_MAX = 2 ** 63 - 1

Money = Annotated[int, Strict(), Field(ge=MONEY_MIN, le=MONEY_MAX)]


def is_positive_amount(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0
