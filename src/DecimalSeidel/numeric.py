""" Exact decimal arithmetic used by the solver and the problem builder.

All numbers are `decimal.Decimal`. Binary floats are never accepted: a
float has already lost the exact value the user typed.

Literals are limited the way a 96-bit decimal is: at most 28 significant
digits, a magnitude below 10**29 and at most 28 digits after the point.
Values produced by the iteration itself may leave that range; only the
28-digit precision applies to them.
"""
from decimal import (
    Context,
    Decimal,
    DivisionByZero,
    Inexact,
    InvalidOperation,
    Overflow,
    ROUND_HALF_EVEN,
)
from numbers import Integral
from typing import Any

import numpy as np
from numpy.typing import NDArray

# significant digits of a 96-bit decimal mantissa
DECIMAL_PRECISION = 28
# largest adjusted exponent and largest scale of a literal
MAX_EXPONENT = 28
MAX_SCALE = 28

ARITHMETIC_CONTEXT = Context(
    prec=DECIMAL_PRECISION,
    rounding=ROUND_HALF_EVEN,
    traps=[InvalidOperation, DivisionByZero, Overflow],
)

PARSE_CONTEXT = Context(
    prec=DECIMAL_PRECISION,
    rounding=ROUND_HALF_EVEN,
    traps=[InvalidOperation, DivisionByZero, Overflow, Inexact],
)

ZERO = Decimal(0)
ONE = Decimal(1)


class LiteralError(ValueError):
    """ A numeric literal could not be turned into a Decimal. """

    def __init__(self, literal: Any, reason: str) -> None:
        super().__init__(reason)
        self.literal = literal
        self.reason = reason


class LiteralSyntaxError(LiteralError):
    pass


class LiteralPrecisionError(LiteralError):
    pass


def to_decimal(value: Any) -> Decimal:
    """
    Converts a numeric literal into an exact Decimal.

    :param value: a `str`, an integer or a `Decimal`
    :raises LiteralSyntaxError: malformed or non-finite literal, or a type
        that cannot hold an exact decimal (float, bool, ...)
    :raises LiteralPrecisionError: the literal needs more than
        `DECIMAL_PRECISION` significant digits
    """
    if isinstance(value, Integral) and not isinstance(value, bool):
        value = int(value)
    elif not isinstance(value, (str, Decimal)):
        raise LiteralSyntaxError(
            value, f"Expected a numeric literal, got {type(value).__name__}"
        )

    text = value.strip() if isinstance(value, str) else value
    try:
        number = PARSE_CONTEXT.create_decimal(text)
    except Inexact:
        raise LiteralPrecisionError(
            value, "Can't represent such precise value"
        ) from None
    except InvalidOperation:
        raise LiteralSyntaxError(
            value, f"Invalid decimal literal: {value!r}"
        ) from None

    if not number.is_finite():
        raise LiteralSyntaxError(value, f"Value must be finite: {value!r}")
    too_large = not number.is_zero() and number.adjusted() > MAX_EXPONENT
    if too_large or number.as_tuple().exponent < -MAX_SCALE:
        raise LiteralPrecisionError(value, "Can't represent such precise value")
    return number


def to_decimal_array(values: Any) -> NDArray:
    """ Builds an object array of Decimals with the shape of `values`. """
    raw = np.array(values, dtype=object)
    converted = np.empty(raw.shape, dtype=object)
    for index, value in np.ndenumerate(raw):
        converted[index] = to_decimal(value)
    return converted


def format_decimal(value: Decimal, places: int | None = None) -> str:
    """ Plain (never scientific) text for a Decimal. """
    if places is not None:
        # wide enough for every digit left of the point plus `places`
        context = ARITHMETIC_CONTEXT.copy()
        context.prec = max(DECIMAL_PRECISION, value.adjusted() + places + 2)
        exponent = Decimal(1).scaleb(-places)
        value = value.quantize(exponent, context=context)
    if value.is_zero():
        value = abs(value)
    return format(value, 'f')
