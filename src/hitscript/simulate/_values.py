"""Value helpers shared by the evaluator.

Defines the fail-soft defaults and the numeric rules (epsilon equality,
zero-safe division and modulo, loop-count truncation).
"""

from __future__ import annotations

import math

from hitscript.model.values import BooleanValue, NumberValue, Value


# Machine epsilon of a 32-bit float; ball state is single precision.
FLOAT32_EPSILON = 1.1920928955078125e-07

ZERO = NumberValue(value=0.0)
FALSE = BooleanValue(value=False)
TRUE = BooleanValue(value=True)


def boolean(flag: bool) -> BooleanValue:
    return TRUE if flag else FALSE


def numbers_equal(a: float, b: float) -> bool:
    return abs(a - b) < FLOAT32_EPSILON


def numbers_differ(a: float, b: float) -> bool:
    """Epsilon inequality.  Not the negation of equality: NaN is neither."""
    return abs(a - b) >= FLOAT32_EPSILON


def safe_div(a: float, b: float) -> float | None:
    """``a / b``, or None when *b* is zero."""
    if b == 0.0:
        return None
    return a / b


def safe_mod(a: float, b: float) -> float | None:
    """C-style remainder (sign of *a*), or None when *b* is zero.

    An infinite dividend has no remainder and yields NaN.
    """
    if b == 0.0:
        return None
    if math.isinf(a):
        return math.nan
    return math.fmod(a, b)


MAX_LOOP_ITERATIONS = 2**31 - 1


def loop_iterations(count: float) -> int:
    """Iterations for a loop count: truncate toward zero, never negative.

    Counts saturate at a signed 32-bit maximum; NaN runs zero times.
    """
    if math.isnan(count):
        return 0
    if math.isinf(count):
        return MAX_LOOP_ITERATIONS if count > 0 else 0
    return min(MAX_LOOP_ITERATIONS, max(0, math.trunc(count)))


def is_true(value: Value) -> bool:
    """Only ``Boolean(true)`` counts as true; there is no coercion."""
    return isinstance(value, BooleanValue) and value.value
