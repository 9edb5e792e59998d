"""Runtime values for the behavior scripting language.

Values are immutable tagged variants.  They compare structurally, which
is what the evaluator relies on for Boolean/Direction equality.  Numbers
compare with a tolerance inside the evaluator, not here.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Direction
# ---------------------------------------------------------------------------

class Direction(str, Enum):
    """The eight compass directions a ball can travel in."""

    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    UP_LEFT = "up-left"
    UP_RIGHT = "up-right"
    DOWN_LEFT = "down-left"
    DOWN_RIGHT = "down-right"

    def reversed(self) -> Direction:
        return _OPPOSITES[self]


_OPPOSITES: dict[Direction, Direction] = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
    Direction.UP_LEFT: Direction.DOWN_RIGHT,
    Direction.UP_RIGHT: Direction.DOWN_LEFT,
    Direction.DOWN_LEFT: Direction.UP_RIGHT,
    Direction.DOWN_RIGHT: Direction.UP_LEFT,
}


# ---------------------------------------------------------------------------
# Value variants
# ---------------------------------------------------------------------------

class NumberValue(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["number"] = "number"
    value: float


class DirectionValue(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["direction"] = "direction"
    value: Direction


class BooleanValue(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["boolean"] = "boolean"
    value: bool


class StringValue(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["string"] = "string"
    value: str


Value = Annotated[
    Union[
        NumberValue,
        DirectionValue,
        BooleanValue,
        StringValue,
    ],
    Field(discriminator="kind"),
]


# ---------------------------------------------------------------------------
# Display
# ---------------------------------------------------------------------------

def _format_number(n: float) -> str:
    if n == int(n) and abs(n) < 1e16:
        return str(int(n))
    return repr(n)


def value_to_text(value: Value) -> str:
    """Render a value the way ``print`` shows it.

    Whole numbers drop their fractional part (``3`` not ``3.0``), booleans
    are lowercase and directions use their compass word.
    """
    if isinstance(value, NumberValue):
        n = value.value
        if n != n or n in (float("inf"), float("-inf")):
            return repr(n)
        return _format_number(n)
    if isinstance(value, BooleanValue):
        return "true" if value.value else "false"
    if isinstance(value, DirectionValue):
        return value.value.value
    return value.value
