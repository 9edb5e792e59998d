"""Expression AST nodes for behavior scripts."""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from .values import Value


class BinaryOp(str, Enum):
    ADD = "ADD"
    SUB = "SUB"
    MUL = "MUL"
    DIV = "DIV"
    MOD = "MOD"
    EQ = "EQ"
    NE = "NE"
    LT = "LT"
    GT = "GT"
    LE = "LE"
    GE = "GE"
    AND = "AND"
    OR = "OR"


class BallProperty(str, Enum):
    """Properties of the colliding ball readable from a script."""

    SPEED = "speed"
    DIRECTION = "direction"
    X = "x"
    Y = "y"
    HIT_COUNT = "hit_count"


class LiteralExpr(BaseModel):
    """A constant value (e.g. 2.5, true, up-left)."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["literal"] = "literal"
    value: Value


class VariableRef(BaseModel):
    """Reference to a script variable by name."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["variable_ref"] = "variable_ref"
    name: str


class BinaryExpr(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["binary"] = "binary"
    op: BinaryOp
    left: Expression
    right: Expression


class BallPropertyExpr(BaseModel):
    """Read a property of the ball that triggered the collision."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["ball_property"] = "ball_property"
    prop: BallProperty


class RandomExpr(BaseModel):
    """Uniform draw in ``[min, max)``, re-rolled on every evaluation."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["random"] = "random"
    min: float
    max: float


Expression = Annotated[
    Union[
        LiteralExpr,
        VariableRef,
        BinaryExpr,
        BallPropertyExpr,
        RandomExpr,
    ],
    Field(discriminator="kind"),
]

# Rebuild models with recursive Expression references.
BinaryExpr.model_rebuild()
