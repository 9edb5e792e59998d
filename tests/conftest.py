"""Shared test helpers for the hitscript test suite."""

from hitscript.model.ball import BallSnapshot
from hitscript.model.expressions import BinaryExpr, LiteralExpr
from hitscript.model.values import (
    BooleanValue,
    Direction,
    DirectionValue,
    NumberValue,
    StringValue,
)
from hitscript.simulate._context import ExecutionContext


def num(n):
    """Shorthand for a number literal expression."""
    return LiteralExpr(value=NumberValue(value=n))


def boolean(b):
    return LiteralExpr(value=BooleanValue(value=b))


def direction(d):
    return LiteralExpr(value=DirectionValue(value=d))


def text(s):
    return LiteralExpr(value=StringValue(value=s))


def binop(left, op, right):
    return BinaryExpr(left=left, op=op, right=right)


def make_ctx(**kwargs):
    """Build an ExecutionContext; ``variables`` may hold plain floats."""
    variables = kwargs.pop("variables", {})
    kwargs["variables"] = {
        name: NumberValue(value=v) if isinstance(v, (int, float)) else v
        for name, v in variables.items()
    }
    return ExecutionContext(**kwargs)


def make_ball(identity="ball1", **kwargs):
    kwargs.setdefault("x", 1.0)
    kwargs.setdefault("y", 2.0)
    kwargs.setdefault("speed", 1.0)
    kwargs.setdefault("direction", Direction.RIGHT)
    return BallSnapshot(identity=identity, **kwargs)