"""Read-only view of a ball handed to the executor on collision."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from .values import Direction


class BallSnapshot(BaseModel):
    """State of the colliding ball at the moment of impact.

    *identity* keys the per-ball hit counter, so it must stay stable for
    the lifetime of the ball.
    """

    model_config = ConfigDict(frozen=True)

    identity: str
    x: float
    y: float
    speed: float = Field(default=1.0, ge=0.0)
    direction: Direction = Direction.RIGHT
    color: str = "white"
