"""Effects returned by the interpreter for the simulation driver to apply.

The interpreter never moves balls or plays audio itself.  It returns an
ordered list of these actions, which the driver applies in order.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from .program import Program
from .values import Direction


class SetSpeedAction(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["set_speed"] = "set_speed"
    speed: float


class SetDirectionAction(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["set_direction"] = "set_direction"
    direction: Direction


class BounceAction(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["bounce"] = "bounce"


class StopAction(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["stop"] = "stop"


class PlaySampleAction(BaseModel):
    """Play the sample at *index* in the ball's sample library."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["play_sample"] = "play_sample"
    index: int


class SpawnBallAction(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["spawn_ball"] = "spawn_ball"
    x: float
    y: float
    speed: float
    direction: Direction


class PrintAction(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["print"] = "print"
    text: str


class ExecuteProgramAction(BaseModel):
    """Ask the driver to run *program* through the executor next."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["execute_program"] = "execute_program"
    program: Program


class NoAction(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["none"] = "none"


ProgramAction = Annotated[
    Union[
        SetSpeedAction,
        SetDirectionAction,
        BounceAction,
        StopAction,
        PlaySampleAction,
        SpawnBallAction,
        PrintAction,
        ExecuteProgramAction,
        NoAction,
    ],
    Field(discriminator="kind"),
]
