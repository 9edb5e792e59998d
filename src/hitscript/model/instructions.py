"""Instruction AST nodes for behavior scripts."""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from .expressions import Expression


class SetSpeed(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["set_speed"] = "set_speed"
    value: Expression


class SetDirection(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["set_direction"] = "set_direction"
    value: Expression


class Bounce(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["bounce"] = "bounce"


class Stop(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["stop"] = "stop"


class SetVariable(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["set_variable"] = "set_variable"
    name: str
    value: Expression


class IfInstruction(BaseModel):
    """Run *then_block* when *condition* is exactly ``true``.

    Any other result, non-boolean values included, runs *else_block*
    (when present).
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["if"] = "if"
    condition: Expression
    then_block: tuple[Instruction, ...]
    else_block: tuple[Instruction, ...] | None = None


class LoopInstruction(BaseModel):
    """Run *body* a bounded number of times.

    *count* is evaluated once, before the first iteration.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["loop"] = "loop"
    count: Expression
    body: tuple[Instruction, ...]


class PlaySample(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["play_sample"] = "play_sample"
    index: Expression


class SpawnBall(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["spawn_ball"] = "spawn_ball"
    x: Expression
    y: Expression
    speed: Expression
    direction: Expression


class Print(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["print"] = "print"
    value: Expression


Instruction = Annotated[
    Union[
        SetSpeed,
        SetDirection,
        Bounce,
        Stop,
        SetVariable,
        IfInstruction,
        LoopInstruction,
        PlaySample,
        SpawnBall,
        Print,
    ],
    Field(discriminator="kind"),
]

# Rebuild models with recursive Instruction references.
IfInstruction.model_rebuild()
LoopInstruction.model_rebuild()
