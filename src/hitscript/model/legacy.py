"""Square program slots and the legacy hit-count step table.

Before squares carried scripts, each square held a table of static
effects keyed by hit count.  Squares without an active program still
react through that table.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, model_validator

from .program import Program
from .values import Direction


# ---------------------------------------------------------------------------
# Step effects
# ---------------------------------------------------------------------------

class BounceEffect(BaseModel):
    kind: Literal["bounce"] = "bounce"


class StopEffect(BaseModel):
    kind: Literal["stop"] = "stop"


class SpeedMultiplyEffect(BaseModel):
    kind: Literal["speed_multiply"] = "speed_multiply"
    factor: float


class ChangeDirectionEffect(BaseModel):
    kind: Literal["change_direction"] = "change_direction"
    direction: Direction


class PlaySampleEffect(BaseModel):
    kind: Literal["play_sample"] = "play_sample"
    index: int = Field(ge=0)


class ExecuteProgramEffect(BaseModel):
    """Dispatch the square's program at *program_index*."""

    kind: Literal["execute_program"] = "execute_program"
    program_index: int = Field(ge=0)


StepEffect = Annotated[
    Union[
        BounceEffect,
        StopEffect,
        SpeedMultiplyEffect,
        ChangeDirectionEffect,
        PlaySampleEffect,
        ExecuteProgramEffect,
    ],
    Field(discriminator="kind"),
]


class ProgramStep(BaseModel):
    """Fire *effect* on the collision that brings the square to *trigger_hits*."""

    trigger_hits: int = Field(ge=1)
    effect: StepEffect


# ---------------------------------------------------------------------------
# Square program slot
# ---------------------------------------------------------------------------

class SquareProgram(BaseModel):
    """Programs attached to one square, and which one is active.

    When *active_program* is None, collisions fall back to *steps*.
    """

    programs: list[Program] = []
    active_program: int | None = None
    steps: list[ProgramStep] = []

    @model_validator(mode="after")
    def _active_in_range(self):
        if self.active_program is not None and not (
            0 <= self.active_program < len(self.programs)
        ):
            raise ValueError(
                f"active_program {self.active_program} out of range "
                f"(0..{len(self.programs) - 1})"
            )
        return self

    def add_program(self, program: Program) -> int:
        """Append *program* and return its index."""
        self.programs.append(program)
        return len(self.programs) - 1

    def set_active_program(self, index: int | None) -> None:
        if index is not None and not (0 <= index < len(self.programs)):
            raise IndexError(
                f"Program index {index} out of range (0..{len(self.programs) - 1})"
            )
        self.active_program = index

    def get_active_program(self) -> Program | None:
        if self.active_program is None:
            return None
        return self.programs[self.active_program]
