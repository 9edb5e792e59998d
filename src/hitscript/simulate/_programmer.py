"""Collision-driven program execution with persistent hit counters."""

from __future__ import annotations

import logging
import random

from hitscript.model.actions import ProgramAction
from hitscript.model.ball import BallSnapshot
from hitscript.model.legacy import SquareProgram
from hitscript.model.program import Program

from ._context import ExecutionContext, ProgrammerState
from ._executor import ExecutionEngine

logger = logging.getLogger(__name__)


class ProgramExecutor:
    """Long-lived executor the simulation driver calls once per collision.

    Owns the :class:`ProgrammerState`.  Calls for the same ball or square
    must not interleave: the counter increment has to happen before the
    context is built, and the variable commit after the run.

    Parameters
    ----------
    state : ProgrammerState
        Persistent counters and variables.  A fresh store by default.
    rng : random.Random
        Passed to the :class:`ExecutionEngine` for ``RandomExpr`` draws.
    """

    def __init__(
        self,
        state: ProgrammerState | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.state = state if state is not None else ProgrammerState()
        self.engine = ExecutionEngine(rng=rng)

    @property
    def diagnostics(self):
        """Counts of fail-soft fallbacks taken so far."""
        return self.engine.diagnostics

    # -----------------------------------------------------------------------
    # Collisions
    # -----------------------------------------------------------------------

    def _begin_collision(
        self,
        ball: BallSnapshot,
        square_x: int,
        square_y: int,
    ) -> ExecutionContext:
        position = (square_x, square_y)
        ball_hits = self.state.increment_ball_hits(ball.identity)
        square_hits = self.state.increment_square_hits(position)
        logger.debug(
            "Ball %s hits: %d, square (%d,%d) hits: %d",
            ball.identity, ball_hits, square_x, square_y, square_hits,
        )
        return self.state.snapshot_into_context(ball, position)

    def execute_on_collision(
        self,
        program: Program,
        ball: BallSnapshot,
        square_x: int,
        square_y: int,
    ) -> list[ProgramAction]:
        """Record the collision, run *program* and return its actions.

        Both hit counters are incremented before the context is built, so
        the program sees a count that includes this collision.
        """
        context = self._begin_collision(ball, square_x, square_y)
        actions = self.engine.execute_program(program, context)
        self.state.commit(context)
        return actions

    def execute_for_square(
        self,
        square: SquareProgram,
        ball: BallSnapshot,
        square_x: int,
        square_y: int,
    ) -> list[ProgramAction]:
        """Run a square's active program, or its legacy steps if none is active."""
        program = square.get_active_program()
        if program is not None:
            return self.execute_on_collision(program, ball, square_x, square_y)

        context = self._begin_collision(ball, square_x, square_y)
        return self.engine.execute_steps(square.steps, square.programs, context)

    def execute_program(self, program: Program, context: ExecutionContext) -> list[ProgramAction]:
        """Run *program* against an existing context.

        Drivers use this to re-dispatch an ``ExecuteProgramAction``; no
        counters are touched and variables are committed afterwards.
        """
        actions = self.engine.execute_program(program, context)
        self.state.commit(context)
        return actions

    # -----------------------------------------------------------------------
    # State management
    # -----------------------------------------------------------------------

    def reset_hits(self, square_x: int, square_y: int) -> None:
        self.state.reset_hits((square_x, square_y))

    def reset_all_hit_counts(self) -> None:
        self.state.reset_all_hit_counts()

    def reset_variables(self) -> None:
        self.state.reset_variables()

    def reset_all_state(self) -> None:
        self.state.reset_all_state()
