"""hitscript simulator — collision-driven execution of behavior scripts.

Entry point::

    from hitscript.model.ball import BallSnapshot
    from hitscript.simulate import ProgramExecutor
    from hitscript.parser import parse_program

    executor = ProgramExecutor()
    program = parse_program(source)
    actions = executor.execute_on_collision(program, ball, 3, 4)

For one-off runs, :func:`run` does the parse and the collision in one call.
"""

from __future__ import annotations

from hitscript.model.actions import ProgramAction
from hitscript.model.ball import BallSnapshot
from hitscript.parser import parse_program

from ._context import ExecutionContext, ProgrammerState
from ._executor import ExecutionEngine
from ._programmer import ProgramExecutor


def run(
    source: str,
    ball: BallSnapshot,
    *,
    square: tuple[int, int] = (0, 0),
    state: ProgrammerState | None = None,
) -> list[ProgramAction]:
    """Parse *source* and run it as one collision of *ball* with *square*.

    Parameters
    ----------
    source
        Script text starting with ``def <name>``.
    ball
        The colliding ball.
    square
        Grid position of the square that was hit.
    state
        Persistent state to count hits in.  Pass the same store across
        calls to accumulate hit counts; a fresh one is used otherwise.

    Returns
    -------
    list[ProgramAction]
        The actions the program emitted, in order.

    Raises
    ------
    ParseError
        If *source* does not parse.
    """
    program = parse_program(source)
    executor = ProgramExecutor(state=state)
    return executor.execute_on_collision(program, ball, square[0], square[1])


__all__ = [
    "ExecutionContext",
    "ExecutionEngine",
    "ProgramExecutor",
    "ProgrammerState",
    "run",
]
