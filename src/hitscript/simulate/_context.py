"""Execution context and the persistent programmer state.

The context is a private snapshot built for one collision.  The state
outlives collisions: it owns the hit counters and the variable store,
and is the only thing the executor mutates between runs.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from hitscript.model.ball import BallSnapshot
from hitscript.model.values import Direction, Value


SquarePosition = tuple[int, int]


# ---------------------------------------------------------------------------
# ExecutionContext
# ---------------------------------------------------------------------------

@dataclass
class ExecutionContext:
    """World snapshot for a single interpreter run."""

    variables: dict[str, Value] = field(default_factory=dict)
    """name -> value; seeded from the state and written back on commit"""

    ball_hit_count: int = 0
    """collisions recorded for the colliding ball, this one included"""

    square_hit_count: int = 0
    """collisions recorded for the square, this one included"""

    ball_x: float = 0.0
    ball_y: float = 0.0
    ball_speed: float = 0.0
    ball_direction: Direction = Direction.RIGHT

    square_x: int = 0
    square_y: int = 0


# ---------------------------------------------------------------------------
# ProgrammerState
# ---------------------------------------------------------------------------

@dataclass
class ProgrammerState:
    """Hit counters and variables that persist across collisions.

    Missing entries read as 0 (counters) or absent (variables); none of
    the operations fail.
    """

    variables: dict[str, Value] = field(default_factory=dict)
    ball_hit_counts: dict[str, int] = field(default_factory=dict)
    square_hit_counts: dict[SquarePosition, int] = field(default_factory=dict)

    # -- counters --

    def increment_ball_hits(self, identity: str) -> int:
        count = self.ball_hit_counts.get(identity, 0) + 1
        self.ball_hit_counts[identity] = count
        return count

    def increment_square_hits(self, position: SquarePosition) -> int:
        count = self.square_hit_counts.get(position, 0) + 1
        self.square_hit_counts[position] = count
        return count

    def ball_hits(self, identity: str) -> int:
        return self.ball_hit_counts.get(identity, 0)

    def square_hits(self, position: SquarePosition) -> int:
        return self.square_hit_counts.get(position, 0)

    # -- context round trip --

    def snapshot_into_context(
        self,
        ball: BallSnapshot,
        square_position: SquarePosition,
    ) -> ExecutionContext:
        """Build a context from current counts and variables without mutating."""
        square_x, square_y = square_position
        return ExecutionContext(
            variables=dict(self.variables),
            ball_hit_count=self.ball_hits(ball.identity),
            square_hit_count=self.square_hits(square_position),
            ball_x=ball.x,
            ball_y=ball.y,
            ball_speed=ball.speed,
            ball_direction=ball.direction,
            square_x=square_x,
            square_y=square_y,
        )

    def commit(self, context: ExecutionContext) -> None:
        """Write the context's variables back into the store."""
        self.variables = dict(context.variables)

    # -- resets --

    def reset_hits(self, position: SquarePosition) -> None:
        """Forget the hit count of one square (e.g. when its cell is cleared)."""
        self.square_hit_counts.pop(position, None)

    def reset_all_hit_counts(self) -> None:
        self.ball_hit_counts.clear()
        self.square_hit_counts.clear()

    def reset_variables(self) -> None:
        self.variables.clear()

    def reset_all_state(self) -> None:
        self.reset_all_hit_counts()
        self.reset_variables()
