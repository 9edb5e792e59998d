"""Tree-walking interpreter for behavior scripts.

Evaluation is total: type mismatches, unknown variables and zero divisors
fall back to safe defaults (``0``, ``false`` or a dropped instruction)
instead of raising, so one bad script can never stall the simulation.
Each fallback is logged at DEBUG level and counted in
:attr:`ExecutionEngine.diagnostics`.
"""

from __future__ import annotations

import logging
import math
import random
from collections import Counter
from collections.abc import Callable, Sequence

from hitscript.model.actions import (
    BounceAction,
    ExecuteProgramAction,
    PlaySampleAction,
    PrintAction,
    ProgramAction,
    SetDirectionAction,
    SetSpeedAction,
    SpawnBallAction,
    StopAction,
)
from hitscript.model.expressions import (
    BallProperty,
    BallPropertyExpr,
    BinaryExpr,
    BinaryOp,
    Expression,
    LiteralExpr,
    RandomExpr,
    VariableRef,
)
from hitscript.model.instructions import (
    IfInstruction,
    Instruction,
    LoopInstruction,
    PlaySample,
    Print,
    SetDirection,
    SetSpeed,
    SetVariable,
    SpawnBall,
)
from hitscript.model.legacy import (
    BounceEffect,
    ChangeDirectionEffect,
    ExecuteProgramEffect,
    PlaySampleEffect,
    ProgramStep,
    SpeedMultiplyEffect,
    StopEffect,
)
from hitscript.model.program import Program
from hitscript.model.values import (
    BooleanValue,
    DirectionValue,
    NumberValue,
    Value,
    value_to_text,
)

from ._context import ExecutionContext
from ._values import (
    FALSE,
    ZERO,
    boolean,
    is_true,
    loop_iterations,
    numbers_differ,
    numbers_equal,
    safe_div,
    safe_mod,
)

logger = logging.getLogger(__name__)


# Fallback counter keys
UNRESOLVED_VARIABLE = "unresolved_variable"
TYPE_MISMATCH = "type_mismatch"
DIVISION_BY_ZERO = "division_by_zero"
DROPPED_INSTRUCTION = "dropped_instruction"
EMPTY_RANDOM_RANGE = "empty_random_range"


# ---------------------------------------------------------------------------
# ExecutionEngine
# ---------------------------------------------------------------------------

class ExecutionEngine:
    """Evaluate expressions and run instruction lists against a context.

    The engine performs no side effects of its own beyond writing
    ``context.variables``; every other effect is returned as a
    :data:`ProgramAction` for the caller to apply.

    Parameters
    ----------
    rng : random.Random
        Source for ``RandomExpr`` draws.  Defaults to a freshly seeded
        generator, so draws are not reproducible unless one is injected.
    """

    def __init__(self, rng: random.Random | None = None) -> None:
        self.rng = rng if rng is not None else random.Random()
        self.diagnostics: Counter[str] = Counter()

    def _fallback(self, key: str, message: str, *args: object) -> None:
        self.diagnostics[key] += 1
        logger.debug(message, *args)

    # -----------------------------------------------------------------------
    # Public API
    # -----------------------------------------------------------------------

    def execute(
        self,
        instructions: Sequence[Instruction],
        context: ExecutionContext,
    ) -> list[ProgramAction]:
        """Run *instructions* top to bottom and return the emitted actions."""
        actions: list[ProgramAction] = []
        for instr in instructions:
            self._exec_instr(instr, context, actions)
        return actions

    def execute_program(self, program: Program, context: ExecutionContext) -> list[ProgramAction]:
        return self.execute(program.instructions, context)

    def execute_steps(
        self,
        steps: Sequence[ProgramStep],
        programs: Sequence[Program],
        context: ExecutionContext,
    ) -> list[ProgramAction]:
        """Run the legacy step table for a square without an active program.

        Every step whose ``trigger_hits`` equals the square's hit count
        fires, in table order.
        """
        actions: list[ProgramAction] = []
        for step in steps:
            if step.trigger_hits != context.square_hit_count:
                continue
            action = self._step_action(step, programs, context)
            if action is not None:
                actions.append(action)
        return actions

    def evaluate(self, expr: Expression, context: ExecutionContext) -> Value:
        """Evaluate *expr*; never raises."""
        handler = self._EXPR_DISPATCH[expr.kind]
        return handler(self, expr, context)

    # -----------------------------------------------------------------------
    # Instruction dispatch
    # -----------------------------------------------------------------------

    def _exec_instr(
        self,
        instr: Instruction,
        context: ExecutionContext,
        actions: list[ProgramAction],
    ) -> None:
        handler = self._INSTR_DISPATCH[instr.kind]
        handler(self, instr, context, actions)

    def _exec_body(
        self,
        body: Sequence[Instruction],
        context: ExecutionContext,
        actions: list[ProgramAction],
    ) -> None:
        for instr in body:
            self._exec_instr(instr, context, actions)

    def _drop(self, instr: Instruction, value: Value) -> None:
        self._fallback(
            DROPPED_INSTRUCTION,
            "Dropping %s instruction: got %s value",
            instr.kind, value.kind,
        )

    def _exec_set_speed(
        self,
        instr: SetSpeed,
        context: ExecutionContext,
        actions: list[ProgramAction],
    ) -> None:
        value = self.evaluate(instr.value, context)
        if isinstance(value, NumberValue):
            actions.append(SetSpeedAction(speed=value.value))
        else:
            self._drop(instr, value)

    def _exec_set_direction(
        self,
        instr: SetDirection,
        context: ExecutionContext,
        actions: list[ProgramAction],
    ) -> None:
        value = self.evaluate(instr.value, context)
        if isinstance(value, DirectionValue):
            actions.append(SetDirectionAction(direction=value.value))
        else:
            self._drop(instr, value)

    def _exec_bounce(
        self,
        _instr: Instruction,
        _context: ExecutionContext,
        actions: list[ProgramAction],
    ) -> None:
        actions.append(BounceAction())

    def _exec_stop(
        self,
        _instr: Instruction,
        _context: ExecutionContext,
        actions: list[ProgramAction],
    ) -> None:
        actions.append(StopAction())

    def _exec_set_variable(
        self,
        instr: SetVariable,
        context: ExecutionContext,
        _actions: list[ProgramAction],
    ) -> None:
        context.variables[instr.name] = self.evaluate(instr.value, context)

    def _exec_if(
        self,
        instr: IfInstruction,
        context: ExecutionContext,
        actions: list[ProgramAction],
    ) -> None:
        if is_true(self.evaluate(instr.condition, context)):
            self._exec_body(instr.then_block, context, actions)
        elif instr.else_block is not None:
            self._exec_body(instr.else_block, context, actions)

    def _exec_loop(
        self,
        instr: LoopInstruction,
        context: ExecutionContext,
        actions: list[ProgramAction],
    ) -> None:
        count = self.evaluate(instr.count, context)
        if not isinstance(count, NumberValue):
            self._fallback(
                TYPE_MISMATCH,
                "Skipping loop: count evaluated to %s", count.kind,
            )
            return
        for _ in range(loop_iterations(count.value)):
            self._exec_body(instr.body, context, actions)

    def _exec_play_sample(
        self,
        instr: PlaySample,
        context: ExecutionContext,
        actions: list[ProgramAction],
    ) -> None:
        value = self.evaluate(instr.index, context)
        if isinstance(value, NumberValue) and math.isfinite(value.value):
            # Negative indices saturate to the first sample
            actions.append(PlaySampleAction(index=max(0, math.trunc(value.value))))
        else:
            self._drop(instr, value)

    def _exec_spawn_ball(
        self,
        instr: SpawnBall,
        context: ExecutionContext,
        actions: list[ProgramAction],
    ) -> None:
        x = self.evaluate(instr.x, context)
        y = self.evaluate(instr.y, context)
        speed = self.evaluate(instr.speed, context)
        direction = self.evaluate(instr.direction, context)

        if (
            isinstance(x, NumberValue)
            and isinstance(y, NumberValue)
            and isinstance(speed, NumberValue)
            and isinstance(direction, DirectionValue)
        ):
            actions.append(SpawnBallAction(
                x=x.value,
                y=y.value,
                speed=speed.value,
                direction=direction.value,
            ))
        else:
            self._fallback(
                DROPPED_INSTRUCTION,
                "Dropping spawn_ball: got (%s, %s, %s, %s)",
                x.kind, y.kind, speed.kind, direction.kind,
            )

    def _exec_print(
        self,
        instr: Print,
        context: ExecutionContext,
        actions: list[ProgramAction],
    ) -> None:
        value = self.evaluate(instr.value, context)
        actions.append(PrintAction(text=value_to_text(value)))

    # Instruction dispatch table
    _INSTR_DISPATCH: dict[str, Callable[..., None]] = {
        "set_speed": _exec_set_speed,
        "set_direction": _exec_set_direction,
        "bounce": _exec_bounce,
        "stop": _exec_stop,
        "set_variable": _exec_set_variable,
        "if": _exec_if,
        "loop": _exec_loop,
        "play_sample": _exec_play_sample,
        "spawn_ball": _exec_spawn_ball,
        "print": _exec_print,
    }

    # -----------------------------------------------------------------------
    # Legacy steps
    # -----------------------------------------------------------------------

    def _step_action(
        self,
        step: ProgramStep,
        programs: Sequence[Program],
        context: ExecutionContext,
    ) -> ProgramAction | None:
        effect = step.effect
        if isinstance(effect, BounceEffect):
            return BounceAction()
        if isinstance(effect, StopEffect):
            return StopAction()
        if isinstance(effect, SpeedMultiplyEffect):
            return SetSpeedAction(speed=context.ball_speed * effect.factor)
        if isinstance(effect, ChangeDirectionEffect):
            return SetDirectionAction(direction=effect.direction)
        if isinstance(effect, PlaySampleEffect):
            return PlaySampleAction(index=effect.index)
        if isinstance(effect, ExecuteProgramEffect):
            if effect.program_index < len(programs):
                return ExecuteProgramAction(program=programs[effect.program_index])
            self._fallback(
                DROPPED_INSTRUCTION,
                "Dropping execute_program step: no program at index %d (have %d)",
                effect.program_index, len(programs),
            )
        return None

    # -----------------------------------------------------------------------
    # Expression dispatch
    # -----------------------------------------------------------------------

    def _eval_literal(self, expr: LiteralExpr, _context: ExecutionContext) -> Value:
        return expr.value

    def _eval_variable_ref(self, expr: VariableRef, context: ExecutionContext) -> Value:
        value = context.variables.get(expr.name)
        if value is None:
            self._fallback(
                UNRESOLVED_VARIABLE,
                "Variable '%s' not set, reading as 0", expr.name,
            )
            return ZERO
        return value

    def _eval_binary(self, expr: BinaryExpr, context: ExecutionContext) -> Value:
        # No short-circuit: both sides are always evaluated
        left = self.evaluate(expr.left, context)
        right = self.evaluate(expr.right, context)
        return self._apply_binop(expr.op, left, right)

    def _apply_binop(self, op: BinaryOp, left: Value, right: Value) -> Value:
        if isinstance(left, NumberValue) and isinstance(right, NumberValue):
            return self._apply_number_op(op, left.value, right.value)
        if isinstance(left, BooleanValue) and isinstance(right, BooleanValue):
            return self._apply_boolean_op(op, left.value, right.value)
        self._fallback(
            TYPE_MISMATCH,
            "No %s between %s and %s, yielding false", op.value, left.kind, right.kind,
        )
        return FALSE

    def _apply_number_op(self, op: BinaryOp, a: float, b: float) -> Value:
        if op == BinaryOp.ADD:
            return NumberValue(value=a + b)
        if op == BinaryOp.SUB:
            return NumberValue(value=a - b)
        if op == BinaryOp.MUL:
            return NumberValue(value=a * b)
        if op in (BinaryOp.DIV, BinaryOp.MOD):
            result = safe_div(a, b) if op == BinaryOp.DIV else safe_mod(a, b)
            if result is None:
                self._fallback(
                    DIVISION_BY_ZERO, "%s by zero, yielding 0", op.value,
                )
                return ZERO
            return NumberValue(value=result)

        # Comparison
        if op == BinaryOp.EQ:
            return boolean(numbers_equal(a, b))
        if op == BinaryOp.NE:
            return boolean(numbers_differ(a, b))
        if op == BinaryOp.LT:
            return boolean(a < b)
        if op == BinaryOp.GT:
            return boolean(a > b)
        if op == BinaryOp.LE:
            return boolean(a <= b)
        if op == BinaryOp.GE:
            return boolean(a >= b)

        self._fallback(
            TYPE_MISMATCH, "%s is not defined on numbers, yielding false", op.value,
        )
        return FALSE

    def _apply_boolean_op(self, op: BinaryOp, a: bool, b: bool) -> Value:
        if op == BinaryOp.AND:
            return boolean(a and b)
        if op == BinaryOp.OR:
            return boolean(a or b)
        if op == BinaryOp.EQ:
            return boolean(a == b)
        if op == BinaryOp.NE:
            return boolean(a != b)

        self._fallback(
            TYPE_MISMATCH, "%s is not defined on booleans, yielding false", op.value,
        )
        return FALSE

    def _eval_ball_property(
        self,
        expr: BallPropertyExpr,
        context: ExecutionContext,
    ) -> Value:
        prop = expr.prop
        if prop == BallProperty.SPEED:
            return NumberValue(value=context.ball_speed)
        if prop == BallProperty.DIRECTION:
            return DirectionValue(value=context.ball_direction)
        if prop == BallProperty.X:
            return NumberValue(value=context.ball_x)
        if prop == BallProperty.Y:
            return NumberValue(value=context.ball_y)
        return NumberValue(value=float(context.ball_hit_count))

    def _eval_random(self, expr: RandomExpr, _context: ExecutionContext) -> Value:
        if not expr.max > expr.min:
            self._fallback(
                EMPTY_RANDOM_RANGE,
                "Empty random range [%s, %s), yielding min", expr.min, expr.max,
            )
            return NumberValue(value=expr.min)
        span = expr.max - expr.min
        drawn = expr.min + self.rng.random() * span
        # Rounding can land on max; keep the range half-open
        if drawn >= expr.max:
            drawn = expr.min
        return NumberValue(value=drawn)

    # Expression dispatch table
    _EXPR_DISPATCH: dict[str, Callable[..., Value]] = {
        "literal": _eval_literal,
        "variable_ref": _eval_variable_ref,
        "binary": _eval_binary,
        "ball_property": _eval_ball_property,
        "random": _eval_random,
    }
