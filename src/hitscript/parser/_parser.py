"""Line-oriented parser for square behavior scripts.

Grammar (lines are trimmed, blank lines ignored)::

    program   ::= "def" IDENT NEWLINE statement* ("return")?
    statement ::= if_stmt | set_stmt
    if_stmt   ::= "if" IDENT "hits" TARGET COUNT "times"
    set_stmt  ::= "set" "speed" ( NUMBER | "relative" SIGNED_NUMBER )
                | "set" "direction" DIRECTION_WORD

The color and target of an ``if`` line are accepted but not checked: every
``if`` becomes a plain hit-count threshold whose body is a single bounce.
"""

from __future__ import annotations

import re

from hitscript.model.expressions import (
    BallProperty,
    BallPropertyExpr,
    BinaryExpr,
    BinaryOp,
    Expression,
    LiteralExpr,
)
from hitscript.model.instructions import (
    Bounce,
    IfInstruction,
    Instruction,
    SetDirection,
    SetSpeed,
)
from hitscript.model.program import Program
from hitscript.model.values import Direction, DirectionValue, NumberValue


# ---------------------------------------------------------------------------
# ParseError
# ---------------------------------------------------------------------------

class ParseError(Exception):
    """Error while parsing script text, with the offending line."""

    def __init__(self, message: str, line_number: int | None = None, line: str | None = None):
        self.line_number = line_number
        self.line = line
        loc = ""
        if line_number is not None:
            loc = f" (line {line_number})"
        super().__init__(f"{message}{loc}")


# ---------------------------------------------------------------------------
# Lexical helpers
# ---------------------------------------------------------------------------

_NUMBER_RE = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?$")
_COUNT_RE = re.compile(r"^\+?\d+$")

_DIRECTION_WORDS: dict[str, Direction] = {d.value: d for d in Direction}


def _significant_lines(source: str) -> list[tuple[int, str]]:
    """Return ``(line_number, trimmed_text)`` for every non-blank line."""
    return [
        (i, line.strip())
        for i, line in enumerate(source.splitlines(), start=1)
        if line.strip()
    ]


def _parse_number(token: str, lineno: int, line: str) -> float:
    if not _NUMBER_RE.match(token):
        raise ParseError(f"Invalid number '{token}'", lineno, line)
    return float(token)


def _parse_def(lineno: int, line: str) -> str:
    if not line.startswith("def "):
        raise ParseError(f"Expected 'def function_name', found: {line}", lineno, line)
    name = line[4:].strip()
    if not name:
        raise ParseError("Program name cannot be empty", lineno, line)
    return name


# ---------------------------------------------------------------------------
# Statements
# ---------------------------------------------------------------------------

def _parse_if(lineno: int, line: str) -> Instruction:
    # <color> hits <target> <count> times
    parts = line[3:].split()
    if len(parts) != 5 or parts[1] != "hits" or parts[4] != "times":
        raise ParseError(
            f"Invalid if statement: {line}. "
            f"Expected: if <color> hits <target> <count> times",
            lineno, line,
        )
    count_str = parts[3]
    if not _COUNT_RE.match(count_str):
        raise ParseError(f"Invalid hit count '{count_str}'", lineno, line)

    condition = BinaryExpr(
        op=BinaryOp.GE,
        left=BallPropertyExpr(prop=BallProperty.HIT_COUNT),
        right=LiteralExpr(value=NumberValue(value=float(int(count_str)))),
    )
    return IfInstruction(condition=condition, then_block=(Bounce(),))


def _parse_set(lineno: int, line: str) -> Instruction:
    parts = line.split()
    if len(parts) < 3:
        raise ParseError(f"Incomplete set statement: {line}", lineno, line)

    prop = parts[1]
    if prop == "speed":
        if parts[2] == "relative":
            if len(parts) != 4:
                raise ParseError(
                    f"Invalid set speed relative statement: {line}. "
                    f"Expected: set speed relative <+/-number>",
                    lineno, line,
                )
            change = _parse_number(parts[3], lineno, line)
            value: Expression = BinaryExpr(
                op=BinaryOp.ADD,
                left=BallPropertyExpr(prop=BallProperty.SPEED),
                right=LiteralExpr(value=NumberValue(value=change)),
            )
            return SetSpeed(value=value)
        if len(parts) != 3:
            raise ParseError(f"Invalid set speed statement: {line}", lineno, line)
        speed = _parse_number(parts[2], lineno, line)
        return SetSpeed(value=LiteralExpr(value=NumberValue(value=speed)))

    if prop == "direction":
        if len(parts) != 3:
            raise ParseError(f"Invalid set direction statement: {line}", lineno, line)
        word = parts[2]
        direction = _DIRECTION_WORDS.get(word)
        if direction is None:
            raise ParseError(
                f"Invalid direction '{word}'. "
                f"Valid directions are: {', '.join(_DIRECTION_WORDS)}",
                lineno, line,
            )
        return SetDirection(value=LiteralExpr(value=DirectionValue(value=direction)))

    raise ParseError(f"Unknown property '{prop}' in set statement", lineno, line)


def _parse_statement(lineno: int, line: str) -> Instruction:
    if line.startswith("if "):
        return _parse_if(lineno, line)
    if line.startswith("set "):
        return _parse_set(lineno, line)
    raise ParseError(f"Failed to parse line: {line}", lineno, line)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def parse_program(source: str) -> Program:
    """Parse a single ``def`` block into a :class:`Program`.

    Parsing stops at the first ``return`` line; anything after it is
    ignored.  The returned program keeps *source* as its source text.

    Raises
    ------
    ParseError
        If the first non-blank line is not ``def <name>`` or any statement
        line is malformed.
    """
    lines = _significant_lines(source)
    if not lines:
        raise ParseError("Empty program")

    lineno, first = lines[0]
    name = _parse_def(lineno, first)

    instructions: list[Instruction] = []
    for lineno, line in lines[1:]:
        if line == "return":
            break
        instructions.append(_parse_statement(lineno, line))

    return Program(name=name, instructions=instructions, source_text=source)


def parse_multiple_programs(source: str) -> list[Program]:
    """Parse every ``def`` block in *source*.

    A block ends at ``return``, at the next ``def``, or at end of input.
    Each program's source text is the text of its own block.

    Raises
    ------
    ParseError
        If *source* is empty, a line appears outside any ``def`` block, or
        any block fails to parse.
    """
    lines = _significant_lines(source)
    if not lines:
        raise ParseError("Empty program")

    raw_lines = source.splitlines()
    programs: list[Program] = []
    i = 0
    while i < len(lines):
        start_lineno, header = lines[i]
        name = _parse_def(start_lineno, header)
        i += 1

        instructions: list[Instruction] = []
        end_lineno = start_lineno
        while i < len(lines):
            lineno, line = lines[i]
            if line.startswith("def "):
                break
            end_lineno = lineno
            i += 1
            if line == "return":
                break
            instructions.append(_parse_statement(lineno, line))

        block_text = "\n".join(raw_lines[start_lineno - 1:end_lineno])
        programs.append(
            Program(name=name, instructions=instructions, source_text=block_text)
        )

    return programs
