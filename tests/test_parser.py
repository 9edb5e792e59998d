"""Tests for the script parser."""

import textwrap

import pytest

from hitscript.model.expressions import (
    BallProperty,
    BallPropertyExpr,
    BinaryExpr,
    BinaryOp,
    LiteralExpr,
)
from hitscript.model.instructions import Bounce, IfInstruction, SetDirection, SetSpeed
from hitscript.model.values import Direction, DirectionValue, NumberValue
from hitscript.parser import ParseError, parse_multiple_programs, parse_program


def _src(s):
    return textwrap.dedent(s).strip("\n")


# ---------------------------------------------------------------------------
# Header / structure
# ---------------------------------------------------------------------------

class TestProgramStructure:
    def test_name(self):
        p = parse_program("def speed_increase\nreturn")
        assert p.name == "speed_increase"
        assert p.instructions == ()

    def test_name_is_trimmed(self):
        assert parse_program("def   spaced   \n").name == "spaced"

    def test_leading_blank_lines(self):
        p = parse_program("\n\n   \ndef p\nset speed 1\n")
        assert p.name == "p"
        assert len(p.instructions) == 1

    def test_indented_lines(self):
        p = parse_program("  def p\n    set speed 2\n  return  ")
        assert len(p.instructions) == 1

    def test_instruction_count(self):
        source = _src("""
            def combo
            if red hits self 1 times
            set speed relative +0.1

            set direction up-left
            if c_blue hits square(1,2) 4 times
            set speed 3
            return
        """)
        p = parse_program(source)
        assert p.name == "combo"
        assert len(p.instructions) == 5

    def test_return_is_optional(self):
        p = parse_program("def p\nset speed 1\nset speed 2")
        assert len(p.instructions) == 2

    def test_lines_after_return_ignored(self):
        p = parse_program("def p\nset speed 1\nreturn\nthis is not a statement\nset speed 9")
        assert len(p.instructions) == 1

    def test_source_text_preserved(self):
        source = "def p\nset speed 1\nreturn"
        assert parse_program(source).source_text == source


class TestHeaderErrors:
    def test_missing_def(self):
        with pytest.raises(ParseError, match="Expected 'def function_name'"):
            parse_program("set speed 1\nreturn")

    def test_def_without_space(self):
        with pytest.raises(ParseError):
            parse_program("define p\nreturn")

    def test_bare_def(self):
        with pytest.raises(ParseError):
            parse_program("def\nreturn")

    def test_empty(self):
        with pytest.raises(ParseError, match="Empty program"):
            parse_program("   \n\n")

    def test_error_location(self):
        with pytest.raises(ParseError) as exc_info:
            parse_program("\n\nreturn")
        assert exc_info.value.line_number == 3
        assert exc_info.value.line == "return"
        assert "(line 3)" in str(exc_info.value)


# ---------------------------------------------------------------------------
# if
# ---------------------------------------------------------------------------

class TestIf:
    def test_hit_threshold(self):
        p = parse_program("def p\nif red hits self 3 times")
        instr = p.instructions[0]
        assert isinstance(instr, IfInstruction)
        assert instr.condition == BinaryExpr(
            op=BinaryOp.GE,
            left=BallPropertyExpr(prop=BallProperty.HIT_COUNT),
            right=LiteralExpr(value=NumberValue(value=3.0)),
        )
        assert instr.then_block == (Bounce(),)
        assert instr.else_block is None

    def test_color_and_target_do_not_change_condition(self):
        a = parse_program("def p\nif red hits self 2 times").instructions[0]
        b = parse_program("def p\nif c_green hits ball7 2 times").instructions[0]
        assert a == b

    def test_zero_count(self):
        instr = parse_program("def p\nif red hits self 0 times").instructions[0]
        assert instr.condition.right.value == NumberValue(value=0.0)

    @pytest.mark.parametrize("line", [
        "if red hits self 3",
        "if red hits self 3 times now",
        "if red strikes self 3 times",
        "if red hits self 3 time",
        "if red hits self",
    ])
    def test_malformed(self, line):
        with pytest.raises(ParseError, match="Invalid if statement"):
            parse_program(f"def p\n{line}")

    @pytest.mark.parametrize("count", ["-1", "1.5", "three", "x/3"])
    def test_count_must_be_unsigned_integer(self, count):
        with pytest.raises(ParseError, match="Invalid hit count"):
            parse_program(f"def p\nif red hits self {count} times")


# ---------------------------------------------------------------------------
# set speed / set direction
# ---------------------------------------------------------------------------

class TestSetSpeed:
    def test_absolute(self):
        instr = parse_program("def p\nset speed 2.5").instructions[0]
        assert instr == SetSpeed(value=LiteralExpr(value=NumberValue(value=2.5)))

    def test_absolute_integer(self):
        instr = parse_program("def p\nset speed 4").instructions[0]
        assert instr.value.value == NumberValue(value=4.0)

    @pytest.mark.parametrize("token,change", [("+0.1", 0.1), ("-2", -2.0), ("3", 3.0)])
    def test_relative(self, token, change):
        instr = parse_program(f"def p\nset speed relative {token}").instructions[0]
        assert instr == SetSpeed(value=BinaryExpr(
            op=BinaryOp.ADD,
            left=BallPropertyExpr(prop=BallProperty.SPEED),
            right=LiteralExpr(value=NumberValue(value=change)),
        ))

    @pytest.mark.parametrize("token,expected", [("1e-1", 0.1), ("2.5E2", 250.0), ("+3e0", 3.0)])
    def test_exponent_form(self, token, expected):
        instr = parse_program(f"def p\nset speed {token}").instructions[0]
        assert instr.value.value == NumberValue(value=expected)

    def test_relative_exponent_form(self):
        instr = parse_program("def p\nset speed relative -5e-1").instructions[0]
        assert instr.value.right.value == NumberValue(value=-0.5)

    @pytest.mark.parametrize("line", [
        "set speed 1e",
        "set speed e5",
        "set speed inf",
        "set speed fast",
        "set speed relative",
        "set speed relative fast",
        "set speed 1 2",
        "set speed nan",
        "set speed",
    ])
    def test_malformed(self, line):
        with pytest.raises(ParseError):
            parse_program(f"def p\n{line}")


class TestSetDirection:
    @pytest.mark.parametrize("word", [d.value for d in Direction])
    def test_all_words(self, word):
        instr = parse_program(f"def p\nset direction {word}").instructions[0]
        assert instr == SetDirection(
            value=LiteralExpr(value=DirectionValue(value=Direction(word)))
        )

    def test_case_sensitive(self):
        with pytest.raises(ParseError, match="Invalid direction 'Up'"):
            parse_program("def p\nset direction Up")

    def test_unknown_word(self):
        with pytest.raises(ParseError, match="Invalid direction"):
            parse_program("def p\nset direction north")

    def test_unknown_property(self):
        with pytest.raises(ParseError, match="Unknown property 'color'"):
            parse_program("def p\nset color red")


class TestUnknownStatements:
    @pytest.mark.parametrize("line", [
        "bounce", "print 1", "var x = 1", "def other", "return now",
        "create ball 1 2", "destroy self",
    ])
    def test_rejected(self, line):
        with pytest.raises(ParseError, match="Failed to parse line"):
            parse_program(f"def p\n{line}")

    @pytest.mark.parametrize("line", [
        "if speed > 2 then",
        "if hits(self) > 2",
    ])
    def test_block_and_call_forms_rejected(self, line):
        with pytest.raises(ParseError):
            parse_program(f"def p\n{line}")

    def test_error_names_line(self):
        with pytest.raises(ParseError) as exc_info:
            parse_program("def p\nset speed 1\nwiggle")
        assert exc_info.value.line_number == 3
        assert "wiggle" in str(exc_info.value)


# ---------------------------------------------------------------------------
# parse_multiple_programs
# ---------------------------------------------------------------------------

class TestMultiplePrograms:
    def test_two_blocks(self):
        source = _src("""
            def first
            set speed 1
            return
            def second
            set direction down
            if red hits self 2 times
            return
        """)
        programs = parse_multiple_programs(source)
        assert [p.name for p in programs] == ["first", "second"]
        assert [len(p.instructions) for p in programs] == [1, 2]

    def test_next_def_ends_block(self):
        programs = parse_multiple_programs("def a\nset speed 1\ndef b\nset speed 2")
        assert [p.name for p in programs] == ["a", "b"]
        assert len(programs[0].instructions) == 1

    def test_block_source_text(self):
        source = "def a\nset speed 1\nreturn\n\ndef b\nreturn"
        a, b = parse_multiple_programs(source)
        assert a.source_text == "def a\nset speed 1\nreturn"
        assert b.source_text == "def b\nreturn"

    def test_single(self):
        assert len(parse_multiple_programs("def only")) == 1

    def test_stray_line_between_blocks(self):
        with pytest.raises(ParseError, match="Expected 'def function_name'"):
            parse_multiple_programs("def a\nreturn\nset speed 1")

    def test_error_in_second_block(self):
        with pytest.raises(ParseError) as exc_info:
            parse_multiple_programs("def a\nreturn\ndef b\nset speed x")
        assert exc_info.value.line_number == 4

    def test_empty(self):
        with pytest.raises(ParseError, match="Empty program"):
            parse_multiple_programs("")
