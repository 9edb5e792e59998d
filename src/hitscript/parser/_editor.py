"""Editor-facing compilation that never discards the user's text."""

from __future__ import annotations

import logging

from hitscript.model.program import Program

from ._parser import ParseError, parse_multiple_programs

logger = logging.getLogger(__name__)

DEFAULT_PROGRAM_NAME = "my_program"


def annotate_source(source: str, message: str) -> str:
    """Prefix *source* with syntax-error comment lines."""
    header = [
        f"// SYNTAX ERROR: {message}",
        "// Fix the error above to make this code functional",
        "",
    ]
    return "\n".join(header) + "\n" + source


def _guess_name(source: str) -> str:
    for line in source.splitlines():
        line = line.strip()
        if line.startswith("def "):
            name = line[4:].strip()
            if name:
                return name
    return DEFAULT_PROGRAM_NAME


def compile_programs(source: str) -> list[Program]:
    """Compile editor text into programs.

    On success every program gets the full editor text as its source, so
    reopening any of them shows everything the user typed.  On a parse
    error, a single instruction-less program is returned whose source is
    the user's text annotated with the error.
    """
    try:
        programs = parse_multiple_programs(source)
    except ParseError as e:
        logger.warning("Keeping unparsed program text: %s", e)
        return [
            Program(
                name=_guess_name(source),
                instructions=(),
                source_text=annotate_source(source, str(e)),
            )
        ]
    return [p.model_copy(update={"source_text": source}) for p in programs]
