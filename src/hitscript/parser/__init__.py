"""hitscript parser — script text to :class:`~hitscript.model.program.Program`.

Entry point::

    from hitscript.parser import parse_program

    program = parse_program(editor_text)
    program.name          # "speedup"
    program.instructions  # (IfInstruction(...), SetSpeed(...))

where ``editor_text`` reads::

    def speedup
    if red hits self 3 times
    set speed relative +0.5
    return
"""

from ._editor import annotate_source, compile_programs
from ._parser import ParseError, parse_multiple_programs, parse_program

__all__ = [
    "ParseError",
    "annotate_source",
    "compile_programs",
    "parse_multiple_programs",
    "parse_program",
]
