"""Parsed behavior programs."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from .instructions import Instruction


class Program(BaseModel):
    """A named, parsed behavior script.

    *source_text* is the editor text the program was parsed from.  It is
    carried opaquely so an editor can show the user exactly what they wrote.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    instructions: tuple[Instruction, ...] = ()
    source_text: str | None = None
