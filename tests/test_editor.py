"""Tests for editor-facing compilation (user text is never lost)."""

import logging

from hitscript.parser import annotate_source, compile_programs


class TestAnnotateSource:
    def test_prefixes_error(self):
        out = annotate_source("def p\nwiggle", "Failed to parse line: wiggle")
        lines = out.splitlines()
        assert lines[0] == "// SYNTAX ERROR: Failed to parse line: wiggle"
        assert lines[1] == "// Fix the error above to make this code functional"
        assert lines[2] == ""
        assert lines[3:] == ["def p", "wiggle"]


class TestCompilePrograms:
    def test_success_keeps_full_text(self):
        source = "def a\nset speed 1\nreturn\ndef b\nreturn"
        programs = compile_programs(source)
        assert [p.name for p in programs] == ["a", "b"]
        assert all(p.source_text == source for p in programs)
        assert len(programs[0].instructions) == 1

    def test_error_preserves_text(self):
        source = "def broken\nset speed very fast\nreturn"
        (program,) = compile_programs(source)
        assert program.name == "broken"
        assert program.instructions == ()
        assert program.source_text.startswith("// SYNTAX ERROR: ")
        assert program.source_text.endswith(source)

    def test_error_without_def_uses_default_name(self):
        (program,) = compile_programs("set speed 1")
        assert program.name == "my_program"
        assert program.source_text.endswith("set speed 1")

    def test_empty_text_is_kept(self):
        (program,) = compile_programs("")
        assert program.instructions == ()
        assert "Empty program" in program.source_text

    def test_error_is_logged(self, caplog):
        with caplog.at_level(logging.WARNING, logger="hitscript.parser._editor"):
            compile_programs("nonsense")
        assert "Keeping unparsed program text" in caplog.text
