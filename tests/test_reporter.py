"""
Tests for the tagged progress lines.
"""

from diff_verify.core.services import reporter


class TestReporter:
    def test_step_aligns_message(self, capsys):
        reporter.step("copy", '"a.ts" -> "a.ts.tmp"')
        out = capsys.readouterr().out
        assert out == "[copy]" + " " * 14 + '"a.ts" -> "a.ts.tmp"\n'

    def test_messages_share_one_column(self, capsys):
        reporter.step("emit", "gen")
        reporter.step("move", "x")
        lines = capsys.readouterr().out.splitlines()
        assert [line.index(msg) for line, msg in zip(lines, ("gen", "x"))] == [20, 20]

    def test_error_goes_to_stderr(self, capsys):
        reporter.error("boom")
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err == "[error]" + " " * 13 + "boom\n"

    def test_patch_printed_verbatim(self, capsys):
        reporter.patch("--- a\n+++ b\n")
        assert capsys.readouterr().out == "--- a\n+++ b\n"
