"""Tests for versync.output.console module."""

from __future__ import annotations

import pytest

from versync.output.console import ConsoleProtocol, MockConsole, RichConsole, Style


class TestStyle:
    def test_str_conversion(self) -> None:
        assert str(Style.SUCCESS) == "success"
        assert str(Style.STEP) == "step"


class TestMockConsole:
    def test_print_captures_message(self) -> None:
        console = MockConsole()
        console.print("hello")
        assert console.outputs[0].message == "hello"
        assert console.outputs[0].style == Style.DEFAULT

    def test_step_lines(self) -> None:
        console = MockConsole()
        console.step("git", "Adding files to commit")
        console.step("plugin.xml", "Updating version to: 1.0.0")
        console.step("git", "Pushing commit to master")

        assert console.outputs[0].message == "[git] Adding files to commit"
        assert console.steps("git") == ["Adding files to commit", "Pushing commit to master"]

    def test_error(self) -> None:
        console = MockConsole()
        console.error("git push failed")
        assert console.has_error()
        assert console.text == "error: git push failed"

    def test_find_and_clear(self) -> None:
        console = MockConsole()
        console.info("one")
        console.warning("two")
        assert len(console.find("two")) == 1
        console.clear()
        assert console.messages == []

    def test_satisfies_protocol(self) -> None:
        console: ConsoleProtocol = MockConsole()
        console.newline()


class TestRichConsole:
    def test_brackets_are_printed_literally(self, capsys: pytest.CaptureFixture[str]) -> None:
        console = RichConsole()
        console.step("git", "Files to be committed:")
        console.error("rejected [remote rejected] master -> master")

        out = capsys.readouterr().out
        assert "[git] Files to be committed:" in out
        assert "[remote rejected]" in out
