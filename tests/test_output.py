"""Tests for the output formatting system.

Covers:
- OutputFormat resolution (auto -> rich/plain based on TTY)
- NO_COLOR / TERM=dumb color disabling
- stdout vs stderr discipline and quiet/verbose rules
- format_response and print_table in JSON and plain modes
- Global instance management
"""

from __future__ import annotations

import json

import pytest

from respcache import output as output_module
from respcache.output import (
    OutputFormat,
    OutputManager,
    _should_disable_color,
    get_output,
    reset_output,
    set_output,
)


@pytest.fixture(autouse=True)
def _reset_global_output():
    reset_output()
    yield
    reset_output()


@pytest.fixture()
def non_tty(monkeypatch):
    monkeypatch.setattr("respcache.output._is_tty", lambda: False)


@pytest.fixture()
def tty(monkeypatch):
    monkeypatch.setattr("respcache.output._is_tty", lambda: True)


class TestOutputFormatResolution:
    def test_auto_resolves_to_plain_when_not_tty(self, non_tty):
        assert OutputManager(format=OutputFormat.AUTO).format == OutputFormat.PLAIN

    def test_auto_resolves_to_rich_when_tty(self, tty, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.delenv("TERM", raising=False)
        assert OutputManager(format=OutputFormat.AUTO).format == OutputFormat.RICH

    def test_auto_with_no_color_is_plain(self, tty):
        assert OutputManager(no_color=True).format == OutputFormat.PLAIN

    def test_explicit_json(self, tty):
        assert OutputManager(format=OutputFormat.JSON).format == OutputFormat.JSON


class TestColorDisabling:
    def test_no_color_env(self, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "")
        assert _should_disable_color() is True

    def test_term_dumb(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "dumb")
        assert _should_disable_color() is True

    def test_color_enabled_by_default(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "xterm-256color")
        assert _should_disable_color() is False


class TestStreams:
    def test_data_goes_to_stdout(self, non_tty, capsys):
        OutputManager(format=OutputFormat.PLAIN).print_data("hello")
        captured = capsys.readouterr()
        assert captured.out == "hello\n"
        assert captured.err == ""

    def test_info_goes_to_stderr(self, non_tty, capsys):
        OutputManager(format=OutputFormat.PLAIN, no_color=True).info("working")
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "working" in captured.err

    def test_quiet_suppresses_info_not_errors(self, non_tty, capsys):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True)
        mgr.info("hidden")
        mgr.success("hidden too")
        mgr.error("shown")
        mgr.warning("also shown")
        err = capsys.readouterr().err
        assert "hidden" not in err
        assert "Error: shown" in err
        assert "Warning: also shown" in err

    def test_debug_requires_verbose(self, non_tty, capsys):
        OutputManager(format=OutputFormat.PLAIN, no_color=True).debug("quiet")
        OutputManager(format=OutputFormat.PLAIN, no_color=True, verbose=True).debug("loud")
        err = capsys.readouterr().err
        assert "quiet" not in err
        assert "[debug] loud" in err


class TestFormatting:
    def test_json_response(self, capsys):
        OutputManager(format=OutputFormat.JSON).format_response({"entries": 2})
        assert json.loads(capsys.readouterr().out) == {"entries": 2}

    def test_plain_dict(self, capsys):
        OutputManager(format=OutputFormat.PLAIN).format_response({"a": 1, "b": "x"})
        assert capsys.readouterr().out == "a\t1\nb\tx\n"

    def test_plain_list(self, capsys):
        OutputManager(format=OutputFormat.PLAIN).format_response(["x", "y"])
        assert capsys.readouterr().out == "x\ny\n"

    def test_table_json(self, capsys):
        OutputManager(format=OutputFormat.JSON).print_table(["key", "bytes"], [["abc", "3"]])
        assert json.loads(capsys.readouterr().out) == [{"key": "abc", "bytes": "3"}]

    def test_table_plain(self, capsys):
        OutputManager(format=OutputFormat.PLAIN).print_table(["key", "bytes"], [["abc", "3"]])
        assert capsys.readouterr().out == "key\tbytes\nabc\t3\n"


class TestGlobalInstance:
    def test_lazy_default(self):
        assert isinstance(get_output(), OutputManager)

    def test_set_and_reset(self):
        mgr = OutputManager(format=OutputFormat.JSON)
        set_output(mgr)
        assert get_output() is mgr
        reset_output()
        assert output_module._output is None

    def test_convenience_functions_delegate(self, capsys):
        set_output(OutputManager(format=OutputFormat.PLAIN, no_color=True))
        output_module.format_response("data")
        output_module.error("bad")
        captured = capsys.readouterr()
        assert captured.out == "data\n"
        assert "Error: bad" in captured.err
