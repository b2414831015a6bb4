"""Tests for the environment-driven debug logging helpers."""

from __future__ import annotations

import pytest

from pychip8.utils import debug, debug_enabled, debug_log, reload_categories


@pytest.fixture(autouse=True)
def _fresh_categories(monkeypatch):
    monkeypatch.delenv(debug.ENV_VARIABLE, raising=False)
    reload_categories()
    yield
    reload_categories()


def test_disabled_without_environment(capsys) -> None:
    assert not debug_enabled("cpu")
    assert not debug_enabled()

    debug_log("cpu", "pc=%04x", 0x200)

    assert capsys.readouterr().out == ""


def test_selected_categories(monkeypatch, capsys) -> None:
    monkeypatch.setenv(debug.ENV_VARIABLE, "cpu, Input")
    reload_categories()

    assert debug_enabled("cpu")
    assert debug_enabled("input")
    assert not debug_enabled("audio")

    debug_log("cpu", "pc=%04x", 0x200)
    assert capsys.readouterr().out == "[CHIP8][cpu] pc=0200\n"


def test_all_enables_everything(monkeypatch) -> None:
    monkeypatch.setenv(debug.ENV_VARIABLE, "all")
    reload_categories()

    assert debug_enabled("trace")
    assert debug_enabled("anything")


def test_bad_format_arguments_are_appended(monkeypatch, capsys) -> None:
    monkeypatch.setenv(debug.ENV_VARIABLE, "cpu")
    reload_categories()

    debug_log("cpu", "value=%d", "not-a-number")

    assert "value=%d ('not-a-number',)" in capsys.readouterr().out


def test_parse_categories_ignores_blanks() -> None:
    assert debug.parse_categories(" CPU,,trace , ") == frozenset({"cpu", "trace"})
    assert debug.parse_categories("") == frozenset()
