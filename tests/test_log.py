import io

import pytest

from opertools.log import (
    Logger,
    get_global_log_level,
    new_logger,
    set_global_log_level,
)


@pytest.fixture
def level():
    previous = get_global_log_level()
    yield set_global_log_level
    set_global_log_level(previous)


@pytest.fixture
def streams():
    return io.StringIO(), io.StringIO()


def test_info_without_values(level, streams):
    level(0)
    out, err = streams
    new_logger("app", out, err, 0).info("hello")
    assert out.getvalue() == "app> hello\n"
    assert err.getvalue() == ""


def test_info_with_pairs(level, streams):
    level(0)
    out, err = streams
    new_logger("app", out, err, 0).info("msg", "k", "v", "n", 1)
    assert out.getvalue() == "app> msg k: v, n: 1\n"


def test_info_odd_values_trailing_separator(level, streams):
    level(0)
    out, err = streams
    new_logger("app", out, err, 0).info("msg", "k", "v", "x")
    assert out.getvalue() == "app> msg k: v, x: \n"


def test_bool_values_rendered_lowercase(level, streams):
    level(0)
    out, err = streams
    new_logger("", out, err, 0).info("m", "flag", True)
    assert out.getvalue() == "> m flag: true\n"


def test_with_values_accumulates_without_mutating(level, streams):
    level(0)
    out, err = streams
    base = new_logger("app", out, err, 0)
    derived = base.with_values("a", "1")
    derived.info("one", "b", "2")
    base.info("two")
    assert out.getvalue().splitlines() == ["app> one a: 1, b: 2", "app> two"]
    assert base.values == ()


def test_with_name_concatenates(level, streams):
    level(0)
    out, err = streams
    new_logger("app", out, err, 0).with_name("-sub").info("x")
    assert out.getvalue() == "app-sub> x\n"


def test_verbosity_gating(level, streams):
    out, err = streams
    logger = new_logger("app", out, err, 0)
    level(0)
    assert not logger.v(1).enabled()
    logger.v(1).info("hidden")
    assert out.getvalue() == ""
    level(1)
    assert logger.v(1).enabled()
    logger.v(1).info("shown")
    assert out.getvalue() == "app> shown\n"


def test_v_adds_levels(level, streams):
    out, err = streams
    logger = new_logger("app", out, err, 1).v(1)
    assert logger.level == 2
    level(1)
    assert not logger.enabled()
    level(2)
    assert logger.enabled()


def test_error_ignores_level(level, streams):
    level(0)
    out, err = streams
    new_logger("app", out, err, 5).error(ValueError("boom"), "failed")
    assert err.getvalue() == "app> failed boom\n"
    assert out.getvalue() == ""


def test_error_with_values(level, streams):
    level(0)
    out, err = streams
    new_logger("app", out, err, 0).with_values("id", 7).error(
        RuntimeError("bad"), "oops", "extra", "yes"
    )
    assert err.getvalue() == "app> oops bad id: 7, extra: yes\n"


def test_error_with_details(level, streams):
    level(0)
    out, err = streams
    exc = RuntimeError("bad")
    exc.details = ("key", "value")
    new_logger("app", out, err, 0).error(exc, "oops")
    assert err.getvalue() == "app> oops bad (key: value)\n"


def test_default_streams_are_stderr(level, capsys):
    level(0)
    Logger(name="d").info("to stderr")
    captured = capsys.readouterr()
    assert captured.err == "d> to stderr\n"
    assert captured.out == ""