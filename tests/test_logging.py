"""Tests for logging utilities."""

import logging
from io import StringIO

import numpy as np

from unconopt import Lbfgs, LbfgsConfig, QuadraticFunction
from unconopt.logging import (
    configure_logging,
    get_logger,
    set_log_level,
)


def test_get_logger_returns_namespaced_logger():
    logger = get_logger("test_module")
    assert isinstance(logger, logging.Logger)
    assert logger.name == "unconopt.test_module"


def test_get_logger_keeps_package_names():
    logger = get_logger("unconopt.optimize.quasi_newton")
    assert logger.name == "unconopt.optimize.quasi_newton"
    assert get_logger().name == "unconopt"


def test_get_logger_caching():
    logger1 = get_logger("test_module")
    logger2 = get_logger("test_module")
    assert logger1 is logger2


def test_get_logger_different_modules():
    logger1 = get_logger("module1")
    logger2 = get_logger("module2")
    assert logger1 is not logger2
    assert logger1.name != logger2.name


def test_set_log_level_string():
    logger = get_logger("test_module")
    try:
        set_log_level("DEBUG")
        assert logger.level == logging.DEBUG
        set_log_level("ERROR")
        assert logger.level == logging.ERROR
    finally:
        set_log_level(logging.WARNING)


def test_configure_logging_applies_to_new_loggers():
    stream = StringIO()
    try:
        configure_logging(level=logging.DEBUG, stream=stream)
        logger = get_logger("created_after_configure")
        logger.debug("Debug message")
        assert "Debug message" in stream.getvalue()
        assert "[DEBUG] unconopt.created_after_configure" in stream.getvalue()
    finally:
        configure_logging(level=logging.WARNING)


def test_optimizer_reports_terminal_status():
    stream = StringIO()
    fn = QuadraticFunction(np.diag([1.0, 2.0]), np.array([1.0, 1.0]))
    try:
        configure_logging(level=logging.INFO, stream=stream)
        Lbfgs(fn, LbfgsConfig(history_size=2)).optimize(np.zeros(2))
    finally:
        configure_logging(level=logging.WARNING)
    output = stream.getvalue()
    assert "unconopt.optimize.quasi_newton" in output
    assert "converged" in output


def test_logger_does_not_propagate():
    logger = get_logger("test_module")
    assert logger.propagate is False
