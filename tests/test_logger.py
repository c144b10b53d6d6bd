"""Tests for the depflow logger hierarchy."""

import logging

from depflow.logger import get_logger


def test_module_loggers_share_root():
    logger = get_logger("depflow.core.dependency.evaluator")
    assert logger.name == "depflow.core.dependency.evaluator"
    assert logger.parent is not None
    assert logging.getLogger("depflow").handlers


def test_foreign_names_are_nested():
    assert get_logger("plugins.custom").name == "depflow.plugins.custom"


def test_root_logger():
    assert get_logger().name == "depflow"
    assert get_logger("depflow") is logging.getLogger("depflow")
