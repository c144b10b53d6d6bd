"""Shared fixtures for dependency engine tests."""

from unittest.mock import MagicMock

import pytest

from depflow.core.dependency.evaluator import DependencyItemEvaluator

from dependency_helpers import DAY_1


@pytest.fixture
def history_store() -> MagicMock:
    """History store mock that finds nothing unless told otherwise."""
    store = MagicMock()
    store.find_running_execution.return_value = None
    store.find_latest_scheduled_execution.return_value = None
    store.find_latest_manual_execution.return_value = None
    store.list_valid_task_executions.return_value = []
    return store


@pytest.fixture
def interval_resolver() -> MagicMock:
    """Interval resolver mock emitting one day and accepting any expression."""
    resolver = MagicMock()
    resolver.resolve.return_value = [DAY_1]
    resolver.is_supported.return_value = True
    return resolver


@pytest.fixture
def evaluator(interval_resolver, history_store) -> DependencyItemEvaluator:
    return DependencyItemEvaluator(interval_resolver, history_store)
