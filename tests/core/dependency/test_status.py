"""
Unit tests for depflow.core.dependency.status
"""

import pytest

from depflow.core.dependency.status import classify, depend_result_by_state
from depflow.core.dependency.types import DependResult, ExecutionStatus, ExecutionStatusCategory


class TestClassify:
    """Raw status to category"""

    @pytest.mark.parametrize(
        "state",
        [
            ExecutionStatus.running_execution,
            ExecutionStatus.waiting_depend,
            ExecutionStatus.submitted_success,
            ExecutionStatus.waiting_thread,
        ],
    )
    def test_running_like(self, state):
        assert classify(state) is ExecutionStatusCategory.running_like

    def test_success_like(self):
        assert classify(ExecutionStatus.success) is ExecutionStatusCategory.success_like

    @pytest.mark.parametrize(
        "state",
        [
            ExecutionStatus.failure,
            ExecutionStatus.kill,
            ExecutionStatus.stop,
            ExecutionStatus.pause,
            ExecutionStatus.ready_pause,
            ExecutionStatus.ready_stop,
            ExecutionStatus.need_fault_tolerance,
        ],
    )
    def test_everything_else_is_other(self, state):
        assert classify(state) is ExecutionStatusCategory.other

    def test_total_over_all_statuses(self):
        """Every status maps to exactly one category"""
        for state in ExecutionStatus:
            assert classify(state) in set(ExecutionStatusCategory)


class TestDependResultByState:
    def test_running_is_waiting(self):
        assert depend_result_by_state(ExecutionStatus.running_execution) is DependResult.waiting

    def test_success_is_success(self):
        assert depend_result_by_state(ExecutionStatus.success) is DependResult.success

    def test_failure_is_failed(self):
        assert depend_result_by_state(ExecutionStatus.failure) is DependResult.failed

    def test_waiting_thread_is_waiting(self):
        assert depend_result_by_state(ExecutionStatus.waiting_thread) is DependResult.waiting
