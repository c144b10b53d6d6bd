"""Outer polling loop for dependent tasks.

A dependent task carries one or more declarations combined by an outer
relation. The loop polls every declaration's DependentExecute on a fixed
cadence until all of them are finished, then combines their verdicts.
"""

from __future__ import annotations

import asyncio
from datetime import datetime
from typing import Callable, Sequence

from depflow.core.config import DependentConfig
from depflow.core.dependency.dependent_execute import DependentExecute
from depflow.core.dependency.evaluator import DependencyItemEvaluator
from depflow.core.dependency.relation import combine
from depflow.core.dependency.types import DependentParameters, DependentRelation, DependResult
from depflow.core.dependency.validator import validate_parameters
from depflow.logger import get_logger

logger = get_logger(__name__)

Clock = Callable[[], datetime]


class DependentTask:
    """Polls a set of DependentExecute instances until they all finish.

    Errors raised by a poll (e.g. CollaboratorUnavailableError) propagate out
    of run(); whether to start over is the caller's decision.
    """

    def __init__(
        self,
        executes: Sequence[DependentExecute],
        relation: DependentRelation = DependentRelation.AND,
        config: DependentConfig | None = None,
        clock: Clock | None = None,
    ) -> None:
        if not executes:
            raise ValueError("DependentTask requires at least one DependentExecute")
        self._executes = list(executes)
        self._relation = relation
        self._config = config or DependentConfig()
        self._clock = clock or datetime.now
        self._cancel_event = asyncio.Event()
        self._result = DependResult.waiting
        self._poll_count = 0

    @classmethod
    def from_parameters(
        cls,
        parameters: DependentParameters,
        evaluator: DependencyItemEvaluator,
        config: DependentConfig | None = None,
        clock: Clock | None = None,
    ) -> DependentTask:
        """Build one DependentExecute per declaration sharing one evaluator."""
        validate_parameters(parameters)
        executes = [DependentExecute(d, evaluator) for d in parameters.declarations]
        return cls(executes, parameters.relation, config=config, clock=clock)

    @property
    def executes(self) -> list[DependentExecute]:
        return list(self._executes)

    @property
    def result(self) -> DependResult:
        return self._result

    @property
    def cancelled(self) -> bool:
        return self._cancel_event.is_set()

    @property
    def poll_count(self) -> int:
        return self._poll_count

    def poll_once(self) -> bool:
        """Poll every declaration once with a shared evaluation time.

        Returns:
            True when every declaration is finished
        """
        now = self._clock()
        self._poll_count += 1
        # Poll all of them; a finished one returns without reading history
        finished = [execute.poll(now) for execute in self._executes]
        logger.debug(
            "Dependent poll #%d at %s: %d/%d finished",
            self._poll_count,
            now.isoformat(),
            sum(finished),
            len(finished),
        )
        if all(finished):
            self._result = combine(self._relation, [e.result for e in self._executes])
            return True
        return False

    async def run(self) -> DependResult:
        """Poll until finished, cancelled or timed out.

        Returns:
            The combined verdict; failed when cancelled or timed out
        """
        loop = asyncio.get_running_loop()
        started = loop.time()
        timeout = self._config.timeout_seconds

        while True:
            if self._cancel_event.is_set():
                logger.warning("Dependent task cancelled after %d polls", self._poll_count)
                self._result = DependResult.failed
                return self._result

            if self.poll_once():
                logger.info("Dependent task finished: %s", self._result)
                return self._result

            if timeout is not None and loop.time() - started >= timeout:
                logger.warning("Dependent task timed out after %.1fs", timeout)
                self._result = DependResult.failed
                return self._result

            try:
                await asyncio.wait_for(
                    self._cancel_event.wait(),
                    timeout=self._config.poll_interval_seconds,
                )
            except asyncio.TimeoutError:
                pass

    def cancel(self) -> None:
        """Stop the loop at its next wakeup."""
        self._cancel_event.set()


__all__ = ["DependentTask"]
