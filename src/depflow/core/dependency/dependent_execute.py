"""
Dependent execute

The state machine that gates one dependent task on one declaration. It is
polled repeatedly by an outer loop and memoizes every terminal item verdict,
so once an item has succeeded or failed its history is never read again.

States: waiting (initial) -> success | failed (terminal, absorbing).

Not safe for concurrent polling; callers must serialize access to one
instance. Distinct instances share nothing.
"""

from __future__ import annotations

from datetime import datetime
from types import MappingProxyType
from typing import Mapping

from depflow.core.dependency.evaluator import DependencyItemEvaluator
from depflow.core.dependency.relation import combine
from depflow.core.dependency.types import DependentDeclaration, DependentItem, DependResult
from depflow.core.dependency.validator import validate_declaration
from depflow.logger import get_logger

logger = get_logger(__name__)


class DependentExecute:
    """
    Polled dependency gate for one declaration.

    Example:
        execute = DependentExecute(declaration, evaluator)
        while not execute.poll(datetime.now()):
            await asyncio.sleep(1)
        if execute.result is DependResult.success:
            ...

    Raises:
        DeclarationError: At construction, if the declaration is malformed
    """

    def __init__(
        self,
        declaration: DependentDeclaration,
        evaluator: DependencyItemEvaluator,
    ) -> None:
        validate_declaration(declaration, evaluator.interval_resolver)
        self._declaration = declaration
        self._evaluator = evaluator
        self._result = DependResult.waiting
        self._depend_result_map: dict[str, DependResult] = {}

    @property
    def declaration(self) -> DependentDeclaration:
        return self._declaration

    @property
    def result(self) -> DependResult:
        """Current overall verdict."""
        return self._result

    @property
    def is_finished(self) -> bool:
        return self._result.is_terminal

    def poll(self, evaluation_time: datetime) -> bool:
        """
        Advance the state machine.

        A terminal state is returned as-is without touching history.

        Args:
            evaluation_time: Reference time for this poll

        Returns:
            True once the overall verdict is success or failed

        Raises:
            CollaboratorUnavailableError: If the resolver or the store fails;
                the overall verdict stays waiting
        """
        if self._result.is_terminal:
            return True
        self.compute_overall(evaluation_time)
        return self._result.is_terminal

    def compute_overall(self, evaluation_time: datetime) -> DependResult:
        """Resolve every item in declared order and combine under the relation."""
        results = [self.resolve_item(item, evaluation_time) for item in self._declaration.items]
        self._result = combine(self._declaration.relation, results)
        if self._result.is_terminal:
            logger.info(
                "Dependent declaration finished: relation=%s result=%s",
                self._declaration.relation,
                self._result,
            )
        return self._result

    def resolve_item(self, item: DependentItem, evaluation_time: datetime) -> DependResult:
        """
        Verdict for one item, served from the cache when already terminal.

        Waiting verdicts are never cached so the item is retried next poll.
        """
        cached = self._depend_result_map.get(item.key)
        if cached is not None:
            return cached

        result = self._evaluator.evaluate(item, evaluation_time)
        if result.is_terminal:
            self._depend_result_map[item.key] = result
            logger.info("Dependent item %s resolved: %s", item.key, result)
        return result

    def snapshot(self) -> Mapping[str, DependResult]:
        """Read-only view of cached terminal item verdicts."""
        return MappingProxyType(self._depend_result_map)


__all__ = ["DependentExecute"]
