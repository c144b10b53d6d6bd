"""
Relation combinator

Reduces an ordered list of verdicts into one verdict under an AND/OR relation.
"""

from typing import Iterable

from depflow.core.dependency.types import DependResult, DependentRelation


def combine(relation: DependentRelation, results: Iterable[DependResult]) -> DependResult:
    """
    Combine verdicts under a relation.

    AND: failed if any failed, else waiting if any waiting, else success.
    OR: success if any success, else waiting if any waiting, else failed.

    An empty list is success under AND and failed under OR.

    Args:
        relation: AND or OR
        results: Verdicts in declared order

    Returns:
        Combined verdict
    """
    results = list(results)

    if relation is DependentRelation.AND:
        if DependResult.failed in results:
            return DependResult.failed
        if DependResult.waiting in results:
            return DependResult.waiting
        return DependResult.success

    if relation is DependentRelation.OR:
        if DependResult.success in results:
            return DependResult.success
        if DependResult.waiting in results:
            return DependResult.waiting
        return DependResult.failed

    raise ValueError(f"Unknown dependent relation: {relation}")


__all__ = ["combine"]
