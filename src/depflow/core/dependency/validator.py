"""
Dependency declaration validation

This module provides reusable functions for validating dependency declarations
before any polling begins, and for parsing declarations from JSON-compatible
documents.

All declaration validation logic is centralized here for maintainability.
"""

from typing import Any, Dict, Mapping, Set

from depflow.core.dependency.types import (
    DependentDeclaration,
    DependentParameters,
    DependentRelation,
    IntervalResolver,
)
from depflow.core.execution.errors import DeclarationError
from depflow.logger import get_logger

logger = get_logger(__name__)


def validate_declaration(
    declaration: DependentDeclaration, interval_resolver: IntervalResolver
) -> None:
    """
    Validate a declaration.

    Checks, in order: relation, non-empty item list, and for every item a
    unique key, a positive definition id, a non-blank target task and a date
    expression the interval resolver supports.

    Args:
        declaration: Declaration to validate
        interval_resolver: Resolver whose supported expressions are accepted

    Raises:
        DeclarationError: On the first problem found
    """
    if not isinstance(declaration.relation, DependentRelation):
        raise DeclarationError(
            f"Unknown dependent relation: {declaration.relation!r}",
            what="Dependent declaration has an unknown relation",
            why=f"Relation {declaration.relation!r} is neither AND nor OR",
            how_to_fix="Use relation 'AND' or 'OR'",
        )

    if not declaration.items:
        raise DeclarationError(
            "Dependent declaration has no items",
            what="Dependent declaration has no items",
            why="A declaration without items can never be satisfied or refuted",
            how_to_fix="Add at least one dependency item",
        )

    seen_keys: Set[str] = set()
    for item in declaration.items:
        context: Dict[str, Any] = {"key": item.key}

        if item.key in seen_keys:
            raise DeclarationError(
                f"Duplicate dependency item key '{item.key}'",
                what="Dependency item keys must be unique",
                why=f"Key '{item.key}' appears more than once",
                how_to_fix="Give each item a distinct key",
                context=context,
            )
        seen_keys.add(item.key)

        definition_id = item.definition_id
        if isinstance(definition_id, bool) or not isinstance(definition_id, int) or definition_id <= 0:
            raise DeclarationError(
                f"Invalid definition id {item.definition_id!r} for item '{item.key}'",
                context={**context, "definition_id": item.definition_id},
            )

        if not isinstance(item.dep_tasks, str) or not item.dep_tasks.strip():
            raise DeclarationError(
                f"Dependency item '{item.key}' has no target task",
                how_to_fix="Set depTasks to 'ALL' or to a task name",
                context=context,
            )

        if not isinstance(item.date_value, str) or not interval_resolver.is_supported(item.date_value):
            raise DeclarationError(
                f"Unsupported date expression {item.date_value!r} for item '{item.key}'",
                what="Dependency item has an unsupported date expression",
                why=f"{item.date_value!r} is not known to the interval resolver",
                how_to_fix="Use a supported expression such as 'today' or 'last1Days'",
                context={**context, "date_value": item.date_value},
            )

    logger.debug("Validated dependent declaration with %d items", len(declaration.items))


def parse_parameters(data: Mapping[str, Any]) -> DependentParameters:
    """
    Parse dependent parameters from a JSON-compatible mapping.

    Raises:
        DeclarationError: If a field is missing or has the wrong shape
    """
    try:
        return DependentParameters.from_dict(data)
    except KeyError as e:
        raise DeclarationError(
            f"Missing field {e.args[0]!r} in dependent parameters",
            what="Dependent parameters are incomplete",
            why=f"Required field {e.args[0]!r} is missing",
            how_to_fix="Provide dependTaskList, and dependItemList/definitionId/depTasks/dateValue per item",
        ) from e
    except (TypeError, ValueError, AttributeError) as e:
        raise DeclarationError(f"Malformed dependent parameters: {e}") from e


def validate_parameters(parameters: DependentParameters) -> None:
    """
    Validate the outer shape of a parameter set.

    Each declaration is checked by validate_declaration when its
    DependentExecute is built.
    """
    if not parameters.declarations:
        raise DeclarationError(
            "Dependent parameters have no declarations",
            how_to_fix="Add at least one entry to dependTaskList",
        )
    if not isinstance(parameters.relation, DependentRelation):
        raise DeclarationError(f"Unknown dependent relation: {parameters.relation!r}")


__all__ = ["validate_declaration", "validate_parameters", "parse_parameters"]
