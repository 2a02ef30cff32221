"""Error hierarchy for the carto stylesheet compiler.

Every error carries a human-readable message and, when known, the source
location of the node that caused it.  Compilation is fail-fast: the first
error raised aborts the whole pass.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from carto.model.node import SourceLocation
    from carto.model.value import Value


class CartoError(Exception):
    """Base error for all carto errors."""

    def __init__(
        self,
        message: str,
        *,
        location: SourceLocation | None = None,
        cause: Exception | None = None,
    ) -> None:
        if location is not None and location.is_known:
            super().__init__(f"{message} at {location}")
        else:
            super().__init__(message)
        self.message = message
        self.location = location
        self.cause = cause


# ---------------------------------------------------------------------------
# Evaluation errors
# ---------------------------------------------------------------------------


class UndefinedVariableError(CartoError):
    """A variable reference did not resolve to a value."""

    def __init__(self, name: str, *, location: SourceLocation | None = None) -> None:
        super().__init__(f"Unknown variable: @{name}", location=location)
        self.name = name


class TypeMismatchError(CartoError):
    """An operation was applied to values of the wrong kind."""

    def __init__(
        self,
        message: str,
        *,
        location: SourceLocation | None = None,
        operator: str | None = None,
        lhs_type: str | None = None,
        rhs_type: str | None = None,
    ) -> None:
        super().__init__(message, location=location)
        self.operator = operator
        self.lhs_type = lhs_type
        self.rhs_type = rhs_type

    @classmethod
    def for_operator(
        cls,
        operator: str,
        lhs: Value,
        rhs: Value,
        *,
        location: SourceLocation | None = None,
    ) -> TypeMismatchError:
        lhs_type = lhs.type.name.lower()
        rhs_type = rhs.type.name.lower()
        return cls(
            f"Cannot apply '{operator}' to {lhs_type} and {rhs_type}",
            location=location,
            operator=operator,
            lhs_type=lhs_type,
            rhs_type=rhs_type,
        )


class UnknownFunctionError(CartoError):
    """A function call named a function that is not registered."""

    def __init__(self, name: str, *, location: SourceLocation | None = None) -> None:
        super().__init__(f"Unknown function: {name}()", location=location)
        self.name = name


# ---------------------------------------------------------------------------
# Structural errors
# ---------------------------------------------------------------------------


class InvalidSelectorNameError(CartoError):
    """A name selector did not start with '#' or '.'."""

    def __init__(self, name: str, *, location: SourceLocation | None = None) -> None:
        super().__init__(f"Unknown name: {name}", location=location)
        self.name = name


class UnknownPredicateError(CartoError):
    """A filter clause carried a node kind that is not a filter predicate."""

    def __init__(self, kind: str, *, location: SourceLocation | None = None) -> None:
        super().__init__(f"Unknown predicate '{kind}'", location=location)
        self.kind = kind


class InvalidNodeKindError(CartoError):
    """A node of an unexpected kind appeared where a statement was expected."""

    def __init__(
        self,
        kind: str,
        *,
        context: str = "stylesheet",
        location: SourceLocation | None = None,
    ) -> None:
        super().__init__(f"Invalid {context} node type: {kind}", location=location)
        self.kind = kind
        self.context = context


# ---------------------------------------------------------------------------
# Backend errors
# ---------------------------------------------------------------------------


class GenerationError(CartoError):
    """Raised by backend helpers when a resolved rule cannot be emitted."""

    def __init__(self, message: str, *, key: str | None = None, **kwargs) -> None:
        super().__init__(message, **kwargs)
        self.key = key
