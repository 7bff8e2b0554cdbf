# multigp_jax/core/errors.py
"""
Error taxonomy for argument validation.

Every failed precondition maps to one ``ErrorKind``. The throwing failure
policy raises the matching ``DomainError`` subclass; the accumulating policy
carries the same kind inside a ``Failure`` outcome instead.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass


class ErrorKind(enum.Enum):
    SHAPE_MISMATCH = "shape_mismatch"
    NON_FINITE_INPUT = "non_finite_input"
    NOT_SYMMETRIC = "not_symmetric"
    NOT_POSITIVE_DEFINITE = "not_positive_definite"
    NOT_POSITIVE = "not_positive"


class DomainError(ValueError):
    """
    Raised when an argument lies outside the support of a density.

    Attributes:
        kind: ErrorKind of the violated constraint
        function: name of the operation that ran the check
        name: name of the offending argument
    """

    kind: ErrorKind = None

    def __init__(self, message: str, *, function: str = "", name: str = ""):
        super().__init__(message)
        self.message = message
        self.function = function
        self.name = name


class ShapeMismatch(DomainError):
    kind = ErrorKind.SHAPE_MISMATCH


class NonFiniteInput(DomainError):
    kind = ErrorKind.NON_FINITE_INPUT


class NotSymmetric(DomainError):
    kind = ErrorKind.NOT_SYMMETRIC


class NotPositiveDefinite(DomainError):
    kind = ErrorKind.NOT_POSITIVE_DEFINITE


class NotPositive(DomainError):
    kind = ErrorKind.NOT_POSITIVE


_ERRORS = {
    cls.kind: cls
    for cls in (ShapeMismatch, NonFiniteInput, NotSymmetric, NotPositiveDefinite, NotPositive)
}


def error_for(kind: ErrorKind) -> type:
    """Return the DomainError subclass raised for ``kind``."""
    return _ERRORS[kind]


@dataclass(frozen=True)
class Violation:
    """
    Structured description of one failed check.

    function: operation name, e.g. "multi_gp_log"
    name: argument name, e.g. "Kernel matrix"
    constraint: human-readable constraint, e.g. "is not symmetric"
    kind: ErrorKind
    """
    function: str
    name: str
    constraint: str
    kind: ErrorKind

    def describe(self) -> str:
        return f"{self.function}: {self.name} {self.constraint}"

    def to_error(self) -> DomainError:
        return error_for(self.kind)(self.describe(), function=self.function, name=self.name)


__all__ = [
    "ErrorKind",
    "DomainError",
    "ShapeMismatch",
    "NonFiniteInput",
    "NotSymmetric",
    "NotPositiveDefinite",
    "NotPositive",
    "Violation",
    "error_for",
]
