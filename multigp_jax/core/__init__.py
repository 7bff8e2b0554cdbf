# multigp_jax/core/__init__.py
from .errors import (
    ErrorKind,
    DomainError,
    ShapeMismatch,
    NonFiniteInput,
    NotSymmetric,
    NotPositiveDefinite,
    NotPositive,
    Violation,
    error_for,
)
from .outcome import Success, Failure, Outcome
from .typing import Array, ArrayLike

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
    "Success",
    "Failure",
    "Outcome",
    "Array",
    "ArrayLike",
]
