# multigp_jax/validation/checks.py
"""
Argument checks.

Each check returns None when the constraint holds. Otherwise it describes the
violation and hands it to the failure policy, whose result (a Failure, or an
exception for the raising policy) is passed on to the caller.

Checks inspect values with Python control flow, so they need concrete values:
plain arrays, or the tracers of an eager ``jax.grad``. Values are read through
``stop_gradient`` so the checks add nothing to the derivative.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import jax
import jax.numpy as jnp

from ..constants import CONSTRAINT_TOLERANCE
from ..core.errors import ErrorKind, Violation
from ..core.outcome import Failure

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidationCFG:
    """Tolerances used by the matrix checks."""
    symmetry_tol: float = CONSTRAINT_TOLERANCE
    pd_tol: float = CONSTRAINT_TOLERANCE


def _fail(function, name, constraint, kind, accumulator, policy) -> Failure:
    violation = Violation(function=function, name=name, constraint=constraint, kind=kind)
    logger.debug("check failed: %s", violation.describe())
    return policy.fail(violation, accumulator)


def _values(x):
    return jax.lax.stop_gradient(jnp.asarray(x))


def _first(mask):
    """Multi-index of the first True entry of ``mask``."""
    flat = int(jnp.argmax(jnp.ravel(mask)))
    return tuple(int(i) for i in jnp.unravel_index(flat, mask.shape))


def check_size_match(function, size1, name1, size2, name2, accumulator, policy) -> Optional[Failure]:
    if size1 == size2:
        return None
    return _fail(
        function,
        f"{name1} ({size1})",
        f"and {name2} ({size2}) must match in size",
        ErrorKind.SHAPE_MISMATCH,
        accumulator,
        policy,
    )


def check_positive(function, value, name, accumulator, policy) -> Optional[Failure]:
    """Scalar (e.g. a dimension) or every entry of an array must be > 0."""
    if isinstance(value, int):
        if value > 0:
            return None
        return _fail(
            function, name, f"is {value}, but must be > 0",
            ErrorKind.NOT_POSITIVE, accumulator, policy,
        )

    x = _values(value)
    bad = ~(x > 0)
    if not bool(jnp.any(bad)):
        return None
    idx = _first(bad)
    return _fail(
        function,
        f"{name}{list(idx)}",
        f"is {float(x[idx])}, but must be > 0",
        ErrorKind.NOT_POSITIVE,
        accumulator,
        policy,
    )


def check_finite(function, value, name, accumulator, policy) -> Optional[Failure]:
    x = _values(value)
    bad = ~jnp.isfinite(x)
    if not bool(jnp.any(bad)):
        return None
    idx = _first(bad)
    return _fail(
        function,
        f"{name}{list(idx)}",
        f"is {float(x[idx])}, but must be finite",
        ErrorKind.NON_FINITE_INPUT,
        accumulator,
        policy,
    )


def check_not_nan(function, value, name, accumulator, policy) -> Optional[Failure]:
    x = _values(value)
    bad = jnp.isnan(x)
    if not bool(jnp.any(bad)):
        return None
    idx = _first(bad)
    return _fail(
        function,
        f"{name}{list(idx)}",
        "is nan, but must not be nan",
        ErrorKind.NON_FINITE_INPUT,
        accumulator,
        policy,
    )


def check_symmetric(function, value, name, accumulator, policy, tol=CONSTRAINT_TOLERANCE) -> Optional[Failure]:
    """|A[i, j] - A[j, i]| <= tol for all i, j. Assumes A is square."""
    A = _values(value)
    if A.shape[0] <= 1:
        return None
    bad = jnp.abs(A - A.T) > tol
    if not bool(jnp.any(bad)):
        return None
    i, j = _first(bad)
    return _fail(
        function,
        name,
        f"is not symmetric. {name}[{i}, {j}] is {float(A[i, j])}, "
        f"but {name}[{j}, {i}] is {float(A[j, i])}",
        ErrorKind.NOT_SYMMETRIC,
        accumulator,
        policy,
    )


def check_pos_definite(function, value, name, accumulator, policy, tol=CONSTRAINT_TOLERANCE) -> Optional[Failure]:
    """
    A must be positive definite. Assumes A is square and symmetric.

    1x1: the single entry must exceed ``tol``.
    Otherwise: a Cholesky factor must exist with a finite, strictly positive
    diagonal (jnp.linalg.cholesky returns NaNs when the factorisation fails).
    Singular (semi-definite) matrices are rejected.
    """
    A = _values(value)
    if A.shape[0] == 1:
        ok = bool(A[0, 0] > tol)
    else:
        d = jnp.diagonal(jnp.linalg.cholesky(A))
        ok = bool(jnp.all(jnp.isfinite(d)) & jnp.all(d > 0))
    if ok:
        return None
    return _fail(
        function, name, "is not positive definite",
        ErrorKind.NOT_POSITIVE_DEFINITE, accumulator, policy,
    )
