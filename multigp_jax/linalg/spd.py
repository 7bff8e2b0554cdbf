# multigp_jax/linalg/spd.py
"""
Dense linear-algebra primitives for symmetric positive-definite matrices.

All routines are written with jax.numpy / jax.scipy only, so they work on
concrete arrays and under jax.grad alike. Inputs are assumed to have passed
validation (square, symmetric, positive definite); only the shape contract is
checked here.
"""
from __future__ import annotations

import jax.numpy as jnp
from jax.scipy.linalg import cho_solve

from ..core.errors import ShapeMismatch


def _check_square(A, function):
    if A.ndim != 2 or A.shape[0] != A.shape[1]:
        raise ShapeMismatch(
            f"{function}: expecting a square matrix, got shape {A.shape}",
            function=function,
            name="A",
        )


def log_determinant_spd(A):
    """
    log|A| for SPD A via its Cholesky factor:
        log|A| = 2 * sum(log(diag(L))),  A = L L^T
    """
    A = jnp.asarray(A)
    _check_square(A, "log_determinant_spd")
    L = jnp.linalg.cholesky(A)
    return 2.0 * jnp.sum(jnp.log(jnp.diagonal(L)))


def mdivide_right_spd(b, A):
    """
    Right division b A^{-1} for SPD A, without forming the inverse.

    Since A is symmetric, b A^{-1} = (A^{-1} b^T)^T, solved with the
    Cholesky factor of A.

    Args:
        b: (d, N)
        A: (N, N) SPD

    Returns:
        (d, N)
    """
    b = jnp.asarray(b)
    A = jnp.asarray(A)
    _check_square(A, "mdivide_right_spd")
    if b.shape[-1] != A.shape[0]:
        raise ShapeMismatch(
            f"mdivide_right_spd: columns of b ({b.shape[-1]}) and rows of A ({A.shape[0]}) "
            "must match in size",
            function="mdivide_right_spd",
            name="b",
        )
    L = jnp.linalg.cholesky(A)
    return cho_solve((L, True), b.T).T


def rows_dot_product(a, b):
    """Vector whose i-th entry is dot(a[i, :], b[i, :])."""
    a = jnp.asarray(a)
    b = jnp.asarray(b)
    if a.shape != b.shape:
        raise ShapeMismatch(
            f"rows_dot_product: shapes {a.shape} and {b.shape} must match",
            function="rows_dot_product",
            name="a",
        )
    return jnp.sum(a * b, axis=1)


def dot_product(a, b):
    a = jnp.ravel(jnp.asarray(a))
    b = jnp.ravel(jnp.asarray(b))
    if a.shape != b.shape:
        raise ShapeMismatch(
            f"dot_product: sizes {a.shape[0]} and {b.shape[0]} must match",
            function="dot_product",
            name="a",
        )
    return jnp.dot(a, b)


def log(x):
    return jnp.log(x)


def sum(x):  # noqa: A001 - mirrors the primitive's name
    return jnp.sum(x)
