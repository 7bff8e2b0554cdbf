# multigp_jax/validation/multi_gp.py
from __future__ import annotations

from typing import Optional

from ..core.outcome import Failure
from .checks import (
    ValidationCFG,
    check_finite,
    check_not_nan,
    check_pos_definite,
    check_positive,
    check_size_match,
    check_symmetric,
)


def validate_multi_gp(function, y, Sigma, w, accumulator, policy, cfg: ValidationCFG = ValidationCFG()) -> Optional[Failure]:
    """
    Preconditions of the multi-output GP density, in order.

    Kernel-matrix checks come first (cheap shape checks before the Cholesky
    based positive-definite check); the cross-argument size checks assume a
    well-formed kernel matrix. Stops at the first failure.

    Args:
        y: (d, N) observations
        Sigma: (N, N) kernel matrix
        w: (d,) inverse scales
        accumulator: value handed to the policy on failure
        policy: FailurePolicy

    Returns:
        None if every check passes, else the policy's Failure.
    """
    checks = (
        lambda: check_size_match(
            function,
            Sigma.shape[0], "Rows of kernel matrix",
            Sigma.shape[1], "columns of kernel matrix",
            accumulator, policy,
        ),
        lambda: check_positive(function, Sigma.shape[0], "Kernel matrix rows", accumulator, policy),
        lambda: check_finite(function, Sigma, "Kernel matrix", accumulator, policy),
        lambda: check_symmetric(function, Sigma, "Kernel matrix", accumulator, policy, tol=cfg.symmetry_tol),
        lambda: check_pos_definite(function, Sigma, "Kernel matrix", accumulator, policy, tol=cfg.pd_tol),
        lambda: check_size_match(
            function,
            y.shape[0], "Rows of random variable",
            w.shape[0], "size of kernel scales",
            accumulator, policy,
        ),
        lambda: check_size_match(
            function,
            y.shape[1], "Columns of random variable",
            Sigma.shape[0], "rows of kernel matrix",
            accumulator, policy,
        ),
        lambda: check_finite(function, w, "Kernel scales", accumulator, policy),
        lambda: check_positive(function, w, "Kernel scales", accumulator, policy),
        lambda: check_not_nan(function, y, "Random variable", accumulator, policy),
    )
    for check in checks:
        failure = check()
        if failure is not None:
            return failure
    return None
