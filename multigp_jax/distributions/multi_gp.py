# multigp_jax/distributions/multi_gp.py
"""
Multi-output Gaussian process log density.

    MultiGP(y | Sigma, w):  y is (d, N), Sigma is the (N, N) kernel matrix,
                            w is a (d,) vector of positive inverse scales.

Each row of y is an independent GP draw with its own scaling of the kernel:

    for i in 1..d:  y[i, :] ~ N(0, Sigma / w[i])

so that

    log p = -0.5 * d * N * log(2π)
            - 0.5 * d * log|Sigma|
            + 0.5 * N * sum(log w)
            - 0.5 * sum_i w[i] * y[i] Sigma^{-1} y[i]^T

The same code evaluates a plain value on concrete arrays and a traced value
inside jax.grad; terms that are constant with respect to every traced
argument are skipped when ``propto=True``.
"""
from __future__ import annotations

import jax
import jax.numpy as jnp

from ..constants import NEG_LOG_SQRT_TWO_PI
from ..core.errors import ShapeMismatch
from ..core.outcome import Outcome, Success
from ..core.scalar import is_variable, neutral, promote_args
from ..linalg import (
    dot_product,
    log,
    log_determinant_spd,
    mdivide_right_spd,
    rows_dot_product,
    sum,
)
from ..validation import RAISE, ValidationCFG, resolve_policy, validate_multi_gp
from .planner import plan_terms

FUNCTION = "multi_gp_log"


def _as_array(x, ndim, name):
    x = jnp.asarray(x)
    if x.ndim != ndim:
        raise ShapeMismatch(
            f"{FUNCTION}: {name} must be {ndim}-D, got shape {x.shape}",
            function=FUNCTION,
            name=name,
        )
    if not jnp.issubdtype(x.dtype, jnp.inexact):
        x = x.astype(jnp.result_type(float))
    return x


def multi_gp_lpdf(y, Sigma, w, *, propto: bool = False, policy=None, cfg: ValidationCFG = ValidationCFG()) -> Outcome:
    """
    Validated log density of the multi-output GP.

    Args:
        y: (d, N) observations, one output dimension per row
        Sigma: (N, N) symmetric positive-definite kernel matrix
        w: (d,) finite, strictly positive inverse scales
        propto: if True, drop terms that are constant w.r.t. every traced argument
        policy: failure policy, its registered name, or None for the default
        cfg: validation tolerances

    Returns:
        Success(value), or Failure(neutral value, kind, message) under the
        accumulating policy.

    Raises:
        DomainError (a subclass per violated constraint) under the raising policy.
        ShapeMismatch if an argument has the wrong number of dimensions.
    """
    policy = resolve_policy(policy)
    y_variable, sigma_variable, w_variable = is_variable(y), is_variable(Sigma), is_variable(w)

    y = _as_array(y, 2, "Random variable")
    Sigma = _as_array(Sigma, 2, "Kernel matrix")
    w = _as_array(w, 1, "Kernel scales")

    lp = neutral(promote_args(y, Sigma, w))

    failure = validate_multi_gp(FUNCTION, y, Sigma, w, lp, policy, cfg)
    if failure is not None:
        return failure

    d, N = y.shape
    if d == 0:
        return Success(lp)

    plan = plan_terms(y_variable, sigma_variable, w_variable, bool(propto))

    if plan.include_constant:
        lp = lp + NEG_LOG_SQRT_TWO_PI * d * N

    if plan.include_covariance:
        lp = lp - (0.5 * d) * log_determinant_spd(Sigma)

    if plan.include_weight:
        lp = lp + (0.5 * N) * sum(log(w))

    if plan.include_cross:
        y_Kinv = mdivide_right_spd(y, Sigma)
        lp = lp - 0.5 * dot_product(rows_dot_product(y_Kinv, y), w)

    return Success(lp)


def multi_gp_log(y, Sigma, w, *, propto: bool = False, policy=None, cfg: ValidationCFG = ValidationCFG()):
    """
    Log density as a scalar.

    Under the raising policy an invalid argument raises; under the
    accumulating policy it yields the neutral value (use ``multi_gp_lpdf``
    to see the failure flag).
    """
    return multi_gp_lpdf(y, Sigma, w, propto=propto, policy=policy, cfg=cfg).value


def multi_gp_log_value_and_grad(y, Sigma, w, *, argnums=(0, 1, 2), propto: bool = False):
    """
    Log density and its gradient w.r.t. the arguments in ``argnums``.

    Only the differentiated arguments are traced, so with ``propto=True`` the
    terms that do not depend on them are skipped.
    """
    def f(y_, Sigma_, w_):
        return multi_gp_log(y_, Sigma_, w_, propto=propto, policy=RAISE)

    y = _as_array(y, 2, "Random variable")
    Sigma = _as_array(Sigma, 2, "Kernel matrix")
    w = _as_array(w, 1, "Kernel scales")
    return jax.value_and_grad(f, argnums=argnums)(y, Sigma, w)


class MultiGP:
    """
    Distribution object for the registry.

    log_prob returns the scalar; lpdf returns the tagged Outcome.
    """

    name = "multi_gp"

    @staticmethod
    def log_prob(y, Sigma, w, *, propto=False, policy=None, cfg: ValidationCFG = ValidationCFG()):
        return multi_gp_log(y, Sigma, w, propto=propto, policy=policy, cfg=cfg)

    @staticmethod
    def lpdf(y, Sigma, w, *, propto=False, policy=None, cfg: ValidationCFG = ValidationCFG()) -> Outcome:
        return multi_gp_lpdf(y, Sigma, w, propto=propto, policy=policy, cfg=cfg)


multi_gp = MultiGP()
