# multigp_jax/__init__.py
"""
multigp-jax: validated multi-output Gaussian-process log densities in JAX.

The same density code yields a plain value on concrete arrays and a value
with gradients under jax.grad; terms that cannot affect the requested
quantity are skipped when only a proportional density is needed.
"""
from .core import (
    ErrorKind,
    DomainError,
    ShapeMismatch,
    NonFiniteInput,
    NotSymmetric,
    NotPositiveDefinite,
    NotPositive,
    Success,
    Failure,
)
from .validation import RAISE, ACCUMULATE, ValidationCFG
from .distributions import (
    multi_gp_lpdf,
    multi_gp_log,
    multi_gp_log_value_and_grad,
    plan_terms,
    TermPlan,
)

__version__ = "0.1.0"

__all__ = [
    "ErrorKind",
    "DomainError",
    "ShapeMismatch",
    "NonFiniteInput",
    "NotSymmetric",
    "NotPositiveDefinite",
    "NotPositive",
    "Success",
    "Failure",
    "RAISE",
    "ACCUMULATE",
    "ValidationCFG",
    "multi_gp_lpdf",
    "multi_gp_log",
    "multi_gp_log_value_and_grad",
    "plan_terms",
    "TermPlan",
]
