# multigp_jax/validation/__init__.py
"""
Precondition validation: failure policies, individual checks, and the ordered
check chain of each density.
"""
from .policy import (
    FailurePolicy,
    RaisePolicy,
    AccumulatePolicy,
    RAISE,
    ACCUMULATE,
    register,
    get,
    resolve_policy,
    DEFAULT_POLICY_ENV,
)
from .checks import (
    ValidationCFG,
    check_size_match,
    check_positive,
    check_finite,
    check_not_nan,
    check_symmetric,
    check_pos_definite,
)
from .multi_gp import validate_multi_gp

__all__ = [
    "FailurePolicy",
    "RaisePolicy",
    "AccumulatePolicy",
    "RAISE",
    "ACCUMULATE",
    "register",
    "get",
    "resolve_policy",
    "DEFAULT_POLICY_ENV",
    "ValidationCFG",
    "check_size_match",
    "check_positive",
    "check_finite",
    "check_not_nan",
    "check_symmetric",
    "check_pos_definite",
    "validate_multi_gp",
]
