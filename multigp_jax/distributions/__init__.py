# multigp_jax/distributions/__init__.py

from .base import register, get

from .planner import TermPlan, include_summand, plan_terms, plan_for
from .multi_gp import (
    MultiGP,
    multi_gp,
    multi_gp_lpdf,
    multi_gp_log,
    multi_gp_log_value_and_grad,
)

# --------------------------------------------------
# Registry
# --------------------------------------------------
register("multi_gp", multi_gp)

__all__ = [
    "get",
    "TermPlan",
    "include_summand",
    "plan_terms",
    "plan_for",
    "MultiGP",
    "multi_gp",
    "multi_gp_lpdf",
    "multi_gp_log",
    "multi_gp_log_value_and_grad",
]
