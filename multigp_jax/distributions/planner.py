# multigp_jax/distributions/planner.py
"""
Term-inclusion planning.

A log density is a sum of terms. When only a value proportional to the
density is needed (``propto=True``), a term may be dropped unless it depends
on an argument that is currently being differentiated. Dropping it changes
the value by a constant and leaves every gradient unchanged.
"""
from __future__ import annotations

import functools
from dataclasses import dataclass

from ..core.scalar import is_variable


def include_summand(propto: bool, *variable: bool) -> bool:
    """
    True if a term depending on arguments with the given ``variable`` flags
    must be computed. With no flags, the term is a pure constant.
    """
    return (not propto) or any(variable)


@dataclass(frozen=True)
class TermPlan:
    """Which additive terms of the multi-output GP log density to compute."""
    include_constant: bool
    include_covariance: bool
    include_weight: bool
    include_cross: bool


@functools.lru_cache(maxsize=None)
def plan_terms(y_variable: bool, sigma_variable: bool, w_variable: bool, propto: bool) -> TermPlan:
    return TermPlan(
        include_constant=include_summand(propto),
        include_covariance=include_summand(propto, sigma_variable),
        include_weight=include_summand(propto, w_variable),
        include_cross=include_summand(propto, y_variable, sigma_variable, w_variable),
    )


def plan_for(y, Sigma, w, propto: bool) -> TermPlan:
    """Plan from the arguments themselves; tracers count as variable."""
    return plan_terms(is_variable(y), is_variable(Sigma), is_variable(w), bool(propto))
