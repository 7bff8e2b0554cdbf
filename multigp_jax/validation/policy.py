# multigp_jax/validation/policy.py
"""
Failure policies.

A policy decides what a failed check does:
  - RaisePolicy: raise the DomainError matching the violated constraint.
  - AccumulatePolicy: return a Failure outcome carrying the current
    accumulator, so the caller can treat the state as zero-probability
    without unwinding.

Policies are registered by name. ``resolve_policy(None)`` returns the default
policy, "raise" unless the environment variable MULTIGP_DEFAULT_POLICY names
another registered policy.
"""
from __future__ import annotations

import os
from typing import Protocol, Union, runtime_checkable

from ..core.errors import Violation
from ..core.outcome import Failure

DEFAULT_POLICY_ENV = "MULTIGP_DEFAULT_POLICY"

_POLICY_REGISTRY = {}


@runtime_checkable
class FailurePolicy(Protocol):
    """Decides how a failed check is surfaced."""

    name: str

    def fail(self, violation: Violation, accumulator) -> Failure:
        ...


class RaisePolicy:
    name = "raise"

    def fail(self, violation: Violation, accumulator) -> Failure:
        raise violation.to_error()

    def __repr__(self):
        return "RaisePolicy()"


class AccumulatePolicy:
    name = "accumulate"

    def fail(self, violation: Violation, accumulator) -> Failure:
        return Failure(value=accumulator, kind=violation.kind, message=violation.describe())

    def __repr__(self):
        return "AccumulatePolicy()"


def register(name: str, policy):
    """
    Register a policy instance under a string key.
    """
    if name in _POLICY_REGISTRY:
        raise KeyError(f"Policy '{name}' already registered.")
    _POLICY_REGISTRY[name] = policy


def get(name: str):
    """
    Retrieve a policy by name.
    """
    try:
        return _POLICY_REGISTRY[name]
    except KeyError:
        raise KeyError(
            f"Unknown policy '{name}'. "
            f"Available: {list(_POLICY_REGISTRY.keys())}"
        )


def default_policy():
    return get(os.getenv(DEFAULT_POLICY_ENV, "raise"))


def resolve_policy(policy: Union[None, str, FailurePolicy]) -> FailurePolicy:
    if policy is None:
        return default_policy()
    if isinstance(policy, str):
        return get(policy)
    if not isinstance(policy, FailurePolicy):
        raise TypeError(f"Expected a failure policy or its name, got {type(policy).__name__}")
    return policy


RAISE = RaisePolicy()
ACCUMULATE = AccumulatePolicy()

register(RAISE.name, RAISE)
register(ACCUMULATE.name, ACCUMULATE)
