# multigp_jax/energy/base.py
from __future__ import annotations

from typing import Protocol, runtime_checkable
import jax.numpy as jnp

from ..core.outcome import Outcome


@runtime_checkable
class EnergyTerm(Protocol):
    """
    Protocol for energy terms.

    Design principles
    -----------------
    - An EnergyTerm is a scalar energy E(q) = -log p(q | data) (up to a constant).
    - It MUST be callable and return a scalar `jnp.ndarray` with shape ().
    - It MUST be side-effect free.

    Invalid parameter regions
    -------------------------
    Calling an energy raises `DomainError` outside the support. Energies
    that can also report invalid regions without raising expose
    `outcome(q, ...) -> Outcome`; samplers and optimisers prefer it and treat
    a `Failure` as a zero-probability state.
    """

    def __call__(self, *args, **kwargs) -> jnp.ndarray:
        ...


@runtime_checkable
class EnergyWithOutcome(EnergyTerm, Protocol):

    def outcome(self, *args, **kwargs) -> Outcome:
        ...
