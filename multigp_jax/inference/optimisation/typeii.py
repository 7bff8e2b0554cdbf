# multigp_jax/inference/optimisation/typeii.py
"""
Type-II optimisation (ML-II).

Finds the parameters minimising an energy:
    params* = argmin_params E(params)

For a `MultiGPEnergy` with ``propto=True`` and no log-Jacobian this is
maximum marginal likelihood for the kernel hyperparameters and the output
scales. Energies are evaluated under jax.value_and_grad, so the constant
term of the density is skipped; every other term depends on the
parameters and is kept.

Steps are taken eagerly. An update that lands outside the support (e.g. a
kernel matrix that is no longer positive definite) is pulled halfway back
toward the last valid parameters and the optimizer state is restored to
the one it had there; the step is recorded as inf energy and nan grad norm.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, Optional

import jax.numpy as jnp
import optax
from jax.tree_util import tree_map

from ...energy.base import EnergyTerm
from ..base import InferenceMethod
from ..sampling.hmc import make_potential


@dataclass(frozen=True)
class TypeIICFG:
    """Configuration for Type-II optimisation."""
    steps: int = 200
    lr: float = 1e-2
    optimizer: Literal["sgd", "adam", "rmsprop"] = "adam"
    clip_grad_norm: Optional[float] = None


@dataclass
class TypeIIRun:
    """Type-II run results."""
    params: Any  # last parameters with a valid energy
    energy_trace: jnp.ndarray  # shape [steps]; inf where the step was invalid
    grad_norm_trace: jnp.ndarray  # shape [steps]; nan where the step was invalid


class TypeII(InferenceMethod):
    """
    Type-II optimiser.

    Examples:
        >>> energy = MultiGPEnergy(kernel="rbf", propto=True, include_log_jacobian=False)
        >>> method = TypeII(TypeIICFG(steps=200, lr=5e-2))
        >>> result = method.run(energy, init_params(d=2), energy_args=(X, Y))
    """

    def __init__(self, cfg: TypeIICFG = TypeIICFG()):
        self.cfg = cfg

    def _get_optimizer(self):
        """Get optimizer based on configuration."""
        lr = self.cfg.lr
        if self.cfg.optimizer == "sgd":
            opt = optax.sgd(lr)
        elif self.cfg.optimizer == "adam":
            opt = optax.adam(lr)
        elif self.cfg.optimizer == "rmsprop":
            opt = optax.rmsprop(lr)
        else:
            raise ValueError(f"Unknown optimizer: {self.cfg.optimizer}")
        if self.cfg.clip_grad_norm is not None:
            opt = optax.chain(optax.clip_by_global_norm(self.cfg.clip_grad_norm), opt)
        return opt

    def run(self, energy: EnergyTerm, phi_init, *, key=None, energy_args=(), energy_kwargs=None) -> TypeIIRun:
        """
        Run Type-II optimisation.

        Args:
            energy: Energy term to minimise
            phi_init: Initial parameter pytree; must be a valid state
            key: unused, accepted for signature compatibility with samplers
            energy_args: Additional arguments for energy
            energy_kwargs: Additional keyword arguments for energy

        Returns:
            TypeIIRun with the optimised parameters, energy trace and grad norm trace

        Raises:
            ValueError: if the optimizer name is unknown or the initial state is invalid
        """
        optimizer = self._get_optimizer()
        potential = make_potential(energy, energy_args, energy_kwargs)

        params = phi_init
        last_valid, last_valid_state = None, None
        opt_state = optimizer.init(params)
        energy_trace, grad_norm_trace = [], []

        for _ in range(self.cfg.steps):
            val, grad, valid = potential(params)
            if not valid:
                if last_valid is None:
                    raise ValueError("Initial parameters have zero probability (invalid energy or gradient).")
                # the rejected update is dropped from the optimizer state too
                params = tree_map(lambda a, b: 0.5 * (a + b), last_valid, params)
                opt_state = last_valid_state
                energy_trace.append(jnp.inf)
                grad_norm_trace.append(jnp.nan)
                continue

            last_valid, last_valid_state = params, opt_state
            energy_trace.append(val)
            grad_norm_trace.append(optax.tree.norm(grad))

            updates, opt_state = optimizer.update(grad, opt_state, params)
            params = optax.apply_updates(params, updates)

        if last_valid is None:
            last_valid = params

        return TypeIIRun(
            params=last_valid,
            energy_trace=jnp.asarray(energy_trace),
            grad_norm_trace=jnp.asarray(grad_norm_trace),
        )
