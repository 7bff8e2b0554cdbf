# multigp_jax/inference/sampling/hmc.py
"""
Hamiltonian Monte Carlo (HMC) driver.

HMC proposes moves by integrating Hamiltonian dynamics with the gradient of
the energy. The driver runs warmup iterations (with optional step-size
adaptation) followed by sampling iterations, keeping every ``n_thin``-th
post-warmup draw.

Energies are evaluated eagerly, one transition at a time: density kernels
validate their arguments with Python control flow. A proposal whose energy
is a `Failure` (or non-finite) is a zero-probability state and is rejected;
it never aborts the run.
"""
from __future__ import annotations

import logging
import math
import warnings
from dataclasses import dataclass
from typing import Any

import jax
import jax.numpy as jnp
from jax import random
from jax.tree_util import tree_map, tree_leaves, tree_structure, tree_unflatten

from ...core.outcome import Success
from ...energy.base import EnergyTerm
from ..base import InferenceMethod

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HMCCFG:
    """Configuration for HMC."""
    step_size: float = 1e-1
    n_leapfrog: int = 10
    n_warmup: int = 200
    n_samples: int = 200
    n_thin: int = 1
    refresh: int = 100  # log progress every `refresh` iterations; 0 disables
    adapt_step_size: bool = True
    target_accept: float = 0.8
    adapt_rate: float = 0.5


@dataclass
class HMCRun:
    """HMC run results."""
    samples: Any  # pytree stacked on leading axis with shape [n_kept, ...]
    accept_rate: float  # mean acceptance probability over sampling iterations
    energy_trace: jnp.ndarray  # shape [n_kept]
    n_rejected_invalid: int  # proposals rejected as zero-probability, warmup included
    step_size: float  # step size after warmup


def kinetic_energy(p):
    """Compute kinetic energy: K(p) = 0.5 * ||p||^2"""
    sq_sum = 0.0
    for leaf in tree_leaves(p):
        sq_sum += jnp.sum(leaf ** 2)
    return 0.5 * sq_sum


def sample_momentum(key, q):
    """Standard normal momentum with the structure of q, one key per leaf."""
    leaves = tree_leaves(q)
    keys = random.split(key, len(leaves))
    p = [random.normal(k, jnp.shape(x), dtype=jnp.result_type(x)) for k, x in zip(keys, leaves)]
    return tree_unflatten(tree_structure(q), p)


def make_potential(energy, energy_args=(), energy_kwargs=None):
    """
    Wrap an energy into q -> (U, grad U, valid).

    Energies exposing `outcome` report invalid regions without raising;
    plain callables are assumed valid wherever they return a finite value.
    """
    if energy_kwargs is None:
        energy_kwargs = {}

    if hasattr(energy, "outcome"):
        outcome_fn = energy.outcome
    else:
        def outcome_fn(q, *args, **kwargs):
            return Success(energy(q, *args, **kwargs))

    def f(q):
        out = outcome_fn(q, *energy_args, **energy_kwargs)
        return out.value, out

    value_and_grad = jax.value_and_grad(f, has_aux=True)

    def potential(q):
        (U, out), grad_U = value_and_grad(q)
        valid = (
            out.ok
            and bool(jnp.isfinite(U))
            and all(bool(jnp.all(jnp.isfinite(g))) for g in tree_leaves(grad_U))
        )
        return U, grad_U, valid

    return potential


class HMC(InferenceMethod):
    """
    Hamiltonian Monte Carlo.

    Treats the energy as a black box: U(q) = energy(q, *energy_args, **energy_kwargs).
    """

    def __init__(self, cfg: HMCCFG = HMCCFG()):
        if cfg.n_samples < 1:
            raise ValueError("n_samples must be >= 1")
        if cfg.n_warmup < 0:
            raise ValueError("n_warmup must be >= 0")
        if cfg.n_thin < 1:
            raise ValueError("n_thin must be >= 1")
        if cfg.n_leapfrog < 1:
            raise ValueError("n_leapfrog must be >= 1")
        self.cfg = cfg

    def _leapfrog(self, q, p, grad_U, step_size, potential):
        """
        Leapfrog integration.

        Returns (q, p, U, grad_U, valid); stops at the first invalid point.
        """
        n_steps = self.cfg.n_leapfrog
        p = tree_map(lambda p_, g: p_ - 0.5 * step_size * g, p, grad_U)
        U = None
        for i in range(n_steps):
            q = tree_map(lambda q_, p_: q_ + step_size * p_, q, p)
            U, grad_U, valid = potential(q)
            if not valid:
                return q, p, U, grad_U, False
            scale = 1.0 if i < n_steps - 1 else 0.5
            p = tree_map(lambda p_, g: p_ - scale * step_size * g, p, grad_U)
        return q, p, U, grad_U, True

    def _single_step(self, state, key, step_size, potential):
        """
        Single HMC transition.

        Args:
            state: (q, U, grad_U) at the current position
        Returns:
            (next_state, accept_prob, valid)
        """
        q_current, U_current, grad_U_current = state
        key_momentum, key_accept = random.split(key)

        p_current = sample_momentum(key_momentum, q_current)
        H_current = U_current + kinetic_energy(p_current)

        q_proposed, p_proposed, U_proposed, grad_U_proposed, valid = self._leapfrog(
            q_current, p_current, grad_U_current, step_size, potential
        )
        if not valid:
            # zero-probability proposal
            return state, 0.0, False

        H_proposed = U_proposed + kinetic_energy(p_proposed)
        log_accept_ratio = float(H_current - H_proposed)
        accept_prob = 1.0 if log_accept_ratio >= 0.0 else math.exp(log_accept_ratio)
        if not math.isfinite(accept_prob):
            return state, 0.0, False

        accept = float(random.uniform(key_accept)) < accept_prob
        if accept:
            return (q_proposed, U_proposed, grad_U_proposed), accept_prob, True
        return state, accept_prob, True

    def _log_progress(self, iteration, total, warmup):
        refresh = self.cfg.refresh
        if refresh <= 0:
            return
        if iteration == 1 or iteration == total or iteration % refresh == 0:
            logger.info(
                "Iteration: %d / %d [%3d%%]  (%s)",
                iteration, total, int(100 * iteration / total),
                "Warmup" if warmup else "Sampling",
            )

    def run(self, energy: EnergyTerm, phi_init, *, key, energy_args=(), energy_kwargs=None) -> HMCRun:
        """
        Run HMC sampling.

        Args:
            energy: Energy term to sample from
            phi_init: Initial parameter pytree; must be a valid state
            key: PRNG key
            energy_args: Additional arguments for energy
            energy_kwargs: Additional keyword arguments for energy

        Returns:
            HMCRun with samples, accept_rate, energy_trace, n_rejected_invalid and step_size

        Raises:
            ValueError: if the initial state has zero probability
        """
        cfg = self.cfg
        potential = make_potential(energy, energy_args, energy_kwargs)

        U_init, grad_U_init, valid = potential(phi_init)
        if not valid:
            raise ValueError("Initial state has zero probability (invalid energy or gradient).")
        state = (phi_init, U_init, grad_U_init)

        step_size = cfg.step_size
        total = cfg.n_warmup + cfg.n_samples
        samples, energies, accept_probs = [], [], []
        n_rejected_invalid = 0

        for it in range(total):
            warmup = it < cfg.n_warmup
            key, subkey = random.split(key)
            state, accept_prob, valid = self._single_step(state, subkey, step_size, potential)
            n_rejected_invalid += int(not valid)

            if warmup:
                if cfg.adapt_step_size:
                    step_size *= math.exp(cfg.adapt_rate * (accept_prob - cfg.target_accept))
            else:
                accept_probs.append(accept_prob)
                if (it - cfg.n_warmup) % cfg.n_thin == 0:
                    samples.append(state[0])
                    energies.append(state[1])

            self._log_progress(it + 1, total, warmup)

        if n_rejected_invalid == total:
            warnings.warn(
                "Every HMC proposal landed in a zero-probability region; "
                "the chain never moved. Consider a smaller step_size.",
                RuntimeWarning,
            )

        samples = tree_map(lambda *xs: jnp.stack(xs), *samples)
        return HMCRun(
            samples=samples,
            accept_rate=float(jnp.mean(jnp.asarray(accept_probs))),
            energy_trace=jnp.stack(energies),
            n_rejected_invalid=n_rejected_invalid,
            step_size=step_size,
        )
