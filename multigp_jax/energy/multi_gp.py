# multigp_jax/energy/multi_gp.py
"""
Energy of a multi-output GP model with learnt kernel hyperparameters and
per-output inverse scales.

Parameters live on the unconstrained scale as a pytree:

    {"log_lengthscale": (), "log_variance": (), "log_w": (d,)}

The kernel matrix Sigma = k(X, X) + jitter * I is rebuilt from the parameters
on every call, so under jax.grad both Sigma and w are traced while the
observations Y stay fixed.
"""
from __future__ import annotations

from dataclasses import dataclass

import jax.numpy as jnp

from ..core.outcome import Outcome, Success
from ..distributions.multi_gp import multi_gp_lpdf
from ..gp.kernels import KernelParams, add_jitter, get as get_kernel
from ..validation import ACCUMULATE, RAISE
from .base import EnergyTerm


def init_params(d: int, lengthscale=1.0, variance=1.0, w=1.0) -> dict:
    """Unconstrained parameter pytree for ``d`` outputs."""
    return {
        "log_lengthscale": jnp.log(jnp.asarray(float(lengthscale))),
        "log_variance": jnp.log(jnp.asarray(float(variance))),
        "log_w": jnp.log(jnp.full((d,), float(w))),
    }


def constrain(params: dict):
    """Map unconstrained parameters to (KernelParams, w)."""
    kernel_params = KernelParams.from_log(params["log_lengthscale"], params["log_variance"])
    return kernel_params, jnp.exp(params["log_w"])


@dataclass(frozen=True)
class MultiGPEnergy(EnergyTerm):
    """
    E(params; X, Y) = -log MultiGP(Y | k(X, X) + jitter I, exp(log_w)) - log|J|

    kernel: registered kernel name
    jitter: diagonal added to the kernel matrix
    propto: drop terms that are constant w.r.t. the parameters. Only traced
        arguments count as parameters, so a propto energy evaluated outside
        jax.grad drops every density term; its values are meaningful under a
        trace only.
    include_log_jacobian: add the log-Jacobian of the exp transform, so that
        sampling on the unconstrained scale targets flat priors on the
        constrained one. Disable for maximum-likelihood fits.
    """
    kernel: str = "rbf"
    jitter: float = 1e-6
    propto: bool = False
    include_log_jacobian: bool = True

    def kernel_matrix(self, params: dict, X):
        kernel_params, _ = constrain(params)
        K = get_kernel(self.kernel)(X, X, kernel_params)
        return add_jitter(K, self.jitter)

    def log_density(self, params: dict, X, Y, *, policy=None) -> Outcome:
        Sigma = self.kernel_matrix(params, X)
        _, w = constrain(params)
        out = multi_gp_lpdf(Y, Sigma, w, propto=self.propto, policy=policy)
        if not out.ok or not self.include_log_jacobian:
            return out
        log_jac = (
            jnp.sum(params["log_lengthscale"])
            + jnp.sum(params["log_variance"])
            + jnp.sum(params["log_w"])
        )
        return Success(out.value + log_jac)

    def outcome(self, params: dict, X, Y) -> Outcome:
        """Energy as an Outcome; invalid parameters give a Failure instead of raising."""
        out = self.log_density(params, X, Y, policy=ACCUMULATE)
        if not out.ok:
            return out
        return Success(-out.value)

    def __call__(self, params: dict, X, Y) -> jnp.ndarray:
        return -self.log_density(params, X, Y, policy=RAISE).value
