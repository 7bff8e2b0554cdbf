# multigp_jax/gp/kernels/rbf.py
import jax.numpy as jnp
from .params import KernelParams
from .utils import scaled_sqdist


def rbf(X, Z, params: KernelParams):
    """k(x, z) = σ^2 exp(-0.5 ||(x - z)/ℓ||^2)"""
    r2 = scaled_sqdist(X, Z, params.lengthscale)
    return params.variance * jnp.exp(-0.5 * r2)
