# multigp_jax/gp/kernels/params.py
from __future__ import annotations
from dataclasses import dataclass, field
import jax.numpy as jnp
from jax.tree_util import register_pytree_node_class


@register_pytree_node_class
@dataclass(frozen=True)
class KernelParams:
    """
    Stationary kernel hyperparameters as a pytree.

    Both leaves can be traced, which makes the kernel matrix built from them a
    differentiated argument of the density.
    """

    lengthscale: jnp.ndarray = field(default_factory=lambda: jnp.array(1.0))
    variance: jnp.ndarray = field(default_factory=lambda: jnp.array(1.0))

    # ---- pytree protocol ----
    def tree_flatten(self):
        return (self.lengthscale, self.variance), None

    @classmethod
    def tree_unflatten(cls, aux_data, children):
        return cls(lengthscale=children[0], variance=children[1])

    @classmethod
    def from_log(cls, log_lengthscale, log_variance) -> KernelParams:
        """Build from unconstrained log-parameters."""
        return cls(lengthscale=jnp.exp(log_lengthscale), variance=jnp.exp(log_variance))
