# multigp_jax/core/scalar.py
"""
Scalar plumbing shared by the density kernels.

The same kernel code runs on concrete arrays (plain values) and on JAX
tracers (values carrying a differentiation trace inside ``jax.grad``).
"""
from __future__ import annotations

import jax
import jax.numpy as jnp


def is_variable(x) -> bool:
    """True if ``x`` is being traced by a JAX transformation (e.g. jax.grad)."""
    return isinstance(x, jax.core.Tracer)


def promote_args(*args):
    """
    Common result dtype of the arguments.

    Integer-only arguments promote to the default float type, so a density of
    integer data is still a float.
    """
    dtype = jnp.result_type(*args)
    if not jnp.issubdtype(dtype, jnp.inexact):
        dtype = jnp.result_type(dtype, float)
    return dtype


def neutral(dtype):
    """Additive identity of ``dtype``; the starting accumulator of a log density."""
    return jnp.zeros((), dtype=dtype)
