# multigp_jax/gp/kernels/utils.py
import jax.numpy as jnp


def scaled_sqdist(X, Z, lengthscale):
    """
    Squared distances ||(x - z) / ell||^2 between the rows of X (N, Q) and Z (M, Q).

    Clipped at zero against cancellation in the expansion.
    """
    Xs = X / lengthscale
    Zs = Z / lengthscale
    x2 = jnp.sum(Xs * Xs, axis=1)[:, None]
    z2 = jnp.sum(Zs * Zs, axis=1)[None, :]
    return jnp.maximum(x2 + z2 - 2.0 * (Xs @ Zs.T), 0.0)


def add_jitter(K, jitter):
    return K + jitter * jnp.eye(K.shape[0], dtype=K.dtype)
