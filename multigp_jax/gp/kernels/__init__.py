# multigp_jax/gp/kernels/__init__.py

from .base import register, get
from .params import KernelParams

from .rbf import rbf
from .matern52 import matern52
from .white import white

from .utils import scaled_sqdist, add_jitter

# --------------------------------------------------
# Registry
# --------------------------------------------------
register("rbf", rbf)
register("matern52", matern52)
register("white", white)

__all__ = [
    "get",
    "KernelParams",
    "rbf",
    "matern52",
    "white",
    "scaled_sqdist",
    "add_jitter",
]
