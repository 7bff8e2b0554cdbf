# multigp_jax/gp/__init__.py
from . import kernels

__all__ = ["kernels"]
