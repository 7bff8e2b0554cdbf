# multigp_jax/inference/sampling/__init__.py
"""
MCMC sampling drivers.

Drivers consume an energy, evaluate it with its gradient at every proposal,
and reject proposals in zero-probability regions.
"""
from .hmc import HMC, HMCCFG, HMCRun, make_potential

__all__ = ["HMC", "HMCCFG", "HMCRun", "make_potential"]
