# multigp_jax/energy/__init__.py
from __future__ import annotations

from .base import EnergyTerm, EnergyWithOutcome
from .multi_gp import MultiGPEnergy, init_params, constrain

__all__ = [
    "EnergyTerm",
    "EnergyWithOutcome",
    "MultiGPEnergy",
    "init_params",
    "constrain",
]
