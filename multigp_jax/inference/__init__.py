# multigp_jax/inference/__init__.py
"""
Inference layer.

Samplers and optimisers that consume an energy, e.g. `MultiGPEnergy`, as a
black box: they only call it (or its `outcome`) and its gradient.
"""
from .base import InferenceMethod
from .sampling import HMC, HMCCFG, HMCRun
from .optimisation import TypeII, TypeIICFG, TypeIIRun

__all__ = [
    "InferenceMethod",
    "HMC", "HMCCFG", "HMCRun",
    "TypeII", "TypeIICFG", "TypeIIRun",
]
