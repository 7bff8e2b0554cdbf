# multigp_jax/inference/optimisation/__init__.py
"""
Type-II (maximum-likelihood) optimisation of energy parameters.
"""
from .typeii import TypeII, TypeIICFG, TypeIIRun

__all__ = ["TypeII", "TypeIICFG", "TypeIIRun"]
