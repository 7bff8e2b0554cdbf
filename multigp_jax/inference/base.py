# multigp_jax/inference/base.py
from __future__ import annotations

from typing import Protocol, runtime_checkable, Any

from ..energy.base import EnergyTerm


@runtime_checkable
class InferenceMethod(Protocol):
    """
    Protocol for inference methods.

    Design principles
    -----------------
    - An InferenceMethod consumes an EnergyTerm and performs inference.
    - It MUST treat EnergyTerm as a black box (no inspection of internal structure).
    - It MUST treat an invalid energy (a `Failure` outcome, or a non-finite
      value) as a zero-probability state, never as a fatal error, once the
      run has started from a valid state.
    """

    def run(self, energy: EnergyTerm, *args, **kwargs) -> Any:
        """
        Run inference on the given energy.

        Returns
        -------
        Any
            Inference results (method-specific: samples, diagnostics, fitted parameters).
        """
        ...
