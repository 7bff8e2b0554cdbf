# multigp_jax/core/typing.py
from __future__ import annotations
from typing import Union

import numpy as np
from jax import Array

# Anything the density kernels accept as a matrix/vector argument.
ArrayLike = Union[Array, np.ndarray]

__all__ = ["Array", "ArrayLike"]
