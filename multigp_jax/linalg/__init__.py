# multigp_jax/linalg/__init__.py
from .spd import (
    log_determinant_spd,
    mdivide_right_spd,
    rows_dot_product,
    dot_product,
    log,
    sum,
)

__all__ = [
    "log_determinant_spd",
    "mdivide_right_spd",
    "rows_dot_product",
    "dot_product",
    "log",
    "sum",
]
