# multigp_jax/constants.py
import math

LOG_TWO_PI = math.log(2.0 * math.pi)
NEG_LOG_SQRT_TWO_PI = -0.5 * LOG_TWO_PI

# Absolute tolerance used by the symmetry and 1x1 positive-definite checks.
CONSTRAINT_TOLERANCE = 1e-8
