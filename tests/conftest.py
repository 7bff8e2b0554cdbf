import jax

# Reference comparisons use relative tolerances near 1e-10.
jax.config.update("jax_enable_x64", True)
