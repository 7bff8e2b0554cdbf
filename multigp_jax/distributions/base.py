# multigp_jax/distributions/base.py

_DISTRIBUTION_REGISTRY = {}


def register(name, distribution):
    """
    Register a distribution object under a string key.
    """
    if name in _DISTRIBUTION_REGISTRY:
        raise KeyError(f"Distribution '{name}' already registered.")
    _DISTRIBUTION_REGISTRY[name] = distribution


def get(name):
    """
    Retrieve a distribution by name.
    """
    try:
        return _DISTRIBUTION_REGISTRY[name]
    except KeyError:
        raise KeyError(
            f"Unknown distribution '{name}'. "
            f"Available: {list(_DISTRIBUTION_REGISTRY.keys())}"
        )
