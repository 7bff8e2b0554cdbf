import logging

import jax
import jax.numpy as jnp
import numpy as np
import pytest

from multigp_jax import ErrorKind, Failure, Success
from multigp_jax.energy import MultiGPEnergy, init_params
from multigp_jax.inference import HMC, HMCCFG, TypeII, TypeIICFG


class HalfNormalEnergy:
    """U(x) = x^2 / 2 on x >= 0; negative x is outside the support."""

    def outcome(self, q):
        x = q["x"]
        if float(jax.lax.stop_gradient(x)) < 0.0:
            return Failure(value=jnp.zeros(()), kind=ErrorKind.NOT_POSITIVE, message="x < 0")
        return Success(0.5 * x ** 2)

    def __call__(self, q):
        return self.outcome(q).unwrap()


class PinnedEnergy:
    """Valid only at x == 0, so every move is rejected."""

    def outcome(self, q):
        x = q["x"]
        if float(jax.lax.stop_gradient(x)) != 0.0:
            return Failure(value=jnp.zeros(()), kind=ErrorKind.NOT_POSITIVE, message="x != 0")
        return Success(0.5 * x ** 2)


def _data(d=2, N=8):
    X = jnp.linspace(0.0, 2.0, N)[:, None]
    Y = jnp.stack([jnp.sin(2.0 * X[:, 0]), 0.5 * jnp.cos(2.0 * X[:, 0])])[:d]
    return X, Y


def test_hmc_plain_callable_energy():
    cfg = HMCCFG(step_size=0.3, n_leapfrog=5, n_warmup=20, n_samples=50, refresh=0)
    run = HMC(cfg).run(lambda q: 0.5 * jnp.sum(q ** 2), jnp.zeros(2), key=jax.random.PRNGKey(0))
    assert run.samples.shape == (50, 2)
    assert run.energy_trace.shape == (50,)
    assert 0.0 <= run.accept_rate <= 1.0
    assert run.n_rejected_invalid == 0


def test_hmc_rejects_zero_probability_proposals():
    cfg = HMCCFG(step_size=0.5, n_leapfrog=5, n_warmup=0, n_samples=200, refresh=0, adapt_step_size=False)
    run = HMC(cfg).run(HalfNormalEnergy(), {"x": jnp.array(0.1)}, key=jax.random.PRNGKey(1))
    assert run.n_rejected_invalid > 0
    assert bool(jnp.all(run.samples["x"] >= 0.0))
    assert bool(jnp.all(jnp.isfinite(run.energy_trace)))


def test_hmc_thinning_and_progress_logging(caplog):
    caplog.set_level(logging.INFO, logger="multigp_jax")
    cfg = HMCCFG(step_size=0.3, n_leapfrog=3, n_warmup=10, n_samples=20, n_thin=4, refresh=10)
    run = HMC(cfg).run(HalfNormalEnergy(), {"x": jnp.array(0.5)}, key=jax.random.PRNGKey(2))
    assert run.samples["x"].shape == (5,)
    messages = [r.getMessage() for r in caplog.records]
    assert any("Iteration: 10 / 30" in m and "Warmup" in m for m in messages)
    assert any("Iteration: 30 / 30" in m and "Sampling" in m for m in messages)


def test_hmc_invalid_initial_state():
    with pytest.raises(ValueError, match="zero probability"):
        HMC(HMCCFG(refresh=0)).run(HalfNormalEnergy(), {"x": jnp.array(-1.0)}, key=jax.random.PRNGKey(0))


def test_hmc_warns_when_chain_never_moves():
    cfg = HMCCFG(step_size=0.1, n_leapfrog=2, n_warmup=0, n_samples=5, refresh=0)
    with pytest.warns(RuntimeWarning):
        run = HMC(cfg).run(PinnedEnergy(), {"x": jnp.array(0.0)}, key=jax.random.PRNGKey(3))
    assert run.n_rejected_invalid == 5
    np.testing.assert_array_equal(run.samples["x"], jnp.zeros(5))


def test_hmc_config_checks():
    with pytest.raises(ValueError):
        HMC(HMCCFG(n_thin=0))
    with pytest.raises(ValueError):
        HMC(HMCCFG(n_samples=0))


def test_hmc_on_multi_gp_energy():
    X, Y = _data()
    cfg = HMCCFG(step_size=0.05, n_leapfrog=5, n_warmup=10, n_samples=15, refresh=0)
    run = HMC(cfg).run(MultiGPEnergy(kernel="rbf"), init_params(Y.shape[0]), key=jax.random.PRNGKey(4), energy_args=(X, Y))
    assert run.samples["log_w"].shape == (15, 2)
    assert run.samples["log_lengthscale"].shape == (15,)
    assert bool(jnp.all(jnp.isfinite(run.energy_trace)))


def test_typeii_decreases_energy():
    X, Y = _data()
    energy = MultiGPEnergy(kernel="rbf", propto=True, include_log_jacobian=False)
    run = TypeII(TypeIICFG(steps=60, lr=5e-2)).run(energy, init_params(Y.shape[0]), energy_args=(X, Y))
    assert run.energy_trace.shape == (60,)
    assert float(run.energy_trace[-1]) < float(run.energy_trace[0])
    assert bool(jnp.all(jnp.isfinite(run.grad_norm_trace)))
    value, _ = jax.value_and_grad(energy)(run.params, X, Y)
    np.testing.assert_allclose(value, run.energy_trace[-1], rtol=1e-10)


def test_typeii_recovers_from_invalid_steps():
    run = TypeII(TypeIICFG(steps=30, lr=2.0, optimizer="sgd")).run(HalfNormalEnergy(), {"x": jnp.array(0.3)})
    assert bool(jnp.any(jnp.isinf(run.energy_trace)))
    assert float(run.params["x"]) >= 0.0


def test_typeii_invalid_step_moves_halfway_back():
    # 0.3 -> -0.3 is outside the support, so the next point is the midpoint 0.0
    run = TypeII(TypeIICFG(steps=3, lr=2.0, optimizer="sgd")).run(HalfNormalEnergy(), {"x": jnp.array(0.3)})
    np.testing.assert_allclose(run.energy_trace, [0.045, np.inf, 0.0], rtol=1e-12)
    assert bool(jnp.isnan(run.grad_norm_trace[1]))
    assert float(run.params["x"]) == 0.0


def test_typeii_invalid_step_rolls_back_optimizer_state():
    # adam from 0.3 with lr=2 overshoots to about -1.7; three halvings land back
    # near 0.05, where the optimizer state must be the one from before the
    # rejected update, i.e. the same as a fresh start from that point
    cfg = TypeIICFG(steps=5, lr=2.0, optimizer="adam")
    first = TypeII(cfg).run(HalfNormalEnergy(), {"x": jnp.array(0.3)})
    assert bool(jnp.all(jnp.isinf(first.energy_trace[1:4])))
    assert bool(jnp.isfinite(first.energy_trace[4]))

    longer = TypeII(TypeIICFG(steps=12, lr=2.0, optimizer="adam")).run(HalfNormalEnergy(), {"x": jnp.array(0.3)})
    fresh = TypeII(TypeIICFG(steps=8, lr=2.0, optimizer="adam")).run(HalfNormalEnergy(), first.params)
    np.testing.assert_allclose(longer.energy_trace[4:], fresh.energy_trace, rtol=1e-12)


def test_typeii_clipping_and_unknown_optimizer():
    X, Y = _data()
    energy = MultiGPEnergy(propto=True, include_log_jacobian=False)
    run = TypeII(TypeIICFG(steps=5, lr=1e-2, clip_grad_norm=1.0)).run(energy, init_params(2), energy_args=(X, Y))
    assert run.energy_trace.shape == (5,)
    with pytest.raises(ValueError, match="Unknown optimizer"):
        TypeII(TypeIICFG(optimizer="lbfgs")).run(energy, init_params(2), energy_args=(X, Y))


def test_typeii_grad_norm_without_deprecation_warnings(recwarn):
    X, Y = _data()
    energy = MultiGPEnergy(propto=True, include_log_jacobian=False)
    run = TypeII(TypeIICFG(steps=3, lr=1e-2)).run(energy, init_params(2), energy_args=(X, Y))
    assert bool(jnp.all(run.grad_norm_trace > 0.0))
    assert not any(issubclass(w.category, DeprecationWarning) and "optax" in str(w.message) for w in recwarn)
