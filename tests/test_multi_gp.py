import math

import jax
import jax.numpy as jnp
import numpy as np
import pytest

from multigp_jax import ACCUMULATE, ErrorKind, Success, ValidationCFG, multi_gp_log, multi_gp_lpdf
from multigp_jax.distributions import get as get_distribution


def _reference_terms(y, Sigma, w):
    y, Sigma, w = np.asarray(y), np.asarray(Sigma), np.asarray(w)
    d, N = y.shape
    _, logdet = np.linalg.slogdet(Sigma)
    quad = np.einsum("ij,ij->i", np.linalg.solve(Sigma, y.T).T, y)
    return {
        "constant": -0.5 * math.log(2.0 * math.pi) * d * N,
        "covariance": -0.5 * d * logdet,
        "weight": 0.5 * N * np.sum(np.log(w)),
        "cross": -0.5 * np.dot(quad, w),
    }


def _reference(y, Sigma, w):
    return sum(_reference_terms(y, Sigma, w).values())


def _reference_rowwise(y, Sigma, w):
    # y[i] ~ N(0, Sigma / w[i]) evaluated one row at a time
    total = 0.0
    for yi, wi in zip(np.asarray(y), np.asarray(w)):
        cov = np.asarray(Sigma) / wi
        _, logdet = np.linalg.slogdet(cov)
        total += -0.5 * (len(yi) * math.log(2.0 * math.pi) + logdet + yi @ np.linalg.solve(cov, yi))
    return total


def _problem(d=3, N=5, seed=0):
    rng = np.random.default_rng(seed)
    A = rng.normal(size=(N, N))
    Sigma = A @ A.T + N * np.eye(N)
    y = rng.normal(size=(d, N))
    w = rng.uniform(0.5, 2.0, size=d)
    return jnp.asarray(y), jnp.asarray(Sigma), jnp.asarray(w)


def test_matches_reference_implementation():
    for seed, (d, N) in enumerate([(1, 1), (2, 3), (3, 5), (4, 8)]):
        y, Sigma, w = _problem(d, N, seed)
        lp = multi_gp_log(y, Sigma, w)
        np.testing.assert_allclose(lp, _reference(y, Sigma, w), rtol=1e-10)
        np.testing.assert_allclose(lp, _reference_rowwise(y, Sigma, w), rtol=1e-10)


def test_identity_kernel_closed_form():
    y = jnp.array([[0.5, -1.0, 2.0], [0.0, 1.5, -0.25]])
    expected = -0.5 * math.log(2.0 * math.pi) * 6 - 0.5 * float(jnp.sum(y ** 2))
    lp = multi_gp_log(y, jnp.eye(3), jnp.array([1.0, 1.0]))
    np.testing.assert_allclose(lp, expected, rtol=1e-12)


def test_zero_rows_is_neutral():
    Sigma = jnp.array([[2.0, 0.3], [0.3, 1.0]])
    y = jnp.zeros((0, 2))
    w = jnp.zeros((0,))
    out = multi_gp_lpdf(y, Sigma, w)
    assert isinstance(out, Success)
    assert float(out.value) == 0.0
    assert float(multi_gp_log(y, Sigma, w, propto=True)) == 0.0


def test_zero_rows_still_validates_kernel_matrix():
    out = multi_gp_lpdf(jnp.zeros((0, 2)), jnp.array([[1.0, 2.0], [3.0, 1.0]]), jnp.zeros((0,)), policy=ACCUMULATE)
    assert not out.ok


def test_row_exchange_invariance():
    y, Sigma, w = _problem(4, 6, seed=3)
    perm = jnp.array([2, 0, 3, 1])
    np.testing.assert_allclose(
        multi_gp_log(y[perm], Sigma, w[perm]),
        multi_gp_log(y, Sigma, w),
        rtol=1e-12,
    )


def test_proportional_without_variables_drops_everything():
    y, Sigma, w = _problem()
    assert float(multi_gp_log(y, Sigma, w, propto=True)) == 0.0


@pytest.mark.parametrize(
    "argnums, kept",
    [
        (0, ("cross",)),
        (1, ("covariance", "cross")),
        (2, ("weight", "cross")),
        ((0, 1), ("covariance", "cross")),
        ((1, 2), ("covariance", "weight", "cross")),
    ],
)
def test_proportional_terms_for_variable_arguments(argnums, kept):
    y, Sigma, w = _problem(seed=5)
    terms = _reference_terms(y, Sigma, w)

    def f(y_, Sigma_, w_):
        return multi_gp_log(y_, Sigma_, w_, propto=True)

    value, _ = jax.value_and_grad(f, argnums=argnums)(y, Sigma, w)
    np.testing.assert_allclose(value, sum(terms[k] for k in kept), rtol=1e-10)

    full = multi_gp_log(y, Sigma, w)
    dropped = sum(terms[k] for k in terms if k not in kept)
    np.testing.assert_allclose(full - value, dropped, rtol=1e-10)


def test_result_dtype_is_promoted():
    y, Sigma, w = _problem()
    lp32 = multi_gp_log(y.astype(jnp.float32), Sigma.astype(jnp.float32), w.astype(jnp.float32))
    assert lp32.dtype == jnp.float32
    lp_mixed = multi_gp_log(y.astype(jnp.float32), Sigma, w.astype(jnp.float32))
    assert lp_mixed.dtype == jnp.float64
    np.testing.assert_allclose(lp_mixed, _reference(y.astype(jnp.float32), Sigma, w.astype(jnp.float32)), rtol=1e-6)


def test_integer_observations_promote_to_float():
    y = jnp.array([[1, 0, -1], [2, 1, 0]])
    lp = multi_gp_log(y, jnp.eye(3), jnp.array([1.0, 2.0]))
    assert jnp.issubdtype(lp.dtype, jnp.floating)
    np.testing.assert_allclose(lp, _reference(np.asarray(y, float), np.eye(3), [1.0, 2.0]), rtol=1e-12)


def test_accepts_numpy_inputs():
    y, Sigma, w = _problem()
    np.testing.assert_allclose(
        multi_gp_log(np.asarray(y), np.asarray(Sigma), np.asarray(w)),
        multi_gp_log(y, Sigma, w),
        rtol=1e-14,
    )


def test_repeated_evaluation_is_bitwise_identical():
    y, Sigma, w = _problem(seed=7)
    first = multi_gp_log(y, Sigma, w)
    for _ in range(3):
        assert multi_gp_log(y, Sigma, w) == first


def test_registered_distribution():
    y, Sigma, w = _problem()
    dist = get_distribution("multi_gp")
    np.testing.assert_allclose(dist.log_prob(y, Sigma, w), _reference(y, Sigma, w), rtol=1e-10)
    assert dist.lpdf(y, Sigma, w).ok
    with pytest.raises(KeyError):
        get_distribution("multi_normal")


def test_registered_distribution_passes_tolerances():
    dist = get_distribution("multi_gp")
    y = jnp.ones((1, 2))
    w = jnp.ones(1)
    Sigma = jnp.array([[1.0, 0.5], [0.5 + 1e-10, 1.0]])
    assert dist.lpdf(y, Sigma, w).ok
    out = dist.lpdf(y, Sigma, w, policy=ACCUMULATE, cfg=ValidationCFG(symmetry_tol=1e-12))
    assert out.kind is ErrorKind.NOT_SYMMETRIC
    assert float(dist.log_prob(y, Sigma, w, policy=ACCUMULATE, cfg=ValidationCFG(symmetry_tol=1e-12))) == 0.0
