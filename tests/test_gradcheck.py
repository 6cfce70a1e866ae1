"""Finite-difference checks of every backward rule."""

import numpy as np
import pytest

import adgraph as ag
from adgraph.autograd import check_gradients, numerical_gradient
from adgraph.autograd.grad_fn import GradFn
from adgraph.errors import ShapeMismatchError
from adgraph.ops.base import _make


class TestCheckGradients:
    """Tests for check_gradients."""

    def test_scalar_ops(self):
        a = ag.scalar(1.3)
        b = ag.scalar(0.7)
        assert check_gradients(lambda a, b: (a * b - a / b) ** 3 + -a, [a, b])

    def test_broadcast_ops(self, rng):
        s = ag.scalar(0.5)
        m = ag.matrix(rng.standard_normal((2, 3)))
        assert check_gradients(lambda s, m: ag.sum(s * m + m / (s + 2) - s), [s, m])

    def test_linear(self, rng):
        W = ag.matrix(rng.standard_normal((3, 4)))
        x = ag.vector(rng.standard_normal(4))
        b = ag.vector(rng.standard_normal(3))
        assert check_gradients(lambda W, x, b: ag.sum(ag.sigmoid(W * x + b)), [W, x, b])

    def test_elementwise(self, rng):
        v = ag.vector(rng.uniform(0.5, 2.0, size=5))
        assert check_gradients(
            lambda v: ag.sum(ag.sin(v) * ag.cos(v) + ag.relu(v - 1.0) * v),
            [v],
        )

    def test_hadamard_and_expand(self, rng):
        u = ag.vector(rng.standard_normal(2))
        w = ag.vector(rng.standard_normal(6))
        assert check_gradients(lambda u, w: ag.sum(ag.expand(u, 3) * w), [u, w])

    def test_power(self, rng):
        v = ag.vector(rng.uniform(0.5, 2.0, size=4))
        assert check_gradients(lambda v: ag.sum(ag.pow(v, 2.5)), [v])

    def test_positional_encoding(self, rng):
        x = ag.vector(rng.uniform(0.0, 1.0, size=2))
        assert check_gradients(lambda x: ag.sum(ag.nn.positional_encoding(x, 3)), [x])

    def test_non_scalar_output_rejected(self):
        v = ag.vector([1.0, 2.0])
        with pytest.raises(ShapeMismatchError):
            check_gradients(lambda v: v * 2, [v])

    def test_detects_wrong_rule(self):
        class WrongDouble(GradFn):
            symbol = "double"

            def apply(self, grad_output):
                return (grad_output,)

        def double(x):
            return _make(x._value * 2, WrongDouble(x), x)

        v = ag.vector([1.0, 2.0])
        with pytest.raises(AssertionError):
            check_gradients(lambda v: ag.sum(double(v)), [v])


class TestNumericalGradient:
    """Tests for the finite-difference estimate itself."""

    def test_quadratic(self):
        v = ag.vector([1.0, -2.0, 0.5])
        est = numerical_gradient(lambda v: ag.sum(v * v), [v], 0)
        np.testing.assert_allclose(est, [2.0, -4.0, 1.0], atol=1e-6)

    def test_restores_values(self):
        m = ag.matrix([[1.0, 2.0], [3.0, 4.0]])
        numerical_gradient(lambda m: ag.sum(m), [m], 0)
        np.testing.assert_array_equal(m.value, [[1.0, 2.0], [3.0, 4.0]])
