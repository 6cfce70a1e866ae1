"""Tests for the backward engine."""

import logging

import numpy as np
import pytest

import adgraph as ag
from adgraph import NodeState
from adgraph.autograd import backward, grad
from adgraph.errors import ShapeMismatchError, UnsupportedGradientError


class TestBackward:
    """Tests for seeding and propagation."""

    def test_default_seed_is_ones(self):
        v = ag.vector([1.0, 2.0, 3.0])
        y = v * 2
        y.backward()
        np.testing.assert_array_equal(y.grad, [1.0, 1.0, 1.0])
        np.testing.assert_array_equal(v.grad, [2.0, 2.0, 2.0])

    def test_seed_shape_checked(self):
        v = ag.vector([1.0, 2.0])
        with pytest.raises(ShapeMismatchError):
            (v * 2).backward(grad_output=[1.0, 2.0, 3.0])

    def test_all_nodes_resolved(self):
        x = ag.scalar(2.0)
        a = x * 3
        b = ag.sin(a)
        b.backward()
        for node in (x, a, b):
            assert node.state is NodeState.RESOLVED

    def test_constants_untouched(self):
        c = ag.constant([1.0, 2.0])
        v = ag.vector([3.0, 4.0])
        y = ag.sum(v * c)
        y.backward()
        assert c.state is NodeState.UNVISITED
        np.testing.assert_array_equal(v.grad, [1.0, 2.0])

    def test_long_chain(self):
        x = ag.scalar(0.0)
        y = x
        for _ in range(5000):
            y = y + 1
        y.backward()
        assert y.value == 5000.0
        assert x.grad == 1.0


class TestDiamond:
    """Nodes used more than once receive the sum of all contributions."""

    def test_square_by_self_product(self):
        x = ag.scalar(3.0)
        y = x * x
        y.backward()
        assert x.grad == 6.0

    def test_self_sum(self):
        v = ag.vector([1.0, 2.0])
        y = ag.sum(v + v)
        y.backward()
        np.testing.assert_array_equal(v.grad, [2.0, 2.0])

    def test_shared_subexpression(self):
        x = ag.scalar(2.0)
        a = x * 3
        y = a * a + a
        y.backward()
        # y = 9x^2 + 3x
        assert a.grad == pytest.approx(2 * 6.0 + 1)
        assert x.grad == pytest.approx(18 * 2.0 + 3)

    def test_repeated_backward_does_not_accumulate(self):
        x = ag.scalar(3.0)
        y = x * x
        y.backward()
        y.backward()
        assert x.grad == 6.0

    def test_grads_reset_between_graphs(self):
        w = ag.vector([1.0, 1.0])
        ag.sum(w * 2).backward()
        np.testing.assert_array_equal(w.grad, [2.0, 2.0])
        ag.sum(w * 5).backward()
        np.testing.assert_array_equal(w.grad, [5.0, 5.0])


class TestFailure:
    """A failed pass leaves no usable gradient in the traversed graph."""

    def test_failed_pass_invalidates(self):
        x = ag.scalar(2.0)
        n = ag.scalar(2.0)
        y = ag.pow(x, n) + x * 3
        with pytest.raises(UnsupportedGradientError):
            y.backward()
        for node in (x, n, y):
            assert not node.has_grad
            assert node.state is NodeState.UNVISITED

    def test_failed_pass_after_success(self):
        x = ag.scalar(2.0)
        ag.sum(x * 4).backward()
        assert x.grad == 4.0

        n = ag.scalar(2.0)
        with pytest.raises(UnsupportedGradientError):
            ag.pow(x, n).backward()
        assert not x.has_grad

    def test_failure_logged(self, caplog):
        x = ag.scalar(2.0)
        y = ag.pow(x, ag.scalar(2.0))
        with caplog.at_level(logging.WARNING, logger="adgraph"):
            with pytest.raises(UnsupportedGradientError):
                y.backward()
        assert any("aborted" in r.message for r in caplog.records)

    def test_recovers_after_fix(self):
        x = ag.scalar(2.0)
        n = ag.scalar(3.0)
        with pytest.raises(UnsupportedGradientError):
            ag.pow(x, n).backward()
        n.requires_grad = False
        y = ag.pow(x, n)
        y.backward()
        assert x.grad == pytest.approx(12.0)


class TestConstantRoot:
    """Backward on a node that does not require gradient is a no-op."""

    def test_noop(self):
        c = ag.constant([1.0, 2.0])
        c.backward()
        assert not c.has_grad

    def test_noop_with_sources(self):
        c = ag.constant(1.0)
        assert backward(c, sources=[c]) == [None]


class TestSources:
    """Tests for returning gradients of chosen sources."""

    def test_grad_function(self):
        a = ag.scalar(2.0)
        b = ag.vector([1.0, 2.0])
        y = ag.sum(a * b)
        grads = grad(y, [a, b])
        assert grads[0] == pytest.approx(3.0)
        np.testing.assert_array_equal(grads[1], [2.0, 2.0])

    def test_unreached_source(self):
        a = ag.scalar(2.0)
        other = ag.scalar(5.0)
        grads = backward(a * 2, sources=[a, other])
        assert grads[0] == pytest.approx(2.0)
        assert grads[1] is None

    def test_returned_grads_are_copies(self):
        v = ag.vector([1.0, 2.0])
        (g,) = grad(ag.sum(v), [v])
        g[0] = 100.0
        np.testing.assert_array_equal(v.grad, [1.0, 1.0])
