"""Tests for Node: construction, state, update and graph ownership."""

import gc

import numpy as np
import pytest

import adgraph as ag
from adgraph import Node, NodeState
from adgraph.errors import GradientNotComputedError, ShapeMismatchError


class TestConstruction:
    """Tests for node creation and factories."""

    def test_scalar(self):
        x = ag.scalar(2.5)
        assert x.shape.is_scalar
        assert x.value == 2.5
        assert x.requires_grad
        assert x.is_leaf
        assert x.op_name == "Value"

    def test_vector_fill(self):
        v = ag.vector(0.5, size=4)
        np.testing.assert_array_equal(v.value, [0.5, 0.5, 0.5, 0.5])

    def test_vector_size_mismatch(self):
        with pytest.raises(ShapeMismatchError):
            ag.vector([1.0, 2.0], size=3)
        with pytest.raises(ShapeMismatchError):
            ag.vector(1.0)
        with pytest.raises(ShapeMismatchError):
            ag.vector([[1.0, 2.0]])

    def test_matrix_fill(self):
        m = ag.matrix(1.0, rows=2, cols=3)
        assert m.shape.rows == 2
        assert m.shape.cols == 3
        np.testing.assert_array_equal(m.value, np.ones((2, 3)))

    def test_matrix_mismatch(self):
        with pytest.raises(ShapeMismatchError):
            ag.matrix([[1.0, 2.0]], rows=2)
        with pytest.raises(ShapeMismatchError):
            ag.matrix([1.0, 2.0])

    def test_scalar_rejects_vector(self):
        with pytest.raises(ShapeMismatchError):
            ag.scalar([1.0, 2.0])

    def test_constant(self):
        c = ag.constant([1.0, 2.0])
        assert not c.requires_grad
        assert c.op_name == "Const"


class TestValue:
    """Tests for reading and writing values."""

    def test_live_vector_value(self):
        v = ag.vector([1.0, 2.0, 3.0])
        v.value[1] = 7.0
        np.testing.assert_array_equal(v.numpy(), [1.0, 7.0, 3.0])

    def test_set_value(self):
        m = ag.matrix(np.eye(2))
        m.value = [[1.0, 2.0], [3.0, 4.0]]
        np.testing.assert_array_equal(m.value, [[1, 2], [3, 4]])

    def test_set_value_wrong_shape(self):
        v = ag.vector([1.0, 2.0])
        with pytest.raises(ShapeMismatchError):
            v.value = [1.0, 2.0, 3.0]
        np.testing.assert_array_equal(v.value, [1.0, 2.0])

    def test_numpy_is_copy(self):
        v = ag.vector([1.0, 2.0])
        arr = v.numpy()
        arr[0] = 9.0
        assert v.value[0] == 1.0


class TestGradState:
    """Tests for gradient state and usage errors."""

    def test_grad_before_backward(self):
        x = ag.vector([1.0, 2.0])
        assert x.state is NodeState.UNVISITED
        assert not x.has_grad
        with pytest.raises(GradientNotComputedError):
            x.grad

    def test_grad_before_backward_reaches_node(self):
        x = ag.scalar(1.0)
        y = x * 2
        z = ag.scalar(4.0)
        y.backward()
        assert x.has_grad
        with pytest.raises(GradientNotComputedError):
            z.grad

    def test_add_constant_grad_is_one(self):
        for value in (3.0, [1.0, 2.0, 3.0], [[1.0, 2.0], [3.0, 4.0]]):
            x = Node(value)
            y = x + 5
            y.backward()
            np.testing.assert_array_equal(x.grad, np.ones_like(np.asarray(value)))

    def test_update(self):
        a = ag.scalar(3.0)
        b = a + 3
        b.backward()
        a.update(1)
        assert a.value == 2.0

    def test_update_twice_raises(self):
        a = ag.vector([1.0, 2.0])
        y = ag.sum(a * 2)
        y.backward()
        a.update(0.5)
        np.testing.assert_array_equal(a.value, [0.0, 1.0])

        with pytest.raises(GradientNotComputedError):
            a.update(0.5)
        np.testing.assert_array_equal(a.value, [0.0, 1.0])

    def test_update_without_grad_leaves_value(self):
        c = ag.matrix([[1.0, 2.0]])
        with pytest.raises(GradientNotComputedError):
            c.update(1.0)
        np.testing.assert_array_equal(c.value, [[1.0, 2.0]])

    def test_update_keeps_live_reference(self):
        v = ag.vector([1.0, 1.0])
        live = v.value
        ag.sum(v).backward()
        v.update(1.0)
        np.testing.assert_array_equal(live, [0.0, 0.0])


class TestGraphOwnership:
    """Tests for parent/child references."""

    def test_children_order(self):
        x = ag.scalar(1.0)
        y = ag.scalar(2.0)
        z = x - y
        assert z.children == (x, y)
        assert not z.is_leaf

    def test_literal_wrapped_as_constant(self):
        x = ag.vector([1.0, 2.0])
        y = 3 * x
        lhs, rhs = y.children
        assert not lhs.requires_grad
        assert rhs is x

    def test_parent_is_most_recent(self):
        x = ag.scalar(1.0)
        y = x + 1
        assert x.parent is y
        z = x * 2
        assert x.parent is z

    def test_parent_does_not_keep_alive(self):
        x = ag.scalar(1.0)
        y = x * 2
        assert x.parent is y
        del y
        gc.collect()
        assert x.parent is None

    def test_dropping_root_frees_graph(self):
        import weakref
        x = ag.vector([1.0, 2.0])
        y = x * 2
        z = ag.sum(y)
        y_ref = weakref.ref(y)
        del y
        assert y_ref() is not None
        del z
        gc.collect()
        assert y_ref() is None


class TestRendering:
    """Tests for str/repr."""

    def test_str_expression(self):
        x = ag.scalar(2.0, name="x")
        y = ag.relu(-x * 3 + 2)
        assert str(y) == "relu(((-x * 3) + 2))"

    def test_str_expand(self):
        x = ag.vector([1.0, 2.0], name="v")
        assert str(ag.expand(x, 2)) == "expand<2>(v)"

    def test_repr(self):
        x = ag.scalar(1.5, name="x")
        assert repr(x) == "Node(1.5, name='x')"
        c = ag.constant(2.0)
        assert "requires_grad=False" in repr(c)
