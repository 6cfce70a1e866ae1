"""
adgraph Autograd - Engine
=========================

Reverse-mode backward pass over the graph hanging off a root node.
"""

from __future__ import annotations
from typing import Any, List, Optional, Sequence

import numpy as np

from ..core import linalg
from ..core.shapes import as_array, check_shape
from ..logger import get_logger
from ..node import Node

logger = get_logger(__name__)


def backward(
    root: Node,
    sources: Optional[Sequence[Node]] = None,
    grad_output: Optional[Any] = None,
) -> Optional[List[Optional[np.ndarray]]]:
    """
    Compute gradients of ``root`` w.r.t. every ancestor that requires grad.

    Every node reachable from the root is reset first, then contributions
    are accumulated, so a node used as an operand in several places gets
    the sum over all its uses. Each node's rule runs once, after all of
    its parents have run.

    Parameters
    ----------
    root : Node
        The output to differentiate
    sources : Optional[Sequence[Node]]
        Nodes whose gradients should be returned.
    grad_output : Optional[array-like]
        Seed gradient for the root. Defaults to ones of the root's shape.

    Returns
    -------
    If sources provided: list of gradients (None for unreached sources)
    If sources is None: None (gradients stored on the nodes)
    """
    if not root.requires_grad:
        logger.debug("backward() on a node without gradient; nothing to do")
        return None if sources is None else [None] * len(sources)

    if grad_output is None:
        seed = linalg.ones_like(root._value)
    else:
        seed = as_array(grad_output, dtype=root._value.dtype)
        check_shape(seed, root.shape, "grad_output")

    order = _topological_order(root)
    logger.debug("backward pass over %d nodes from %s", len(order), root.op_name)

    for node in order:
        node._reset_grad()
    root._accumulate(seed)

    try:
        for node in order:
            node._resolve()
            if node.grad_fn is None:
                continue
            input_grads = node.grad_fn.apply(node._grad)
            for child, child_grad in zip(node.children, input_grads):
                if child_grad is None or not child.requires_grad:
                    continue
                child._accumulate(child_grad)
    except Exception:
        logger.warning("backward pass aborted; gradients of this graph are invalid")
        for node in order:
            node._reset_grad()
        raise

    if sources is not None:
        return [s._grad.copy() if s.has_grad else None for s in sources]
    return None


def grad(target: Node, sources: Sequence[Node]) -> List[Optional[np.ndarray]]:
    """Gradients of ``target`` w.r.t. ``sources``."""
    return backward(target, sources=sources)


def _topological_order(root: Node) -> List[Node]:
    """
    Differentiable nodes reachable from root, parents before children.

    Iterative post-order DFS so long operator chains do not hit the
    interpreter recursion limit.
    """
    visited = set()
    post_order: List[Node] = []
    stack = [(root, False)]

    while stack:
        node, expanded = stack.pop()
        if expanded:
            post_order.append(node)
            continue
        if id(node) in visited:
            continue
        visited.add(id(node))
        stack.append((node, True))
        for child in node.children:
            if child.requires_grad and id(child) not in visited:
                stack.append((child, False))

    post_order.reverse()
    return post_order
