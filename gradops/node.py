from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Iterable

import numpy as np

from gradops.errors import GraphCorruptedError, ShapeMismatchError

logger = logging.getLogger(__name__)


class Node(ABC):
    """
    `gradops.Node` is a node in a computational graph, containing its data, its accumulated gradient and the operation that produced it.

    `gradops.Node` is not instantiated directly, use one of its flavors: `gradops.Value` for scalars or `gradops.Tensor` for N-dimensional arrays.

    Attributes
    ----------
    data (Any): The payload of the node.
    grad (Any): Gradient accumulator with the same shape as `data`. Starts at zero.
    operands (tuple[gradops.Node, ...]): The nodes this node was computed from, in argument order. Empty for leaves.
    op (gradops.ops.Op): The operation that produced the node. Knows how to push this node's gradient into `operands`.
    """

    # numpy defers to the reflected operators, so `ndarray * node` builds a node
    __array_ufunc__ = None

    def __init__(self, data: Any, operands: Iterable[Node] = (), op=None) -> None:
        if isinstance(data, Node):
            raise TypeError(
                f"{type(self).__name__} cannot wrap another node, got {data!r}"
            )
        if op is None:
            from gradops.ops import LEAF

            op = LEAF
        self.data = self._coerce(data)
        self.grad = self._zeros_like(self.data)
        self.operands = tuple(operands)
        self.op = op

    @abstractmethod
    def _coerce(self, data: Any) -> Any:
        """
        Converts raw data into the payload type of the flavor.
        """

    @abstractmethod
    def _zeros_like(self, data: Any) -> Any: ...

    @abstractmethod
    def _ones_like(self, data: Any) -> Any: ...

    @abstractmethod
    def constant(self, value: float) -> Node:
        """
        Creates a leaf of the same flavor and shape as this node, filled with `value`.

        Args:
            value (float): The fill value.

        Returns:
            gradops.Node: A new leaf.
        """

    @property
    def shape(self) -> tuple[int, ...]:
        return np.shape(self.data)

    @property
    def ndim(self) -> int:
        return len(self.shape)

    @property
    def is_leaf(self) -> bool:
        return not self.operands

    def item(self) -> float:
        return float(np.asarray(self.data).item())

    def set_data(self, new_data: Any) -> None:
        """
        Overwrites the payload of the node, used by optimisers to update parameters.

        Args:
            new_data (Any): The new payload. Must have the same shape as the current one.
        """
        new_data = self._coerce(new_data)
        if np.shape(new_data) != self.shape:
            raise ShapeMismatchError(
                f"Cannot set data of shape {np.shape(new_data)} on {type(self).__name__} of shape {self.shape}"
            )
        self.data = new_data

    def add_grad(self, grad: Any) -> None:
        """
        Accumulates a gradient contribution into `self.grad`.

        Args:
            grad (Any): The contribution. Must have the same shape as `self.grad`.
        """
        if np.shape(grad) != self.shape:
            raise ShapeMismatchError(
                f"Gradient of shape {np.shape(grad)} cannot be accumulated into {type(self).__name__} of shape {self.shape}"
            )
        self.grad = self._coerce(self.grad + grad)

    def zero_grad(self) -> None:
        self.grad = self._zeros_like(self.data)

    def seed_grad(self) -> None:
        self.grad = self._ones_like(self.data)

    def propagate(self) -> None:
        """
        Pushes the gradient of this node into its operands using the local gradient rule of `self.op`.

        Raises:
            gradops.errors.GraphCorruptedError: if the node does not hold exactly as many operands as its operation takes.
        """
        if len(self.operands) != self.op.arity:
            raise GraphCorruptedError(
                f"The number of operands in {type(self.op).__name__} op must be {self.op.arity}, but is {len(self.operands)}!"
            )
        self.op.get_grad(self)

    def backward(self) -> None:
        """
        Performs reverse-mode differentiation from this node.

        After the call every ancestor holds the derivative of this node with respect to its data, summed over all paths.
        Gradients are accumulated, not overwritten: call `zero_grad` on the leaves between passes.
        """
        topo = topological_sort(self)
        logger.debug(
            "backward from %s through %d ancestors", type(self.op).__name__, len(topo)
        )
        self.seed_grad()
        # inf and nan propagate like any other float
        with np.errstate(all="ignore"):
            self.propagate()
            for node in reversed(topo):
                node.propagate()

    def relu(self) -> Node:
        from gradops.ops import relu

        return relu(self)

    def tanh(self) -> Node:
        from gradops.ops import tanh

        return tanh(self)

    def dot(self, other: Node) -> Node:
        from gradops.ops import dot

        return dot(self, other)

    def __add__(self, other) -> Node:
        from gradops.ops import add

        return add(self, other)

    def __radd__(self, other) -> Node:
        from gradops.ops import add

        return add(other, self)

    def __sub__(self, other) -> Node:
        from gradops.ops import diff

        return diff(self, other)

    def __rsub__(self, other) -> Node:
        from gradops.ops import diff

        return diff(other, self)

    def __mul__(self, other) -> Node:
        from gradops.ops import mul

        return mul(self, other)

    def __rmul__(self, other) -> Node:
        from gradops.ops import mul

        return mul(other, self)

    def __truediv__(self, other) -> Node:
        from gradops.ops import div

        return div(self, other)

    def __rtruediv__(self, other) -> Node:
        from gradops.ops import div

        return div(other, self)

    def __pow__(self, exponent: float) -> Node:
        from gradops.ops import pow

        return pow(self, exponent)

    def __matmul__(self, other) -> Node:
        from gradops.ops import dot

        return dot(self, other)

    def __neg__(self) -> Node:
        from gradops.ops import neg

        return neg(self)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(data={self.data}, grad={self.grad})"


def topological_sort(root: Node) -> list[Node]:
    """
    Orders every node reachable from the operands of `root` so that each node comes after all of its operands.

    Nodes reached through several paths are emitted once, at their first completion. `root` itself is not included.

    Args:
        root (gradops.Node): The node to start from.

    Returns:
        list[gradops.Node]: The ancestors of `root` in post-order.
    """
    topo = []
    visited = set()
    for child in root.operands:
        if id(child) in visited:
            continue
        visited.add(id(child))
        # explicit stack of (node, remaining operands) so deep graphs do not hit the recursion limit
        stack = [(child, iter(child.operands))]
        while stack:
            node, pending = stack[-1]
            for operand in pending:
                if id(operand) not in visited:
                    visited.add(id(operand))
                    stack.append((operand, iter(operand.operands)))
                    break
            else:
                stack.pop()
                topo.append(node)
    return topo


def backward(root: Node) -> None:
    """
    Performs the backward pass from `root`. Wrapper function for `gradops.Node.backward()`.

    Args:
        root (gradops.Node): The output node to differentiate, usually a loss.
    """
    root.backward()


def zero_grad(nodes: Iterable[Node]) -> None:
    """
    Resets the gradients of all given nodes to zero.

    Args:
        nodes (Iterable[gradops.Node]): The nodes to zero gradients.
    """
    for node in nodes:
        node.zero_grad()
