from __future__ import annotations

from numbers import Real
from typing import Any

import numpy as np

from gradops.errors import ShapeMismatchError
from gradops.node import Node
from gradops.tensor import Tensor
from gradops.value import Value


class Op:
    """
    `gradops.ops.Op` is the operation tag carried by every `gradops.Node`.

    Subclasses implement the forward computation in `compute` and the local gradient rule in `get_grad`.
    Any operator parameter (such as an exponent) lives on the op instance, never as a node in the graph.

    Attributes
    ----------
    arity (int): The number of operands the operation takes.
    """

    arity = 0

    def compute(self, *data: Any) -> Any:
        raise NotImplementedError(f"{type(self).__name__} has no forward computation")

    def get_grad(self, node: Node) -> None:
        raise NotImplementedError(
            f"Gradient of {type(self).__name__} operator is not implemented!"
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class Leaf(Op):
    def get_grad(self, node: Node) -> None:
        pass


LEAF = Leaf()


class Add(Op):
    arity = 2

    def compute(self, a, b):
        return a + b

    def get_grad(self, node: Node) -> None:
        a, b = node.operands
        a.add_grad(node.grad)
        b.add_grad(node.grad)


class Mul(Op):
    arity = 2

    def compute(self, a, b):
        return a * b

    def get_grad(self, node: Node) -> None:
        a, b = node.operands
        a.add_grad(node.grad * b.data)
        b.add_grad(node.grad * a.data)


class Pow(Op):
    arity = 1

    def __init__(self, exponent: float) -> None:
        self.exponent = float(exponent)

    def compute(self, a):
        return np.power(a, self.exponent)

    def get_grad(self, node: Node) -> None:
        (a,) = node.operands
        a.add_grad(node.grad * self.exponent * np.power(a.data, self.exponent - 1.0))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(exponent={self.exponent})"


class Dot(Op):
    arity = 2

    def compute(self, a, b):
        return a @ b

    def get_grad(self, node: Node) -> None:
        a, b = node.operands
        a.add_grad(node.grad @ b.data.T)
        b.add_grad(a.data.T @ node.grad)


class ReLU(Op):
    arity = 1

    def compute(self, a):
        return np.maximum(a, 0.0)

    def get_grad(self, node: Node) -> None:
        (a,) = node.operands
        # subgradient is 0 at a == 0
        a.add_grad(node.grad * (a.data > 0))


class Tanh(Op):
    arity = 1

    def compute(self, a):
        # (e^2x - 1) / (e^2x + 1) evaluated on -|x| so e^2x never overflows
        e = np.exp(-2.0 * np.abs(a))
        return np.sign(a) * (1.0 - e) / (1.0 + e)

    def get_grad(self, node: Node) -> None:
        (a,) = node.operands
        a.add_grad(node.grad * (1.0 - node.data**2))


def _apply(op: Op, *operands: Node) -> Node:
    with np.errstate(all="ignore"):
        data = op.compute(*(operand.data for operand in operands))
    return type(operands[0])(data, operands, op)


def _as_node(x: Any, like: Node) -> Node:
    if isinstance(x, Node):
        return x
    if isinstance(x, Real):
        return like.constant(float(x))
    return type(like)(x)


def _binary_operands(a: Any, b: Any) -> tuple[Node, Node]:
    if not isinstance(a, Node) and not isinstance(b, Node):
        raise TypeError(
            f"At least one operand must be a gradops.Node, got {type(a).__name__} and {type(b).__name__}"
        )
    a = _as_node(a, b)
    b = _as_node(b, a)
    if not (isinstance(a, type(b)) or isinstance(b, type(a))):
        raise TypeError(
            f"Cannot combine {type(a).__name__} with {type(b).__name__} in one operation"
        )
    return a, b


def _unary_operand(a: Any) -> Node:
    if not isinstance(a, Node):
        raise TypeError(f"Operand must be a gradops.Node, got {type(a).__name__}")
    return a


def _check_same_shape(name: str, a: Node, b: Node) -> None:
    if a.shape != b.shape:
        raise ShapeMismatchError(
            f"{name}: operand shapes must match! Got {a.shape} and {b.shape}"
        )


def new_leaf(value: Any) -> Node:
    """
    Creates a leaf node from raw data: a `gradops.Value` for a real number, a `gradops.Tensor` for anything array-like.

    Args:
        value (Any): The data of the leaf.

    Returns:
        gradops.Node: The new leaf, with a zero gradient and no operands.
    """
    if isinstance(value, Real):
        return Value(value)
    return Tensor(value)


def add(a, b) -> Node:
    """
    Elementwise sum of two nodes.

    Args:
        a (gradops.Node): The first operand.
        b (gradops.Node): The second operand, same flavor and shape as `a`.

    Returns:
        gradops.Node: A node holding `a.data + b.data`.
    """
    a, b = _binary_operands(a, b)
    _check_same_shape("add", a, b)
    return _apply(Add(), a, b)


def mul(a, b) -> Node:
    """
    Elementwise product of two nodes.

    Args:
        a (gradops.Node): The first operand.
        b (gradops.Node): The second operand, same flavor and shape as `a`.

    Returns:
        gradops.Node: A node holding `a.data * b.data`.
    """
    a, b = _binary_operands(a, b)
    _check_same_shape("mul", a, b)
    return _apply(Mul(), a, b)


def diff(a, b) -> Node:
    """
    Elementwise difference `a - b`, built as `add(a, mul(b, -1))`.
    """
    a, b = _binary_operands(a, b)
    _check_same_shape("diff", a, b)
    return add(a, mul(b, b.constant(-1.0)))


sub = diff


def neg(a) -> Node:
    a = _unary_operand(a)
    return mul(a, a.constant(-1.0))


def pow(a, exponent: float) -> Node:
    """
    Raises a node to a constant power. The exponent is not differentiated.

    Args:
        a (gradops.Node): The base.
        exponent (float): The exponent, a plain number.

    Returns:
        gradops.Node: A node holding `a.data ** exponent`.
    """
    a = _unary_operand(a)
    if not isinstance(exponent, Real):
        raise TypeError(
            f"Exponent must be a plain number, got {type(exponent).__name__}"
        )
    return _apply(Pow(exponent), a)


def div(a, b) -> Node:
    """
    Elementwise quotient `a / b`, built as `mul(a, pow(b, -1))`. Division by zero follows IEEE-754 and yields `inf` or `nan`.
    """
    a, b = _binary_operands(a, b)
    _check_same_shape("div", a, b)
    return mul(a, pow(b, -1.0))


def dot(a, b) -> Node:
    """
    Matrix product of two 2-D tensors.

    Args:
        a (gradops.Tensor): Left operand of shape (m, k).
        b (gradops.Tensor): Right operand of shape (k, n).

    Returns:
        gradops.Tensor: A node of shape (m, n).
    """
    a, b = _binary_operands(a, b)
    if a.ndim != 2 or b.ndim != 2:
        raise ShapeMismatchError(
            f"dot: operands must be 2-D! Got shapes {a.shape} and {b.shape}"
        )
    if a.shape[1] != b.shape[0]:
        raise ShapeMismatchError(
            f"dot: inner dimensions must match! Got shapes {a.shape} and {b.shape}"
        )
    return _apply(Dot(), a, b)


def relu(a) -> Node:
    """
    Performs the ReLU activation function, `max(a, 0)` elementwise.
    """
    return _apply(ReLU(), _unary_operand(a))


def tanh(a) -> Node:
    """
    Performs the Tanh (hyperbolic tangent) activation function elementwise.
    """
    return _apply(Tanh(), _unary_operand(a))
