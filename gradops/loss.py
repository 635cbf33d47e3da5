from __future__ import annotations

from abc import ABC, abstractmethod
from functools import reduce

from gradops.node import Node
from gradops.ops import add, diff, pow


def squared_error(y_true: Node, y_pred: Node) -> Node:
    """
    Elementwise squared error `(y_true - y_pred) ** 2`, built from `diff` and `pow`.

    Args:
        y_true (gradops.Node): The target.
        y_pred (gradops.Node): The prediction, same flavor and shape as `y_true`.

    Returns:
        gradops.Node: The squared error.
    """
    return pow(diff(y_true, y_pred), 2.0)


class Loss(ABC):
    """
    `gradops.loss.Loss` is the abstract base class that handles cost function computation.
    """

    def __init__(self) -> None:
        self.loss_value = None

    @abstractmethod
    def loss(self, actual, target) -> Node: ...

    def __call__(self, actual, target) -> Node:
        return self.loss(actual, target)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(value={self.loss_value.data if self.loss_value is not None else None})"


class SquaredErrorLoss(Loss):
    def loss(self, actual, target) -> Node:
        """
        Calculates the squared error between the actual and target values. Works with single nodes and with lists of nodes, in which case the errors are summed.

        Args:
            actual (Union[gradops.Node, list[gradops.Node]]): The predicted value(s).
            target (Union[gradops.Node, list[gradops.Node]]): The target value(s).

        Returns:
            gradops.Node: The total squared error.
        """
        if isinstance(actual, list) and isinstance(target, list):
            assert len(actual) == len(target), (
                "Actual and target lists must have the same length."
            )
            assert actual, "Cannot compute a loss over an empty batch."
            self.loss_value = reduce(
                add, (squared_error(y, y_hat) for y_hat, y in zip(actual, target))
            )
        else:
            assert isinstance(actual, Node) and isinstance(target, Node), (
                f"Values passed into {type(self).__name__}.loss() must be instances of gradops.Node"
            )
            self.loss_value = squared_error(target, actual)
        return self.loss_value
