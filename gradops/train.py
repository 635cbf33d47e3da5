from __future__ import annotations

import logging
from functools import reduce
from typing import Any, Sequence

import numpy as np
from tqdm import tqdm

from gradops.loss import squared_error
from gradops.model import Module
from gradops.node import Node
from gradops.ops import add
from gradops.optim import SGD, Optim
from gradops.tensorutils import PlotterUtil

logger = logging.getLogger(__name__)


def _lift_target(y: Any, like: Node) -> Node:
    if isinstance(y, Node):
        return y
    return type(like)(np.reshape(y, like.shape))


def _pair_outputs(output: Any, y: Any) -> list[tuple[Node, Node]]:
    if isinstance(output, Node):
        return [(output, _lift_target(y, output))]
    targets = y if isinstance(y, (list, tuple)) else [y]
    assert len(output) == len(targets), (
        f"Model produced {len(output)} outputs but target has {len(targets)}"
    )
    return [(out, _lift_target(t, out)) for out, t in zip(output, targets)]


def total_loss(model: Module, xs: Sequence[Any], ys: Sequence[Any]) -> Node:
    """
    Runs the model over a dataset and sums the squared errors of every output.

    Args:
        model (gradops.model.Module): The model to evaluate.
        xs (Sequence[Any]): The inputs, one per sample.
        ys (Sequence[Any]): The targets, one per sample.

    Returns:
        gradops.Node: The summed squared error, ready for `backward()`.
    """
    assert len(xs) == len(ys), "xs and ys must have the same number of samples."
    assert xs, "Cannot train on an empty dataset."
    errors = (
        squared_error(target, prediction)
        for x, y in zip(xs, ys)
        for prediction, target in _pair_outputs(model(x), y)
    )
    return reduce(add, errors)


def train(
    model: Module,
    xs: Sequence[Any],
    ys: Sequence[Any],
    epochs: int = 100,
    lr: float = 1e-3,
    optim: Optim | None = None,
    loss_plot: PlotterUtil | None = None,
    progress: bool = True,
) -> list[float]:
    """
    Full-batch training loop: every epoch sums the squared errors over the dataset, zeroes the gradients, runs the backward pass and steps the optimiser.

    Args:
        model (gradops.model.Module): The model to train.
        xs (Sequence[Any]): The inputs, one per sample.
        ys (Sequence[Any]): The targets, one per sample.
        epochs (int): Number of passes over the dataset.
        lr (float): Learning rate of the default `gradops.optim.SGD` optimiser, ignored when `optim` is given.
        optim (Optional[gradops.optim.Optim]): The optimiser to use.
        loss_plot (Optional[gradops.tensorutils.PlotterUtil]): Receives the loss of every epoch when given.
        progress (bool): Whether to display a `tqdm` progress bar.

    Returns:
        list[float]: The total loss of each epoch, measured before that epoch's update.
    """
    if optim is None:
        optim = SGD(model.parameters(), lr=lr)
    history = []
    for epoch in tqdm(
        range(epochs), desc=f"Training {type(model).__name__}", disable=not progress
    ):
        loss = total_loss(model, xs, ys)
        model.zero_grad()
        loss.backward()
        optim.step()

        loss_value = float(np.sum(loss.data))
        history.append(loss_value)
        logger.info("epoch %d loss %.6f", epoch, loss_value)
        if loss_plot is not None:
            loss_plot.register_datapoint(loss_value, f"{type(model).__name__}-GradOps")
    return history
