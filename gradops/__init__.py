from gradops import config
from gradops.errors import GradOpsError, GraphCorruptedError, ShapeMismatchError
from gradops.node import Node, backward, topological_sort, zero_grad
from gradops.value import Value
from gradops.tensor import Tensor, ones, tensor, zeros
from gradops.ops import (
    add,
    diff,
    div,
    dot,
    mul,
    neg,
    new_leaf,
    pow,
    relu,
    sub,
    tanh,
)
from gradops.loss import Loss, SquaredErrorLoss, squared_error
from gradops.model import MLP, Dense, Layer, Module, Neuron, TensorMLP
from gradops.optim import SGD, Optim
from gradops.tensorutils import PlotterUtil, build_graph, visualise_graph
from gradops.train import total_loss, train

__all__ = [
    "config",
    "GradOpsError",
    "GraphCorruptedError",
    "ShapeMismatchError",
    "Node",
    "Value",
    "Tensor",
    "tensor",
    "zeros",
    "ones",
    "new_leaf",
    "add",
    "diff",
    "sub",
    "mul",
    "div",
    "pow",
    "neg",
    "dot",
    "relu",
    "tanh",
    "topological_sort",
    "backward",
    "zero_grad",
    "squared_error",
    "Loss",
    "SquaredErrorLoss",
    "Module",
    "Neuron",
    "Layer",
    "MLP",
    "Dense",
    "TensorMLP",
    "Optim",
    "SGD",
    "PlotterUtil",
    "build_graph",
    "visualise_graph",
    "total_loss",
    "train",
]
