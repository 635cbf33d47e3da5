from __future__ import annotations

import pickle
from abc import ABC, abstractmethod
from functools import reduce
from typing import Any, Callable, Sequence

import numpy as np

from gradops.node import Node
from gradops.ops import add, dot, mul, relu
from gradops.tensor import Tensor
from gradops.value import Value


class Module(ABC):
    """
    `gradops.model.Module` is the abstract base class for anything holding trainable parameters.

    The engine does not know which nodes are parameters, a `Module` does: `parameters()` lists the leaves an optimiser should update.
    """

    @abstractmethod
    def parameters(self) -> list[Node]:
        """
        Returns:
            list[gradops.Node]: A flat list of the leaf nodes to optimise.
        """

    @abstractmethod
    def forward(self, x: Any) -> Any:
        """
        Executes a forward pass given an input.

        Args:
            x (Any): The input of the module.

        Returns:
            Any: The output nodes of the module.
        """

    def zero_grad(self) -> None:
        """
        Sets gradients of all parameters to zero.
        """
        for param in self.parameters():
            param.zero_grad()

    def save(self, path: str) -> None:
        """
        Saves the module and its parameters to a `.pkl` file.

        Args:
            path (str): The file path where the module should be saved.
        """
        with open(path, "wb") as f:
            pickle.dump(self, f)

    @staticmethod
    def load(path: str) -> Any:
        """
        Loads a module from a `.pkl` file.

        Args:
            path (str): The file path from which to load the module.

        Returns:
            Module: The loaded module.
        """
        with open(path, "rb") as f:
            return pickle.load(f)

    def __call__(self, x: Any) -> Any:
        return self.forward(x)


def _default_rng(rng: np.random.Generator | None) -> np.random.Generator:
    return rng if rng is not None else np.random.default_rng()


class Neuron(Module):
    """
    `gradops.model.Neuron` computes `sum_i(w_i * x_i) + b` over scalar inputs, optionally followed by ReLU.

    Attributes
    ----------
    weights (list[gradops.Value]): One weight per input, drawn from U(-1, 1).
    bias (gradops.Value): The bias, drawn from U(-1, 1).
    nonlin (bool): Whether ReLU is applied to the output.
    """

    def __init__(
        self,
        num_inputs: int,
        nonlin: bool = True,
        rng: np.random.Generator | None = None,
    ) -> None:
        assert num_inputs > 0, "A neuron needs at least one input."
        rng = _default_rng(rng)
        self.weights = [Value(w) for w in rng.uniform(-1.0, 1.0, num_inputs)]
        self.bias = Value(rng.uniform(-1.0, 1.0))
        self.nonlin = nonlin

    def parameters(self) -> list[Node]:
        return self.weights + [self.bias]

    def forward(self, x: Sequence[Value]) -> list[Value]:
        assert len(x) == len(self.weights), (
            f"Expected {len(self.weights)} inputs, got {len(x)}"
        )
        out = reduce(add, (mul(w, xi) for w, xi in zip(self.weights, x)))
        out = add(out, self.bias)
        return [relu(out) if self.nonlin else out]

    def __repr__(self) -> str:
        return f"{'ReLU' if self.nonlin else 'Linear'}{type(self).__name__}({len(self.weights)})"


class Layer(Module):
    def __init__(
        self,
        num_inputs: int,
        num_outputs: int,
        nonlin: bool = True,
        rng: np.random.Generator | None = None,
    ) -> None:
        rng = _default_rng(rng)
        self.neurons = [Neuron(num_inputs, nonlin, rng) for _ in range(num_outputs)]

    def parameters(self) -> list[Node]:
        return [p for neuron in self.neurons for p in neuron.parameters()]

    def forward(self, x: Sequence[Value]) -> list[Value]:
        return [out for neuron in self.neurons for out in neuron(x)]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.neurons})"


class MLP(Module):
    """
    `gradops.model.MLP` is a multilayer perceptron over `gradops.Value` nodes.

    Every layer but the last applies ReLU, the last one is linear.

    Attributes
    ----------
    layers (list[gradops.model.Layer]): The layers of the network, in order.
    """

    def __init__(
        self,
        num_inputs: int,
        layer_sizes: Sequence[int],
        rng: np.random.Generator | None = None,
    ) -> None:
        assert layer_sizes, "An MLP needs at least one layer."
        rng = _default_rng(rng)
        sizes = [num_inputs] + list(layer_sizes)
        self.layers = [
            Layer(sizes[i], sizes[i + 1], nonlin=i < len(layer_sizes) - 1, rng=rng)
            for i in range(len(layer_sizes))
        ]

    def parameters(self) -> list[Node]:
        return [p for layer in self.layers for p in layer.parameters()]

    def forward(self, x: Sequence[Value | float]) -> list[Value]:
        x = [xi if isinstance(xi, Node) else Value(xi) for xi in x]
        for layer in self.layers:
            x = layer(x)
        return x

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.layers})"


class Dense(Module):
    """
    `gradops.model.Dense` is a fully connected layer over `gradops.Tensor` nodes computing `activation_function(x @ W + b)`.

    Attributes
    ----------
    weights (gradops.Tensor): A (num_inputs, num_outputs) matrix drawn from U(-1, 1).
    bias (gradops.Tensor): A (1, num_outputs) row drawn from U(-1, 1).
    activation_function (Optional[Callable]): Non-linear function applied to the output, `None` for a linear layer.
    """

    def __init__(
        self,
        num_inputs: int,
        num_outputs: int,
        activation_function: Callable[[Node], Node] | None = relu,
        rng: np.random.Generator | None = None,
    ) -> None:
        rng = _default_rng(rng)
        self.num_inputs = num_inputs
        self.num_outputs = num_outputs
        self.weights = Tensor(rng.uniform(-1.0, 1.0, (num_inputs, num_outputs)))
        self.bias = Tensor(rng.uniform(-1.0, 1.0, (1, num_outputs)))
        self.activation_function = activation_function

    def parameters(self) -> list[Node]:
        return [self.weights, self.bias]

    def forward(self, x: Tensor) -> Tensor:
        out = add(dot(x, self.weights), self.bias)
        return self.activation_function(out) if self.activation_function else out

    def __repr__(self) -> str:
        return f"{type(self).__name__}(num_inputs={self.num_inputs}, num_outputs={self.num_outputs}, activation_function={self.activation_function.__name__ if self.activation_function else None})"


class TensorMLP(Module):
    """
    `gradops.model.TensorMLP` is a multilayer perceptron of `gradops.model.Dense` layers. Inputs are (1, num_inputs) rows.
    """

    def __init__(
        self,
        num_inputs: int,
        layer_sizes: Sequence[int],
        rng: np.random.Generator | None = None,
    ) -> None:
        assert layer_sizes, "An MLP needs at least one layer."
        rng = _default_rng(rng)
        sizes = [num_inputs] + list(layer_sizes)
        self.layers = [
            Dense(
                sizes[i],
                sizes[i + 1],
                activation_function=relu if i < len(layer_sizes) - 1 else None,
                rng=rng,
            )
            for i in range(len(layer_sizes))
        ]

    def parameters(self) -> list[Node]:
        return [p for layer in self.layers for p in layer.parameters()]

    def forward(self, x: Tensor | Any) -> Tensor:
        if not isinstance(x, Node):
            x = Tensor(np.reshape(x, (1, -1)))
        for layer in self.layers:
            x = layer(x)
        return x

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.layers})"
