import numpy as np
import pytest

from gradops import MLP, PlotterUtil, SquaredErrorLoss, TensorMLP, Value, train
from gradops.train import total_loss

xs = [[2.0, 3.0, -1.0], [3.0, -1.0, 0.5], [0.5, 1.0, 1.0], [1.0, 1.0, -1.0]]
ys = [1.0, -1.0, -1.0, -1.0]


def test_total_loss_sums_squared_errors(rng):
    model = MLP(3, [4, 1], rng=rng)
    loss = total_loss(model, xs, ys)
    expected = sum((y - model(x)[0].data) ** 2 for x, y in zip(xs, ys))
    assert loss.data == pytest.approx(expected)


def test_total_loss_matches_loss_class(rng):
    model = MLP(3, [4, 1], rng=rng)
    outputs = [model(x)[0] for x in xs]
    loss = SquaredErrorLoss()(outputs, [Value(y) for y in ys])
    assert total_loss(model, xs, ys).data == pytest.approx(loss.data)


def test_train_scalar_mlp(rng):
    model = MLP(3, [4, 4, 1], rng=rng)
    history = train(model, xs, ys, epochs=50, lr=5e-4, progress=False)
    assert len(history) == 50
    assert history[-1] < history[0]


def test_train_tensor_mlp(rng):
    model = TensorMLP(3, [4, 4, 1], rng=rng)
    history = train(model, xs, ys, epochs=50, lr=5e-4, progress=False)
    assert len(history) == 50
    assert all(np.isfinite(history))
    assert history[-1] < history[0]


def test_train_records_loss_plot(rng):
    model = MLP(3, [2, 1], rng=rng)
    plot = PlotterUtil()
    history = train(model, xs, ys, epochs=3, loss_plot=plot, progress=False)
    assert plot.labels == ["MLP-GradOps"]
    assert plot.curves["MLP-GradOps"]["y"] == history


def test_train_rejects_mismatched_dataset(rng):
    model = MLP(3, [1], rng=rng)
    with pytest.raises(AssertionError):
        train(model, xs, ys[:2], epochs=1, progress=False)
