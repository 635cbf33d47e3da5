# Train a multi-layer perceptron of `gradops.model.Dense` layers, computing each layer as relu(x @ W + b)

from functools import reduce

import numpy as np
from tqdm import tqdm

from gradops import SGD, Tensor, TensorMLP, add, squared_error
from gradops.tensorutils import PlotterUtil

LEARNING_RATE = 1e-3
EPOCHS = 100

X = [
    Tensor([[2.0, 3.0, -1.0]]),
    Tensor([[3.0, -1.0, 0.5]]),
    Tensor([[0.5, 1.0, 1.0]]),
    Tensor([[1.0, 1.0, -1.0]]),
]
y = [Tensor([[1.0]]), Tensor([[-1.0]]), Tensor([[-1.0]]), Tensor([[-1.0]])]


def training_loop(X_train, y_train, model, optim, loss_plot):
    preds = [model(x) for x in X_train]
    loss = reduce(add, (squared_error(y_true, y_pred) for y_true, y_pred in zip(y_train, preds)))
    model.zero_grad()
    loss.backward()
    optim.step()
    loss_plot.register_datapoint(loss.item(), f"{type(model).__name__}-GradOps")
    return loss


if __name__ == "__main__":
    model = TensorMLP(3, [4, 4, 1], rng=np.random.default_rng(42))
    optim = SGD(model.parameters(), lr=LEARNING_RATE)
    loss_plot = PlotterUtil()

    for epoch in tqdm(range(EPOCHS), desc=f"Training {type(model).__name__}-GradOps"):
        loss = training_loop(X, y, model, optim, loss_plot)
    print(f"Epoch: {EPOCHS - 1}/{EPOCHS - 1} - Loss {loss.item()}")

    model.save("tensormlp.pkl")
    loss_plot.plot(img_path="tensormlp_loss.png")
