# Train a scalar multi-layer perceptron built from `gradops.Value` nodes on a 4-sample toy dataset

import numpy as np

from gradops import MLP, train
from gradops.tensorutils import PlotterUtil

LEARNING_RATE = 1e-3
EPOCHS = 100

X = [[2.0, 3.0, -1.0], [3.0, -1.0, 0.5], [0.5, 1.0, 1.0], [1.0, 1.0, -1.0]]
y = [1.0, -1.0, -1.0, -1.0]


if __name__ == "__main__":
    model = MLP(3, [4, 4, 1], rng=np.random.default_rng(42))
    loss_plot = PlotterUtil()

    history = train(model, X, y, epochs=EPOCHS, lr=LEARNING_RATE, loss_plot=loss_plot)

    for epoch, loss in enumerate(history):
        print(f"Epoch: {epoch}/{EPOCHS - 1} - Loss {loss}")
    print("predictions", [model(x)[0].data for x in X])

    loss_plot.plot(img_path="mlp_loss.png")
