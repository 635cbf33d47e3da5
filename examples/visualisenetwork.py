# Draw the computational graph of a single neuron and its squared error

import numpy as np

from gradops import Neuron, Value
from gradops.loss import SquaredErrorLoss
from gradops.tensorutils import visualise_graph

if __name__ == "__main__":
    neuron = Neuron(2, nonlin=False, rng=np.random.default_rng(0))
    (output,) = neuron([Value(0.5), Value(-1.0)])
    loss = SquaredErrorLoss()(output, Value(1.0))
    loss.backward()

    for param in neuron.parameters():
        print(param)

    visualise_graph(loss, img_path="neuron_graph.png")
