import numpy as np
import pytest

from gradops import Tensor, dot, relu, tanh
from gradops.loss import squared_error

torch = pytest.importorskip("torch")


def test_matches_torch_autograd(rng):
    x = rng.normal(size=(2, 3))
    w = rng.normal(size=(3, 4))
    v = rng.normal(size=(4, 1))
    y = rng.normal(size=(2, 1))

    xg, wg, vg, yg = Tensor(x), Tensor(w), Tensor(v), Tensor(y)
    out = dot(tanh(relu(dot(xg, wg)) * 0.5), vg) ** 3
    loss = squared_error(yg, out)
    loss.backward()

    xt, wt, vt = (torch.tensor(a, dtype=torch.float64, requires_grad=True) for a in (x, w, v))
    out_t = (torch.tanh(torch.relu(xt @ wt) * 0.5) @ vt) ** 3
    loss_t = ((torch.tensor(y) - out_t) ** 2).sum()
    loss_t.backward()

    np.testing.assert_allclose(np.sum(loss.data), loss_t.item(), rtol=1e-4)
    np.testing.assert_allclose(xg.grad, xt.grad.numpy(), rtol=1e-3, atol=1e-4)
    np.testing.assert_allclose(wg.grad, wt.grad.numpy(), rtol=1e-3, atol=1e-4)
    np.testing.assert_allclose(vg.grad, vt.grad.numpy(), rtol=1e-3, atol=1e-4)
