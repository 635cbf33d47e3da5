import numpy as np
import pytest

from gradops import SGD, Optim, Value, tensor


def test_sgd_step():
    p = Value(1.0)
    p.grad = 0.5
    SGD([p], lr=0.1).step()
    assert p.data == pytest.approx(0.95)


def test_sgd_maximise():
    p = Value(1.0)
    p.grad = 0.5
    SGD([p], lr=0.1, maximise=True).step()
    assert p.data == pytest.approx(1.05)


def test_sgd_weight_decay():
    p = Value(1.0)
    p.grad = 0.5
    SGD([p], lr=0.1, weight_decay=0.1).step()
    assert p.data == pytest.approx(0.94)


def test_sgd_momentum():
    p = Value(1.0)
    optim = SGD([p], lr=0.1, momentum=0.9)
    p.grad = 1.0
    optim.step()
    assert p.data == pytest.approx(0.9)
    optim.step()
    assert p.data == pytest.approx(0.9 - 0.1 * 1.9)


def test_sgd_grad_clip_value():
    p = Value(0.0)
    p.grad = 10.0
    SGD([p], lr=1.0, grad_clip_value=1.0).step()
    assert p.data == pytest.approx(-1.0)


def test_sgd_grad_clip_norm():
    p = tensor([0.0, 0.0])
    p.grad = np.array([3.0, 4.0], dtype=p.data.dtype)
    SGD([p], lr=1.0, grad_clip_norm=1.0).step()
    np.testing.assert_allclose(p.data, [-0.6, -0.8], rtol=1e-6)


def test_sgd_tensor_parameters():
    p = tensor([1.0, 2.0])
    p.grad = np.ones(2, dtype=p.data.dtype)
    SGD([p], lr=0.5).step()
    np.testing.assert_allclose(p.data, [0.5, 1.5])
    assert p.data.dtype == p.grad.dtype


def test_sgd_zero_grad():
    p = Value(1.0)
    p.grad = 3.0
    optim = SGD([p])
    optim.zero_grad()
    assert p.grad == 0.0


def test_save_and_load(tmp_path):
    optim = SGD([Value(1.0)], lr=0.25, momentum=0.5)
    path = tmp_path / "optim.pkl"
    optim.save(str(path))
    loaded = Optim.load(str(path))
    assert isinstance(loaded, SGD)
    assert loaded.lr == 0.25
    assert loaded.momentum == 0.5
    assert len(loaded.parameters) == 1


def test_sgd_momentum_buffer_is_not_the_gradient():
    p = tensor([1.0])
    p.grad = np.ones(1, dtype=p.data.dtype)
    optim = SGD([p], lr=0.1, momentum=0.9)
    optim.step()
    p.grad[0] = 100.0
    np.testing.assert_array_equal(optim.b_t[p], [1.0])
