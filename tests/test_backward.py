import pytest

from gradops import Value, add, backward, mul, topological_sort, zero_grad


def test_topological_sort_excludes_root():
    a, b = Value(1.0), Value(2.0)
    c = mul(a, b)
    topo = topological_sort(c)
    assert len(topo) == 2
    assert all(node is not c for node in topo)


def test_topological_sort_post_order():
    a, b = Value(1.0), Value(2.0)
    c = mul(a, b)
    d = add(c, a)
    topo = topological_sort(d)
    assert [id(node) for node in topo] == [id(a), id(b), id(c)]


def test_topological_sort_visits_shared_nodes_once():
    a = Value(2.0)
    b = mul(a, a)
    c = add(b, b)
    topo = topological_sort(c)
    assert [id(node) for node in topo] == [id(a), id(b)]


def test_operands_before_consumers():
    x = Value(0.5)
    y = Value(-1.5)
    h1 = mul(x, y)
    h2 = add(h1, x)
    h3 = mul(h2, h1)
    out = add(h3, y)
    topo = topological_sort(out)
    position = {id(node): i for i, node in enumerate(topo)}
    for node in topo:
        for operand in node.operands:
            assert position[id(operand)] < position[id(node)]


def test_leaf_backward_seeds_itself():
    a = Value(3.0)
    a.backward()
    assert a.grad == 1.0


def test_diamond_graph():
    a = Value(3.0)
    b = mul(a, Value(2.0))
    c = mul(a, a)
    d = add(b, c)
    backward(d)
    # d = 2a + a^2
    assert a.grad == pytest.approx(2.0 + 2 * 3.0)
    assert b.grad == 1.0
    assert c.grad == 1.0


def test_deep_graph_does_not_recurse():
    x = Value(1.0)
    out = x
    for _ in range(3000):
        out = add(out, Value(1.0))
    assert out.data == 3001.0
    out.backward()
    assert x.grad == 1.0


def test_zero_grad_helper():
    a, b = Value(2.0), Value(6.0)
    mul(a, b).backward()
    zero_grad([a, b])
    assert a.grad == 0.0
    assert b.grad == 0.0
