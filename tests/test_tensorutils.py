from gradops import PlotterUtil, Value, add, build_graph, mul, tensor, visualise_graph
from gradops.loss import SquaredErrorLoss


def test_build_graph():
    a, b = Value(2.0), Value(3.0)
    c = mul(a, b)
    d = add(c, a)
    G = build_graph(d)
    assert G.number_of_nodes() == 4
    assert G.number_of_edges() == 4
    assert G.has_edge(id(a), id(c))
    assert G.has_edge(id(a), id(d))
    assert G.has_edge(id(c), id(d))
    assert G.nodes[id(d)]["op"] == "Add"
    assert G.nodes[id(a)]["op"] == "Leaf"


def test_build_graph_from_several_roots():
    a = tensor([1.0, 2.0])
    G = build_graph([mul(a, a), add(a, a)])
    assert G.number_of_nodes() == 3
    assert G.in_degree(id(a)) == 0


def test_visualise_graph(tmp_path):
    a, b = Value(2.0), Value(3.0)
    loss = SquaredErrorLoss()(mul(a, b), Value(1.0))
    path = tmp_path / "graph.png"
    G = visualise_graph(loss, img_path=str(path), display=False)
    assert path.exists()
    assert G.number_of_nodes() > 3


def test_visualise_empty_graph(tmp_path):
    path = tmp_path / "empty.png"
    G = visualise_graph([], img_path=str(path), display=False)
    assert path.exists()
    assert G.number_of_nodes() == 0


def test_plotter(tmp_path):
    plot = PlotterUtil()
    for i, loss in enumerate([3.0, 2.0, 1.5]):
        plot.register_datapoint(loss, "train")
        plot.register_datapoint(loss + 0.5, "test", x=i * 2, plot_style="scatter")
    assert plot.curves["train"]["x"] == [0, 1, 2]
    assert plot.curves["test"]["x"] == [0, 2, 4]
    path = tmp_path / "loss.png"
    plot.plot(img_path=str(path), display=False)
    assert path.exists()
