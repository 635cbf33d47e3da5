from __future__ import annotations

from typing import Iterable

import matplotlib.pyplot as plt
import networkx as nx

from gradops.node import Node


class PlotterUtil:
    """
    Collects numbers such as per-epoch losses under a label and draws one curve per label with `matplotlib`.

    Attributes
    ----------
    x_label (str): Caption of the x-axis.
    y_label (str): Caption of the y-axis.
    curves (dict[str, dict]): For each label, its `"x"` and `"y"` lists plus the `"style"` and `"colour"` it is drawn with.
    """

    def __init__(self, x_label="Epoch", y_label="Loss"):
        self.x_label = x_label
        self.y_label = y_label
        self.curves = {}

    @property
    def labels(self) -> list[str]:
        return list(self.curves)

    def register_datapoint(
        self, datapoint, label, x=None, plot_style="line", colour=None
    ):
        """
        Appends `datapoint` to the curve called `label`, creating the curve on first use.

        `x` defaults to the number of points already on the curve. `plot_style` (`"line"` or `"scatter"`) and `colour` are taken from the call that creates the curve.
        """
        assert plot_style in ("line", "scatter"), f"Unknown plot style {plot_style}"
        curve = self.curves.setdefault(
            label, {"x": [], "y": [], "style": plot_style, "colour": colour}
        )
        curve["x"].append(len(curve["y"]) if x is None else x)
        curve["y"].append(datapoint)

    def plot(self, save_img=True, img_path="plot.png", display=True):
        draw = {"line": plt.plot, "scatter": plt.scatter}
        plt.figure()
        for label, curve in self.curves.items():
            draw[curve["style"]](curve["x"], curve["y"], label=label, color=curve["colour"])

        plt.xlabel(self.x_label)
        plt.ylabel(self.y_label)
        if self.curves:
            plt.legend()
        if save_img:
            plt.savefig(img_path)
        if display:
            plt.show()
        plt.close()


def build_graph(roots: Node | Iterable[Node]) -> nx.DiGraph:
    """
    Builds a `networkx.DiGraph` of the computational graph ending at `roots`, with an edge from every operand to the node computed from it.

    Graph nodes are keyed by `id()` of the `gradops.Node` and carry the attributes `node`, `op` and `label`.

    Args:
        roots (Union[gradops.Node, Iterable[gradops.Node]]): The output node(s) to walk back from.

    Returns:
        networkx.DiGraph: The computational graph.
    """
    G = nx.DiGraph()
    queue = [roots] if isinstance(roots, Node) else list(roots)
    while queue:
        node = queue.pop()
        if id(node) in G:
            continue
        label = type(node.op).__name__
        if node.shape:
            label += f"\nshape={node.shape}"
        else:
            label += f"\n{node.item():.4g}"
        G.add_node(id(node), node=node, op=type(node.op).__name__, label=label)
        for operand in node.operands:
            queue.append(operand)

    for node_id in list(G.nodes):
        node = G.nodes[node_id]["node"]
        for operand in node.operands:
            G.add_edge(id(operand), node_id)
    return G


def visualise_graph(
    roots: Node | Iterable[Node], save_img=True, img_path="graph.png", display=True
) -> nx.DiGraph:
    """
    Draws the computational graph ending at `roots` with `matplotlib`. Leaves are drawn in pink, computed nodes in green.

    Args:
        roots (Union[gradops.Node, Iterable[gradops.Node]]): The output node(s) to walk back from.
        save_img (bool): Whether to save the graph image to a file.
        img_path (str): Path to save the image.
        display (bool): Whether to display the graph using matplotlib.

    Returns:
        networkx.DiGraph: The graph that was drawn.
    """
    G = build_graph(roots)

    if not G.nodes:
        plt.figure(figsize=(6, 4))
        plt.text(0.5, 0.5, "Empty graph", ha="center", va="center", fontsize=12)
    else:
        try:
            pos = nx.planar_layout(G)
        except nx.NetworkXException:
            pos = nx.spring_layout(G, seed=42)

        node_colors = [
            "#FFB6C1" if G.nodes[n]["node"].is_leaf else "#C1E1C1" for n in G.nodes
        ]
        plt.figure(
            figsize=(max(10, G.number_of_nodes() * 0.8), max(8, G.number_of_nodes() * 0.6))
        )
        nx.draw(
            G,
            pos,
            labels=nx.get_node_attributes(G, "label"),
            with_labels=True,
            node_size=2500,
            node_color=node_colors,
            font_size=9,
            arrowsize=15,
            width=1.5,
        )

    if save_img:
        plt.savefig(img_path, bbox_inches="tight", dpi=150)
    if display:
        plt.show()
    plt.close()
    return G
