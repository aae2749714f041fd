# src/ordered_index/viz/visualizer.py
"""
Visualizador sencillo que usa networkx + matplotlib para dibujar la estructura del árbol.
Si no están instalados, lanza ImportError al importarlo (CLI lo manejará).
"""
import networkx as nx
import matplotlib.pyplot as plt


def tree_layout(G):
    """
    Posiciones jerárquicas: las hojas se reparten en x según el orden del recorrido,
    cada nodo interno queda centrado sobre sus hijos y y = -nivel.
    """
    pos = {}
    next_x = 0

    def place(n):
        nonlocal next_x
        children = sorted(G.successors(n), key=lambda c: G.edges[n, c]["index"])
        if not children:
            x = float(next_x)
            next_x += 1
        else:
            xs = [place(c) for c in children]
            x = sum(xs) / len(xs)
        pos[n] = (x, -float(G.nodes[n]["level"]))
        return x

    roots = [n for n, d in G.in_degree() if d == 0]
    for r in roots:
        place(r)
    return pos


def visualize_tree(tree, title="Árbol B", out_path=None):
    """
    tree: BTree (usa tree.to_networkx())
    out_path: si se indica, guarda la figura en ese archivo; si no, la muestra.
    """
    G = tree.to_networkx()
    pos = tree_layout(G)

    leaves = [n for n, d in G.nodes(data=True) if d["leaf"]]
    internals = [n for n, d in G.nodes(data=True) if not d["leaf"]]

    # ancho según número de hojas para que las etiquetas no se encimen
    plt.figure(figsize=(max(6, 1.6 * len(leaves)), 1.5 + 1.5 * tree.height))
    nx.draw_networkx_edges(G, pos, arrows=False, width=1.0, alpha=0.7)
    nx.draw_networkx_nodes(G, pos, nodelist=internals, node_shape="s", node_size=900, node_color="lightsteelblue")
    nx.draw_networkx_nodes(G, pos, nodelist=leaves, node_shape="s", node_size=900, node_color="palegreen")
    labels = {n: d["label"] or "-" for n, d in G.nodes(data=True)}
    nx.draw_networkx_labels(G, pos, labels=labels, font_size=7)

    plt.title(title)
    plt.axis('off')
    if out_path is not None:
        plt.savefig(out_path, bbox_inches="tight")
        plt.close()
        return out_path
    plt.show()
    return None
