from graphviz import Digraph
from AcTrie import AcTrie, TrieNode, ROOT
import ac_common as acc
import os
import logging


def node_id(node: TrieNode) -> str:
    return f"n{node.node_id}"


def node_label(node: TrieNode) -> str:
    if node.node_id == ROOT:
        label = "root"
    elif isinstance(node.value, int):
        label = f"{node.value:02x}"
    else:
        label = f"{node.value!r}"
    if node.accept:
        label += f"\n#{node.pattern_id}"
    return label


def make_graph(trie: AcTrie, show_fail: bool = True, show_out: bool = True) -> Digraph:
    dg = Digraph(format="svg")
    dg.attr(rankdir="LR")
    dg.attr(ratio="compact")
    for node in trie.iter_bfs():
        shape = "doublecircle" if node.accept else "circle"
        dg.node(node_id(node), label=node_label(node), shape=shape)
    for node in trie.iter_bfs():
        for _, child_id in node.iter_children():
            dg.edge(node_id(node), node_id(trie.node(child_id)))
    if not trie.finalized:
        # links are stale after inserts
        return dg
    for node in trie.iter_bfs():
        if show_fail and node.node_id != ROOT and node.fail != ROOT:
            dg.edge(
                node_id(node),
                node_id(trie.node(node.fail)),  # type: ignore
                style="dashed",
                color="red",
                constraint="false",
            )
        if show_out and node.out is not None:
            dg.edge(
                node_id(node),
                node_id(trie.node(node.out)),
                style="dotted",
                color="blue",
                constraint="false",
            )
    return dg


def dump(trie: AcTrie, filename: str = "trie", fmt: str = "svg", dump_dir=None) -> str:
    """Render the trie to `dump_dir` (AC_DUMP_DIR by default); return the output path."""
    if dump_dir is None:
        dump_dir = acc.read_dump_dir()
    if not os.path.exists(dump_dir):
        os.makedirs(dump_dir)
    dg = make_graph(trie)
    out_path = dg.render(os.path.join(dump_dir, filename), format=fmt, cleanup=True)
    logging.debug(f"Dumped trie with {len(trie)} nodes to {out_path}")
    return out_path
